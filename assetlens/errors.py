"""
Error classes for assetlens.
"""


class AssetLensError(Exception):
    """Base error for assetlens operations."""
    pass


class UnknownMetric(AssetLensError, LookupError):
    """Requested metric id is not present in the provider cache."""

    def __init__(self, metric_id: str):
        super().__init__(f"Metric not found: {metric_id}")
        self.metric_id = metric_id


class ProviderNotImplemented(AssetLensError, NotImplementedError):
    """A non-synthetic provider was invoked."""
    pass


class InvalidRange(AssetLensError, ValueError):
    """Malformed date bound, or end before start."""
    pass
