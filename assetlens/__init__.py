"""
assetlens - synthetic digital-asset market structure data.

Usage:
    import asyncio
    from assetlens.data import get_data_provider
    provider = get_data_provider()
    series = asyncio.run(provider.get_series("btc_price", start_date="2024-01-01"))
"""

__version__ = "0.1.0"
