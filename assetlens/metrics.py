"""
Metric catalog: the closed set of cached series ids and their descriptors.
"""
from __future__ import annotations

from enum import Enum

from assetlens.models import Asset, RiskRegime, SeriesMetadata


class MetricId(str, Enum):
    BTC_PRICE = "btc_price"
    ETH_PRICE = "eth_price"
    TOTAL_MARKET_CAP = "total_crypto_market_cap"
    VOLATILITY = "volatility_proxy"
    DRAWDOWN = "market_drawdown_percent"
    STABLECOIN_SUPPLY = "stablecoin_total_supply"
    STABLECOIN_ISSUANCE_30D = "stablecoin_net_issuance_30d"
    STABLECOIN_VELOCITY = "stablecoin_velocity_proxy"
    ONCHAIN_VOLUME = "on_chain_transfer_volume"
    ACTIVE_ADDRESSES = "active_addresses_proxy"
    NETWORK_FEES = "network_fee_proxy"
    ETF_FLOWS = "btc_etf_net_flows"
    ETF_CUMULATIVE_FLOWS = "btc_etf_cumulative_flows"
    ETF_MOMENTUM = "etf_flow_momentum_score"
    FUTURES_OI = "futures_open_interest"
    LEVERAGE_RATIO = "leverage_ratio_proxy"
    FUNDING_RATE = "funding_rate_proxy"
    LIQUIDATIONS = "liquidation_volume_proxy"
    RISK_REGIME = "risk_regime"
    LIQUIDITY_STRESS = "crypto_liquidity_stress_index"

    @classmethod
    def parse(cls, metric_id: str) -> "MetricId | None":
        try:
            return cls(metric_id)
        except ValueError:
            return None


def _meta(label: str, unit: str, notes: str, asset: Asset | None = None) -> SeriesMetadata:
    return SeriesMetadata(label=label, unit=unit, notes=notes, asset=asset)


METRIC_METADATA: dict[MetricId, SeriesMetadata] = {
    MetricId.BTC_PRICE: _meta("BTC Price", "USD", "Bitcoin spot price with regime-based dynamics", Asset.BTC),
    MetricId.ETH_PRICE: _meta("ETH Price", "USD", "Ethereum spot price correlated to BTC", Asset.ETH),
    MetricId.TOTAL_MARKET_CAP: _meta(
        "Total Crypto Market Cap", "Trillions USD", "Aggregate market capitalization of digital assets", Asset.TOTAL
    ),
    MetricId.VOLATILITY: _meta("Volatility Proxy", "% Annualized", "30-day realized volatility", Asset.BTC),
    MetricId.DRAWDOWN: _meta("Market Drawdown", "%", "Drawdown from peak price", Asset.BTC),
    MetricId.STABLECOIN_SUPPLY: _meta(
        "Stablecoin Total Supply", "Billions USD", "Aggregate stablecoin supply as dollar rail proxy", Asset.STABLES
    ),
    MetricId.STABLECOIN_ISSUANCE_30D: _meta(
        "Stablecoin Net Issuance (30d)", "Billions USD", "30-day change in stablecoin supply", Asset.STABLES
    ),
    MetricId.STABLECOIN_VELOCITY: _meta(
        "Stablecoin Velocity Proxy", "Index", "Normalized velocity of stablecoin circulation", Asset.STABLES
    ),
    MetricId.ONCHAIN_VOLUME: _meta("On-Chain Transfer Volume", "Billions USD", "Daily on-chain transaction volume"),
    MetricId.ACTIVE_ADDRESSES: _meta("Active Addresses Proxy", "Index", "Normalized active address count"),
    MetricId.NETWORK_FEES: _meta("Network Fee Proxy", "Millions USD", "Daily network fees as congestion indicator"),
    MetricId.ETF_FLOWS: _meta("BTC ETF Net Flows", "Millions USD", "Daily net institutional ETF flows", Asset.BTC),
    MetricId.ETF_CUMULATIVE_FLOWS: _meta(
        "BTC ETF Cumulative Flows", "Billions USD", "Cumulative institutional ETF positioning", Asset.BTC
    ),
    MetricId.ETF_MOMENTUM: _meta("ETF Flow Momentum Score", "Score 0-100", "20-day flow momentum indicator", Asset.BTC),
    MetricId.FUTURES_OI: _meta("Futures Open Interest", "Billions USD", "Aggregate derivatives open interest"),
    MetricId.LEVERAGE_RATIO: _meta("Leverage Ratio Proxy", "%", "Open interest as % of market cap"),
    MetricId.FUNDING_RATE: _meta("Funding Rate Proxy", "% APR", "Perpetual futures funding rate"),
    MetricId.LIQUIDATIONS: _meta("Liquidation Volume Proxy", "Billions USD", "Estimated daily liquidation volume"),
    MetricId.RISK_REGIME: _meta(
        "Risk Regime", "Categorical", "Market risk classification coded risk_on=1, neutral=0, risk_off=-1"
    ),
    MetricId.LIQUIDITY_STRESS: _meta(
        "Crypto Liquidity Stress Index", "Score 0-100", "Composite stress indicator from volatility, leverage, and volume"
    ),
}


RISK_REGIME_CODES: dict[RiskRegime, float] = {
    RiskRegime.RISK_ON: 1.0,
    RiskRegime.NEUTRAL: 0.0,
    RiskRegime.RISK_OFF: -1.0,
}


def decode_risk_regime(code: float) -> RiskRegime:
    """Map a cached risk-regime code back to its label (nearest code wins)."""
    return min(RISK_REGIME_CODES, key=lambda r: abs(RISK_REGIME_CODES[r] - code))


def metadata_for(metric_id: str) -> SeriesMetadata:
    """Static descriptor lookup; unknown ids get a generic fallback."""
    key = MetricId.parse(metric_id)
    if key is None or key not in METRIC_METADATA:
        return SeriesMetadata(label=metric_id, unit="", notes="")
    return METRIC_METADATA[key].model_copy()
