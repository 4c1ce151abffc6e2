"""
Synthetic series generators for digital-asset market structure.

Every generator consumes the per-day regimes (``RegimeProcess.align(dates)``)
and/or earlier series, and draws from one shared ``RandomSource``:
  - BTC price: regime drift + diffusion, clamped to a realistic band
  - ETH price: 0.85 loading on BTC returns plus idiosyncratic noise
  - Volatility: regime level blended with 30d realized vol
  - Stablecoins: supply grows in bulls, bleeds in bears
  - On-chain activity: volume scales with vol and market cap
  - ETF flows: persistent momentum toward a regime target
  - Derivatives: OI / leverage / funding / liquidations keyed to regime
  - Risk composites: risk regime label and liquidity stress index

``generate_market`` runs them in dependency order.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Sequence

import numpy as np
import pandas as pd

from assetlens.config import EngineConfig
from assetlens.errors import InvalidRange
from assetlens.metrics import RISK_REGIME_CODES, MetricId
from assetlens.models import RiskRegime
from assetlens.regimes.base import MarketRegime, RegimeKind
from assetlens.regimes.process import RegimeProcess
from assetlens.utils.rng import RandomSource
from assetlens.utils.dates import to_timestamp

logger = logging.getLogger(__name__)

TRADING_DAYS = 252

# Daily drift per regime kind
PRICE_DRIFT: dict[RegimeKind, float] = {
    RegimeKind.BULL: 0.0015,   # ~50% annual
    RegimeKind.BEAR: -0.0020,  # ~-50% annual
    RegimeKind.SIDEWAYS: 0.0002,
}

BTC_PRICE_BOUNDS = (10_000.0, 150_000.0)
BTC_START_RANGE = (30_000.0, 50_000.0)
ETH_PRICE_BOUNDS = (500.0, 10_000.0)
ETH_START_RANGE = (1_500.0, 2_500.0)
ETH_BTC_CORRELATION = 0.85

BTC_SUPPLY = 19.5e6
ETH_SUPPLY = 120e6
OTHERS_SHARE = 0.30  # rest of market as a share of BTC + ETH cap

VOLATILITY_BOUNDS = (0.0, 150.0)
REALIZED_WEIGHT = 0.7

STABLECOIN_BOUNDS = (80.0, 180.0)
STABLECOIN_START_RANGE = (100.0, 120.0)
STABLECOIN_GROWTH: dict[RegimeKind, tuple[float, float]] = {
    RegimeKind.BULL: (0.001, 0.002),
    RegimeKind.BEAR: (-0.0005, 0.0),
    RegimeKind.SIDEWAYS: (0.0, 0.0005),
}

ETF_FLOW_TARGET: dict[RegimeKind, float | None] = {
    RegimeKind.BULL: 200.0,
    RegimeKind.BEAR: -100.0,
    RegimeKind.SIDEWAYS: None,  # momentum decays instead
}
ETF_FLOW_SHOCK = 150.0

OI_RATIO: dict[RegimeKind, tuple[float, float]] = {
    RegimeKind.BULL: (0.18, 0.23),
    RegimeKind.BEAR: (0.10, 0.15),
    RegimeKind.SIDEWAYS: (0.15, 0.15),
}

# Funding in % APR
FUNDING_BASELINE = 1.0
FUNDING_LEVERED_BULL = (5.0, 10.0)
FUNDING_BEAR = (-2.0, 0.0)
FUNDING_LEVERAGE_TRIGGER = 18.0


def build_daily_dates(start, end) -> pd.DatetimeIndex:
    """Inclusive daily axis over ``[start, end]``."""
    start_ts = to_timestamp(start, name="start")
    end_ts = to_timestamp(end, name="end")
    if start_ts is None or end_ts is None:
        raise InvalidRange("Daily axis needs both a start and an end")
    if end_ts < start_ts:
        raise InvalidRange(f"Daily axis ends ({end_ts.date()}) before it starts ({start_ts.date()})")
    return pd.date_range(start_ts, end_ts, freq="D")


# =============================================================================
# Prices
# =============================================================================

def generate_btc_price(regimes: Sequence[MarketRegime], rng: RandomSource) -> np.ndarray:
    lo, hi = BTC_PRICE_BOUNDS
    prices = np.empty(len(regimes))
    price = rng.uniform(*BTC_START_RANGE)

    for i, regime in enumerate(regimes):
        daily_vol = regime.volatility / math.sqrt(TRADING_DAYS)
        shock = rng.gaussian() * (daily_vol / 100)
        price = price * (1 + PRICE_DRIFT[regime.kind] + shock)
        price = max(lo, min(hi, price))
        prices[i] = price

    return prices


def generate_eth_price(btc_prices: np.ndarray, rng: RandomSource) -> np.ndarray:
    """ETH price correlated to BTC returns."""
    lo, hi = ETH_PRICE_BOUNDS
    prices = np.empty(len(btc_prices))
    price = rng.uniform(*ETH_START_RANGE)

    for i in range(len(btc_prices)):
        btc_return = btc_prices[i] / btc_prices[i - 1] - 1 if i > 0 else 0.0
        idiosyncratic = rng.gaussian() * 0.015 * (1 - ETH_BTC_CORRELATION)
        price = price * (1 + ETH_BTC_CORRELATION * btc_return + idiosyncratic)
        price = max(lo, min(hi, price))
        prices[i] = price

    return prices


def generate_market_cap(btc_prices: np.ndarray, eth_prices: np.ndarray) -> np.ndarray:
    """Aggregate market cap in trillions USD."""
    majors = np.asarray(btc_prices) * BTC_SUPPLY + np.asarray(eth_prices) * ETH_SUPPLY
    return majors * (1 + OTHERS_SHARE) / 1e12


# =============================================================================
# Volatility & drawdown
# =============================================================================

def generate_volatility(
    prices: np.ndarray,
    regimes: Sequence[MarketRegime],
    window: int = 30,
) -> np.ndarray:
    """
    Realized volatility proxy (annualized %).

    The first ``window`` days carry the regime's assigned level; after that the
    population std of the last ``window`` daily log returns (annualized) is
    blended 70/30 with it.
    """
    assigned = np.array([r.volatility for r in regimes], dtype=float)
    log_returns = np.log(pd.Series(prices, dtype=float)).diff()
    realized = (log_returns.rolling(window).std(ddof=0) * math.sqrt(TRADING_DAYS) * 100).to_numpy()

    blended = REALIZED_WEIGHT * realized + (1 - REALIZED_WEIGHT) * assigned
    vol = np.where(np.arange(len(assigned)) < window, assigned, blended)
    return np.clip(vol, *VOLATILITY_BOUNDS)


def generate_drawdown(prices) -> np.ndarray:
    """Percent drawdown from the running peak (always <= 0)."""
    px = np.asarray(prices, dtype=float)
    if px.size == 0:
        return px
    peak = np.maximum.accumulate(px)
    return (px - peak) / peak * 100


# =============================================================================
# Stablecoins
# =============================================================================

def generate_stablecoin_supply(regimes: Sequence[MarketRegime], rng: RandomSource) -> np.ndarray:
    """Stablecoin supply in billions USD."""
    lo, hi = STABLECOIN_BOUNDS
    supply = np.empty(len(regimes))
    current = rng.uniform(*STABLECOIN_START_RANGE)

    for i, regime in enumerate(regimes):
        growth = rng.uniform(*STABLECOIN_GROWTH[regime.kind])
        current = max(lo, min(hi, current * (1 + growth)))
        supply[i] = current

    return supply


def generate_stablecoin_issuance(supply: np.ndarray, window: int = 30) -> np.ndarray:
    """Net issuance over ``window`` days (0 until the window fills)."""
    supply = np.asarray(supply, dtype=float)
    issuance = np.zeros(len(supply))
    if len(supply) > window:
        issuance[window:] = supply[window:] - supply[:-window]
    return issuance


def generate_stablecoin_velocity(volume: np.ndarray, supply: np.ndarray, rng: RandomSource) -> np.ndarray:
    out = np.empty(len(volume))
    for i in range(len(volume)):
        velocity = volume[i] / supply[i] * 100
        out[i] = 80 + velocity * 0.2 + rng.uniform(0, 10)
    return out


# =============================================================================
# On-chain activity
# =============================================================================

def generate_onchain_volume(volatility: np.ndarray, market_cap: np.ndarray, rng: RandomSource) -> np.ndarray:
    """Daily transfer volume in billions USD; rises with vol and market cap."""
    out = np.empty(len(volatility))
    for i in range(len(volatility)):
        base = rng.uniform(20, 30)
        vol_multiplier = 1 + volatility[i] / 100
        cap_multiplier = market_cap[i] / 1.5
        out[i] = base * vol_multiplier * cap_multiplier * rng.uniform(0.8, 1.2)
    return out


def generate_active_addresses(volume: np.ndarray, rng: RandomSource) -> np.ndarray:
    """Active address index, normalized around 100."""
    return np.array([70 + (v / 100) * 30 + rng.uniform(0, 10) for v in volume])


def generate_network_fees(volume: np.ndarray, regimes: Sequence[MarketRegime], rng: RandomSource) -> np.ndarray:
    out = np.empty(len(volume))
    for i, (v, regime) in enumerate(zip(volume, regimes)):
        congestion = 1.5 if regime.kind is RegimeKind.BULL else 0.7
        base_fee = 5 + (v / 50) * 15
        out[i] = base_fee * congestion * rng.uniform(0.7, 1.3)
    return out


# =============================================================================
# ETF flows
# =============================================================================

def generate_etf_flows(regimes: Sequence[MarketRegime], rng: RandomSource) -> np.ndarray:
    """Daily net ETF flows (millions USD) with persistent momentum."""
    flows = np.empty(len(regimes))
    momentum = 0.0

    for i, regime in enumerate(regimes):
        shock = rng.gaussian() * ETF_FLOW_SHOCK
        target = ETF_FLOW_TARGET[regime.kind]
        if target is None:
            momentum = 0.9 * momentum
        else:
            momentum = 0.8 * momentum + 0.2 * target
        flows[i] = momentum + shock

    return flows


def generate_cumulative_etf_flows(flows: np.ndarray) -> np.ndarray:
    """Running total in billions USD."""
    return np.cumsum(np.asarray(flows, dtype=float) / 1000)


def generate_etf_momentum(flows: np.ndarray, window: int = 20) -> np.ndarray:
    """0-100 score from the trailing ``window``-day average flow (50 until filled)."""
    trailing = pd.Series(flows, dtype=float).rolling(window).mean().shift(1).to_numpy()
    score = np.clip(50 + (trailing / 200) * 50, 0, 100)
    return np.where(np.arange(len(score)) < window, 50.0, score)


# =============================================================================
# Derivatives
# =============================================================================

def generate_futures_oi(regimes: Sequence[MarketRegime], market_cap: np.ndarray, rng: RandomSource) -> np.ndarray:
    """Open interest in billions USD as a regime-dependent share of market cap."""
    out = np.empty(len(regimes))
    for i, regime in enumerate(regimes):
        lo, hi = OI_RATIO[regime.kind]
        ratio = lo if lo == hi else rng.uniform(lo, hi)
        out[i] = market_cap[i] * 1000 * ratio
    return out


def generate_leverage_ratio(oi: np.ndarray, market_cap: np.ndarray) -> np.ndarray:
    """Open interest as % of market cap."""
    return np.asarray(oi, dtype=float) / (np.asarray(market_cap, dtype=float) * 1000) * 100


def generate_funding_rate(regimes: Sequence[MarketRegime], leverage: np.ndarray, rng: RandomSource) -> np.ndarray:
    out = np.empty(len(regimes))
    for i, regime in enumerate(regimes):
        funding = FUNDING_BASELINE
        if regime.kind is RegimeKind.BULL and leverage[i] > FUNDING_LEVERAGE_TRIGGER:
            funding = rng.uniform(*FUNDING_LEVERED_BULL)
        elif regime.kind is RegimeKind.BEAR:
            funding = rng.uniform(*FUNDING_BEAR)
        out[i] = funding
    return out


def generate_liquidations(
    regimes: Sequence[MarketRegime],
    volatility: np.ndarray,
    leverage: np.ndarray,
    rng: RandomSource,
) -> np.ndarray:
    """Liquidation volume (billions USD); bear regimes carry 5x cascade spikes."""
    out = np.empty(len(regimes))
    for i, regime in enumerate(regimes):
        vol_factor = volatility[i] / 50
        lev_factor = leverage[i] / 15
        spike = 5.0 if regime.kind is RegimeKind.BEAR and rng.random() < 0.05 else 1.0
        out[i] = 0.5 * vol_factor * lev_factor * spike * rng.uniform(0.5, 1.5)
    return out


# =============================================================================
# Risk composites
# =============================================================================

def classify_risk_regime(volatility: float, leverage: float) -> RiskRegime:
    if volatility > 70 or leverage < 12:
        return RiskRegime.RISK_OFF
    if volatility < 40 and leverage > 17:
        return RiskRegime.RISK_ON
    return RiskRegime.NEUTRAL


def generate_risk_regime(volatility: np.ndarray, leverage: np.ndarray) -> list[RiskRegime]:
    return [classify_risk_regime(float(v), float(lev)) for v, lev in zip(volatility, leverage)]


def liquidity_stress(volatility: float, leverage: float, volume: float) -> float:
    """Weighted composite of volatility, (low) leverage and (low) volume."""
    vol_score = min(100.0, max(0.0, volatility))
    leverage_score = min(100.0, max(0.0, 100 - leverage * 4))
    volume_score = min(100.0, max(0.0, 100 - (volume / 100) * 50))
    stress = vol_score * 0.4 + leverage_score * 0.3 + volume_score * 0.3
    return max(0.0, min(100.0, stress))


def generate_liquidity_stress(volatility: np.ndarray, leverage: np.ndarray, volume: np.ndarray) -> np.ndarray:
    return np.array([liquidity_stress(float(v), float(lev), float(q)) for v, lev, q in zip(volatility, leverage, volume)])


# =============================================================================
# Orchestration
# =============================================================================

@dataclass(frozen=True, eq=False)
class MarketSeries:
    """Struct-of-arrays for one engine run, aligned to ``dates``."""
    dates: pd.DatetimeIndex
    btc_price: np.ndarray
    eth_price: np.ndarray
    total_crypto_market_cap: np.ndarray
    volatility_proxy: np.ndarray
    market_drawdown_percent: np.ndarray
    stablecoin_total_supply: np.ndarray
    stablecoin_net_issuance_30d: np.ndarray
    stablecoin_velocity_proxy: np.ndarray
    on_chain_transfer_volume: np.ndarray
    active_addresses_proxy: np.ndarray
    network_fee_proxy: np.ndarray
    btc_etf_net_flows: np.ndarray
    btc_etf_cumulative_flows: np.ndarray
    etf_flow_momentum_score: np.ndarray
    futures_open_interest: np.ndarray
    leverage_ratio_proxy: np.ndarray
    funding_rate_proxy: np.ndarray
    liquidation_volume_proxy: np.ndarray
    risk_regime: np.ndarray
    crypto_liquidity_stress_index: np.ndarray
    risk_regime_labels: tuple[RiskRegime, ...] = ()

    def as_dict(self) -> dict[MetricId, np.ndarray]:
        """Numeric arrays keyed by metric id (read-only views)."""
        out: dict[MetricId, np.ndarray] = {}
        for f in fields(self):
            key = MetricId.parse(f.name)
            if key is None:
                continue
            arr = np.array(getattr(self, f.name), dtype=float)
            arr.setflags(write=False)
            out[key] = arr
        return out


def generate_market(
    dates: pd.DatetimeIndex,
    process: RegimeProcess,
    rng: RandomSource,
    config: EngineConfig | None = None,
) -> MarketSeries:
    """Generate every series in dependency order."""
    cfg = config or EngineConfig()
    regimes = process.align(dates)

    btc = generate_btc_price(regimes, rng)
    eth = generate_eth_price(btc, rng)
    market_cap = generate_market_cap(btc, eth)

    volatility = generate_volatility(btc, regimes, window=cfg.volatility_window)
    drawdown = generate_drawdown(btc)

    supply = generate_stablecoin_supply(regimes, rng)
    issuance = generate_stablecoin_issuance(supply, window=cfg.lookback_days)

    volume = generate_onchain_volume(volatility, market_cap, rng)
    velocity = generate_stablecoin_velocity(volume, supply, rng)
    addresses = generate_active_addresses(volume, rng)
    fees = generate_network_fees(volume, regimes, rng)

    flows = generate_etf_flows(regimes, rng)
    cumulative = generate_cumulative_etf_flows(flows)
    momentum = generate_etf_momentum(flows, window=cfg.momentum_window)

    oi = generate_futures_oi(regimes, market_cap, rng)
    leverage = generate_leverage_ratio(oi, market_cap)
    funding = generate_funding_rate(regimes, leverage, rng)
    liquidations = generate_liquidations(regimes, volatility, leverage, rng)

    risk_labels = generate_risk_regime(volatility, leverage)
    stress = generate_liquidity_stress(volatility, leverage, volume)
    logger.debug("Generated market over %d days (%d regimes)", len(dates), len(process))

    return MarketSeries(
        dates=dates,
        btc_price=btc,
        eth_price=eth,
        total_crypto_market_cap=market_cap,
        volatility_proxy=volatility,
        market_drawdown_percent=drawdown,
        stablecoin_total_supply=supply,
        stablecoin_net_issuance_30d=issuance,
        stablecoin_velocity_proxy=velocity,
        on_chain_transfer_volume=volume,
        active_addresses_proxy=addresses,
        network_fee_proxy=fees,
        btc_etf_net_flows=flows,
        btc_etf_cumulative_flows=cumulative,
        etf_flow_momentum_score=momentum,
        futures_open_interest=oi,
        leverage_ratio_proxy=leverage,
        funding_rate_proxy=funding,
        liquidation_volume_proxy=liquidations,
        risk_regime=np.array([RISK_REGIME_CODES[r] for r in risk_labels], dtype=float),
        crypto_liquidity_stress_index=stress,
        risk_regime_labels=tuple(risk_labels),
    )
