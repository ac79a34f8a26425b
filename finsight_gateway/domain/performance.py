"""Investment performance: CAGR-based returns and composition-based risk proxies"""

import math
from datetime import date
from typing import Dict, Optional, Sequence

from finsight_gateway.domain.models import AssetClass, Investment, OverallPerformance, PerformanceSnapshot
from finsight_gateway.utils.date_utils import years_between

ANNUALIZED_RETURN_CAP = 1000.0  # percent
RISK_FREE_RATE = 2.0  # percent
DEFAULT_VOLATILITY = 15.0  # used when no holding maps to a known asset class

# Typical annual volatility (%) per asset class
ASSET_CLASS_VOLATILITY = {
    AssetClass.STOCKS: 20.0,
    AssetClass.BONDS: 5.0,
    AssetClass.CASH: 1.0,
    AssetClass.ALTERNATIVES: 30.0,
}

_ASSET_TYPE_ALIASES = {
    "stocks": AssetClass.STOCKS,
    "stock": AssetClass.STOCKS,
    "shares": AssetClass.STOCKS,
    "etf": AssetClass.STOCKS,
    "bonds": AssetClass.BONDS,
    "bond": AssetClass.BONDS,
    "bills": AssetClass.BONDS,
    "cash": AssetClass.CASH,
    "alternative": AssetClass.ALTERNATIVES,
    "alternatives": AssetClass.ALTERNATIVES,
    "crypto": AssetClass.ALTERNATIVES,
    "real estate": AssetClass.ALTERNATIVES,
}


def classify_asset_type(asset_type: Optional[str]) -> Optional[AssetClass]:
    """Map a free-form holding type ("Real Estate", "real_estate", "ETF") to an AssetClass"""
    if not asset_type:
        return None
    key = asset_type.strip().lower().replace("_", " ")
    return _ASSET_TYPE_ALIASES.get(key)


def annualized_return(
    cost_basis: float,
    current_value: float,
    start: Optional[date],
    today: Optional[date] = None,
    cap: float = ANNUALIZED_RETURN_CAP,
) -> float:
    """
    Compound annual growth rate in percent: ((value / cost) ** (1 / years) - 1) * 100.

    Holding periods shorter than a day count as one day. Results beyond +/-cap,
    and non-finite results from degenerate ratios, are replaced by the signed cap.
    Returns 0 when cost, value or start date is missing.
    """
    if start is None or cost_basis <= 0 or current_value <= 0:
        return 0.0
    if today is None:
        today = date.today()

    years_held = years_between(start, today)
    try:
        growth = (current_value / cost_basis) ** (1 / years_held)
    except OverflowError:
        growth = math.inf

    raw = (growth - 1) * 100
    if not math.isfinite(raw) or abs(raw) > cap:
        return math.copysign(cap, raw)
    return round(raw, 2)


def performance(
    investment: Investment,
    today: Optional[date] = None,
    cap: float = ANNUALIZED_RETURN_CAP,
) -> PerformanceSnapshot:
    cost = investment.cost_basis or 0.0
    value = investment.current_value or 0.0

    absolute = value - cost
    percent = (absolute / cost) * 100 if cost > 0 else 0.0

    return PerformanceSnapshot(
        absolute_return=round(absolute, 2),
        percent_return=round(percent, 2),
        annualized_return=annualized_return(cost, value, investment.purchase_date, today, cap),
    )


def composition_weights(investments: Sequence[Investment]) -> Dict[AssetClass, float]:
    """Share of holdings (by count) in each recognised asset class; unknown types are ignored"""
    counts = {asset_class: 0 for asset_class in AssetClass}
    for investment in investments:
        asset_class = classify_asset_type(investment.asset_type)
        if asset_class is not None:
            counts[asset_class] += 1

    classified = sum(counts.values())
    if classified == 0:
        return {asset_class: 0.0 for asset_class in AssetClass}
    return {asset_class: count / classified for asset_class, count in counts.items()}


def overall_performance(
    investments: Sequence[Investment],
    today: Optional[date] = None,
    risk_free_rate: float = RISK_FREE_RATE,
    cap: float = ANNUALIZED_RETURN_CAP,
) -> OverallPerformance:
    """
    Portfolio totals plus proxy risk metrics.

    Volatility, Sharpe ratio and beta are estimated from asset-class composition
    and holding count, not from a historical return series:
    - volatility = weighted class volatility * (1 - min(n / 10, 1) * 0.3)
    - sharpe     = (annualized_return - risk_free_rate) / volatility
    - beta       = 0.8 + stock_share * 0.4
    """
    if not investments:
        return OverallPerformance(
            total_invested=0.0,
            total_value=0.0,
            total_return=0.0,
            annualized_return=0.0,
            volatility=0.0,
            sharpe_ratio=0.0,
            beta=0.0,
        )
    if today is None:
        today = date.today()

    total_invested = sum(i.cost_basis or 0.0 for i in investments)
    total_value = sum(i.current_value or 0.0 for i in investments)
    total_return = (total_value - total_invested) / total_invested * 100 if total_invested > 0 else 0.0

    purchase_dates = [i.purchase_date for i in investments if i.purchase_date is not None]
    oldest = min(purchase_dates) if purchase_dates else today
    annualized = annualized_return(total_invested, total_value, oldest, today, cap)

    weights = composition_weights(investments)
    if any(weights.values()):
        estimated_volatility = sum(weights[c] * ASSET_CLASS_VOLATILITY[c] for c in AssetClass)
    else:
        estimated_volatility = DEFAULT_VOLATILITY

    diversification_factor = min(len(investments) / 10, 1)  # full effect at 10+ holdings
    volatility = estimated_volatility * (1 - diversification_factor * 0.3)
    sharpe_ratio = (annualized - risk_free_rate) / volatility if volatility > 0 else 0.0
    beta = 0.8 + weights[AssetClass.STOCKS] * 0.4

    return OverallPerformance(
        total_invested=round(total_invested, 2),
        total_value=round(total_value, 2),
        total_return=round(total_return, 2),
        annualized_return=annualized,
        volatility=round(volatility, 2),
        sharpe_ratio=round(sharpe_ratio, 2),
        beta=round(beta, 2),
    )


def volatility_label(volatility: float) -> str:
    if volatility < 10:
        return "Low"
    elif volatility < 20:
        return "Medium"
    return "High"


def sharpe_label(sharpe_ratio: float) -> str:
    if sharpe_ratio < 1:
        return "Below average"
    elif sharpe_ratio < 2:
        return "Good"
    return "Excellent"


def beta_label(beta: float) -> str:
    if beta < 0.8:
        return "Less volatile than market"
    elif beta < 1.2:
        return "Similar to market"
    return "More volatile than market"
