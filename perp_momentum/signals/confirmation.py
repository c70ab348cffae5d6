"""
Confirmation analyzers.

Stateless checks of order-book imbalance and 24h ticker context used to
confirm a momentum signal. Percent quantities are on a 0-100 scale.
"""

from typing import Optional, Tuple

from perp_momentum.core.config import SignalConfig
from perp_momentum.data.models import DepthSnapshot, TickerSnapshot
from perp_momentum.utils.math_helpers import ieee_div

_DEFAULTS = SignalConfig()


def analyze_depth(
    depth: DepthSnapshot,
    reference_price: float,
    config: Optional[SignalConfig] = None,
) -> Tuple[bool, bool]:
    """
    Buy/sell pressure near the reference price.

    Sums bid size priced above ref × (1 - band) and ask size priced below
    ref × (1 + band). A side counts as strong when its volume exceeds the
    other side's by `depth_ratio`. An empty side gives a ratio of 0.

    Returns:
        (strong_buy, strong_sell)
    """
    cfg = config or _DEFAULTS

    bid_volume = sum(qty for price, qty in depth.bids if price > reference_price * (1.0 - cfg.depth_band))
    ask_volume = sum(qty for price, qty in depth.asks if price < reference_price * (1.0 + cfg.depth_band))

    buy_pressure = bid_volume / ask_volume if ask_volume > 0 else 0.0
    sell_pressure = ask_volume / bid_volume if bid_volume > 0 else 0.0

    return buy_pressure > cfg.depth_ratio, sell_pressure > cfg.depth_ratio


def describe_ticker(ticker: TickerSnapshot) -> Tuple[float, float, float]:
    """
    Returns:
        (volatility %, position in day range %, spread %)
    """
    volatility = ieee_div(ticker.high_price - ticker.low_price, ticker.low_price) * 100.0
    position = ieee_div(ticker.last_price - ticker.low_price, ticker.high_price - ticker.low_price) * 100.0
    spread = ieee_div(ticker.ask_price - ticker.bid_price, ticker.bid_price) * 100.0
    return volatility, position, spread


def analyze_ticker(
    ticker: TickerSnapshot,
    config: Optional[SignalConfig] = None,
) -> Tuple[bool, bool]:
    """
    Market bias from 24h statistics.

    Rules in order:
    1. 24h change above +threshold is bullish, below -threshold bearish
    2. Near the day low is bullish, near the day high bearish
    3. On a volatile day, only keep longs low in the range and shorts high
    4. A wide spread vetoes both

    Returns:
        (bullish, bearish)
    """
    cfg = config or _DEFAULTS
    volatility, position, spread = describe_ticker(ticker)

    bullish = False
    bearish = False

    if ticker.price_change_percent > cfg.change_threshold_pct:
        bullish = True
    elif ticker.price_change_percent < -cfg.change_threshold_pct:
        bearish = True

    if position < cfg.low_position_pct:
        bullish = True
    elif position > cfg.high_position_pct:
        bearish = True

    if volatility > cfg.volatility_pct:
        bullish = bullish and position < cfg.volatile_long_max_pct
        bearish = bearish and position > cfg.volatile_short_min_pct

    # Illiquid book
    if spread > cfg.max_spread_pct:
        bullish = False
        bearish = False

    return bullish, bearish
