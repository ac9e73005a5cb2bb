"""
Greeks-driven trade signals.

Three independent rules run against every snapshot in a universe:

1. IV mean reversion: IV above iv_high on good volume -> sell (limit)
2. IV expansion: IV below iv_low, decent volume and meaningful delta -> buy (limit)
3. Gamma scalping: high gamma, short-dated, meaningful delta -> buy (market)

A contract can trigger more than one rule. Output is sorted by conviction
(descending); equal convictions keep universe order.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from greeks_engine.core.models import LiveOptionSnapshot, Signal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalConfig:
    """Trigger levels and convictions for each signal rule."""
    iv_high: float = 0.35
    mean_reversion_min_volume: int = 2000
    mean_reversion_conviction: float = 0.80

    iv_low: float = 0.15
    expansion_min_volume: int = 1500
    expansion_min_delta: float = 0.30
    expansion_conviction: float = 0.75

    scalp_min_gamma: float = 0.03
    scalp_max_expiry: float = 0.05       # Years (~18 days)
    scalp_min_delta: float = 0.40
    scalp_conviction: float = 0.85

    def __post_init__(self):
        """Validate parameters."""
        if self.iv_low >= self.iv_high:
            raise ValueError(
                f"iv_low ({self.iv_low}) must be below iv_high ({self.iv_high})"
            )
        for name in ('mean_reversion_conviction', 'expansion_conviction', 'scalp_conviction'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


class GreeksSignalGenerator:
    """
    Generates Signal objects from evaluated snapshots.

    Stateless: the same universe always yields the same signals.

    Example:
        >>> generator = GreeksSignalGenerator()
        >>> for signal in generator.generate_signals(snapshots)[:5]:
        ...     print(f"{signal.symbol} {signal.action} {signal.conviction:.2f}")
    """

    def __init__(self, config: Optional[SignalConfig] = None):
        self.config = config or SignalConfig()

    @property
    def name(self) -> str:
        """Generator identifier for logging and reporting."""
        return "GreeksSignals"

    def generate_signals(self, universe: Sequence[LiveOptionSnapshot]) -> List[Signal]:
        """
        Run every rule against every snapshot.

        Returns:
            Signals sorted by conviction descending; empty if nothing fires
        """
        signals = []
        for snapshot in universe:
            for rule in (self._iv_mean_reversion, self._iv_expansion, self._gamma_scalp):
                signal = rule(snapshot)
                if signal is not None:
                    signals.append(signal)

        signals.sort(key=lambda s: s.conviction, reverse=True)

        if signals:
            logger.info(f"{self.name}: generated {len(signals)} signals from {len(universe)} contracts")
        return signals

    def _iv_mean_reversion(self, snapshot: LiveOptionSnapshot) -> Optional[Signal]:
        cfg = self.config
        if not (snapshot.implied_volatility > cfg.iv_high
                and snapshot.volume > cfg.mean_reversion_min_volume):
            return None
        return Signal(
            symbol=snapshot.symbol,
            action='sell',
            order_type='limit',
            conviction=cfg.mean_reversion_conviction,
            reason=(
                f"High IV ({snapshot.implied_volatility * 100:.1f}%) sell opportunity "
                f"- mean reversion play"
            ),
            strategy_name='Options IV Mean Reversion',
            price=snapshot.last_price,
        )

    def _iv_expansion(self, snapshot: LiveOptionSnapshot) -> Optional[Signal]:
        cfg = self.config
        if not (snapshot.implied_volatility < cfg.iv_low
                and snapshot.volume > cfg.expansion_min_volume
                and abs(snapshot.greeks.delta) > cfg.expansion_min_delta):
            return None
        return Signal(
            symbol=snapshot.symbol,
            action='buy',
            order_type='limit',
            conviction=cfg.expansion_conviction,
            reason=f"Low IV ({snapshot.implied_volatility * 100:.1f}%) expansion opportunity",
            strategy_name='Options IV Expansion',
            price=snapshot.last_price,
        )

    def _gamma_scalp(self, snapshot: LiveOptionSnapshot) -> Optional[Signal]:
        cfg = self.config
        greeks = snapshot.greeks
        if not (abs(greeks.gamma) > cfg.scalp_min_gamma
                and snapshot.time_to_expiry < cfg.scalp_max_expiry
                and abs(greeks.delta) > cfg.scalp_min_delta):
            return None
        return Signal(
            symbol=snapshot.symbol,
            action='buy',
            order_type='market',
            conviction=cfg.scalp_conviction,
            reason=f"High gamma ({greeks.gamma:.4f}) scalping opportunity",
            strategy_name='Options Gamma Scalping',
        )
