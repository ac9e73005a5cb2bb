"""
GreeksMonitor: periodic refresh loop around a GreeksRiskEngine.

Each tick pulls quotes and holdings from a provider, evaluates the universe,
aggregates the book, scans for risk and opportunities and generates signals.
The result is published as one immutable MonitorUpdate to every subscriber.

The monitor is the only stateful piece: it remembers the latest update and
the tick counter. The engine stays a pure service.

Example:
    >>> monitor = GreeksMonitor(GreeksRiskEngine(), SyntheticMarketDataProvider(seed=7))
    >>> monitor.subscribe(lambda update: print(update.portfolio_risk.risk_score))
    >>> monitor.run(interval_seconds=10, max_ticks=3)
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import time

from greeks_engine.core.models import LiveOptionSnapshot, PortfolioGreeksRisk, Signal
from greeks_engine.data.base import IMarketDataProvider
from greeks_engine.engine import GreeksRiskEngine
from greeks_engine.portfolio.hedging import VolatilityRegime
from greeks_engine.scanner.opportunity import ScanResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonitorUpdate:
    """Everything computed in one refresh tick."""
    tick: int
    snapshots: List[LiveOptionSnapshot]
    portfolio_risk: PortfolioGreeksRisk
    scan: ScanResult
    signals: List[Signal]


Subscriber = Callable[[MonitorUpdate], None]


class GreeksMonitor:
    """
    Drives the engine from a market data provider and fans out results.

    Subscriber failures are logged and do not stop the loop or the other
    subscribers. Provider and engine failures propagate to the caller.
    """

    def __init__(
        self,
        engine: GreeksRiskEngine,
        provider: IMarketDataProvider,
        iv_regime: Optional[VolatilityRegime] = None
    ):
        """
        Initialize monitor.

        Args:
            engine: Engine used for every tick
            provider: Source of quotes and holdings
            iv_regime: Optional volatility regime passed to hedging
        """
        self.engine = engine
        self.provider = provider
        self.iv_regime = iv_regime
        self.tick_count = 0
        self.latest: Optional[MonitorUpdate] = None
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber):
        """Register a callback invoked with every MonitorUpdate."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber):
        """Remove a previously registered callback (no-op if unknown)."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def refresh(self) -> MonitorUpdate:
        """
        Run one tick and publish it.

        Returns:
            The MonitorUpdate delivered to subscribers
        """
        quotes = self.provider.get_quotes()
        holdings = self.provider.get_holdings()

        snapshots = self.engine.evaluate_universe(quotes)
        positions = self.engine.positions_from_holdings(holdings, snapshots)

        self.tick_count += 1
        update = MonitorUpdate(
            tick=self.tick_count,
            snapshots=snapshots,
            portfolio_risk=self.engine.evaluate_portfolio(positions, self.iv_regime),
            scan=self.engine.scan(snapshots),
            signals=self.engine.generate_signals(snapshots),
        )
        self.latest = update

        logger.info(
            f"Tick {update.tick}: {len(snapshots)} contracts, "
            f"{len(positions)} positions, risk score {update.portfolio_risk.risk_score}, "
            f"{len(update.signals)} signals"
        )

        for callback in list(self._subscribers):
            try:
                callback(update)
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on tick {update.tick}: {e}", exc_info=True)

        return update

    def run(self, interval_seconds: float = 10.0, max_ticks: Optional[int] = None) -> int:
        """
        Refresh repeatedly until max_ticks is reached or the process is
        interrupted.

        Args:
            interval_seconds: Sleep between ticks
            max_ticks: Stop after this many ticks (None = run forever)

        Returns:
            Number of ticks run by this call
        """
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")
        if max_ticks is not None and max_ticks < 1:
            raise ValueError(f"max_ticks must be >= 1, got {max_ticks}")

        ticks = 0
        try:
            while max_ticks is None or ticks < max_ticks:
                self.refresh()
                ticks += 1
                if max_ticks is None or ticks < max_ticks:
                    time.sleep(interval_seconds)
        except KeyboardInterrupt:
            logger.info(f"Monitor interrupted after {ticks} ticks")

        return ticks
