"""
GreeksRiskEngine: explicitly constructed facade over the pricing and risk
components.

One instance wires a classifier, aggregator (with hedging advisor), scanner,
signal generator and contract analyzer. It holds configuration only; every
call is a pure transformation of its arguments, so one engine can be shared
by any number of callers and threads.

Example:
    >>> engine = GreeksRiskEngine()
    >>> snapshots = engine.evaluate_universe(quotes)
    >>> risk = engine.evaluate_portfolio(positions)
    >>> result = engine.scan(snapshots)
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
import logging

from greeks_engine.core.models import (
    ContractAnalysis,
    Holding,
    LiveOptionSnapshot,
    MarketQuote,
    PortfolioGreeksRisk,
    PortfolioPosition,
    Signal,
)
from greeks_engine.portfolio.aggregator import PortfolioAggregator
from greeks_engine.portfolio.hedging import HedgingAdvisor, VolatilityRegime
from greeks_engine.pricing.black_scholes import price_and_greeks
from greeks_engine.risk.classifier import ContractAnalyzer, ContractRiskClassifier
from greeks_engine.scanner.opportunity import OpportunityScanner, ScanResult
from greeks_engine.signals.greeks_signals import GreeksSignalGenerator

logger = logging.getLogger(__name__)


class GreeksRiskEngine:
    """
    Stateless options Greeks and portfolio risk service.

    All collaborators are injectable; defaults use the built-in policy
    constants.
    """

    def __init__(
        self,
        classifier: Optional[ContractRiskClassifier] = None,
        aggregator: Optional[PortfolioAggregator] = None,
        scanner: Optional[OpportunityScanner] = None,
        signal_generator: Optional[GreeksSignalGenerator] = None,
        analyzer: Optional[ContractAnalyzer] = None,
        max_workers: Optional[int] = None
    ):
        """
        Initialize engine.

        Args:
            classifier: Contract risk classifier
            aggregator: Portfolio aggregator (defaults to one with a HedgingAdvisor)
            scanner: Opportunity scanner
            signal_generator: Greeks signal generator
            analyzer: Narrative contract analyzer
            max_workers: Thread pool size for evaluate_universe.
                        None or 1 evaluates sequentially.
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.classifier = classifier or ContractRiskClassifier()
        self.aggregator = aggregator or PortfolioAggregator(
            gamma_thresholds=self.classifier.thresholds,
            advisor=HedgingAdvisor(),
        )
        self.scanner = scanner or OpportunityScanner()
        self.signal_generator = signal_generator or GreeksSignalGenerator()
        self.analyzer = analyzer or ContractAnalyzer()
        self.max_workers = max_workers

    def evaluate_quote(self, quote: MarketQuote) -> LiveOptionSnapshot:
        """
        Price and classify one market quote.

        Last price falls back to the model price when the quote carries none.

        Raises:
            InvalidInputError: If the quote's pricing inputs are invalid
        """
        greeks = price_and_greeks(quote.to_contract())
        risk_level, recommendation = self.classifier.classify(greeks, quote.implied_volatility)

        return LiveOptionSnapshot(
            symbol=quote.symbol,
            option_type=quote.option_type,
            strike_price=quote.strike_price,
            spot_price=quote.spot_price,
            last_price=quote.last_price if quote.last_price is not None else greeks.price,
            implied_volatility=quote.implied_volatility,
            volume=quote.volume,
            open_interest=quote.open_interest,
            time_to_expiry=quote.time_to_expiry,
            greeks=greeks,
            risk_level=risk_level,
            trading_recommendation=recommendation,
        )

    def evaluate_universe(self, quotes: Sequence[MarketQuote]) -> List[LiveOptionSnapshot]:
        """
        Evaluate every quote of one refresh tick.

        Output order matches input order, with or without the thread pool.
        """
        if not quotes:
            return []

        if self.max_workers is None or self.max_workers == 1:
            snapshots = [self.evaluate_quote(q) for q in quotes]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                snapshots = list(pool.map(self.evaluate_quote, quotes))

        logger.debug(f"Evaluated {len(snapshots)} contracts")
        return snapshots

    def positions_from_holdings(
        self,
        holdings: Sequence[Holding],
        universe: Sequence[LiveOptionSnapshot]
    ) -> List[PortfolioPosition]:
        """
        Attach current per-unit Greeks to a book of holdings.

        Holdings whose symbol is not in the universe are skipped with a
        warning; the remaining order follows the holdings.
        """
        by_symbol = {snapshot.symbol: snapshot for snapshot in universe}
        positions = []
        for holding in holdings:
            snapshot = by_symbol.get(holding.symbol)
            if snapshot is None:
                logger.warning(f"No market data for held contract {holding.symbol}, skipping")
                continue
            positions.append(PortfolioPosition(
                symbol=holding.symbol,
                quantity=holding.quantity,
                greeks=snapshot.greeks,
                price=snapshot.last_price,
                spot_price=snapshot.spot_price,
            ))
        return positions

    def evaluate_portfolio(
        self,
        positions: Sequence[PortfolioPosition],
        iv_regime: Optional[VolatilityRegime] = None
    ) -> PortfolioGreeksRisk:
        """Aggregate a book into portfolio exposures and hedging advice."""
        return self.aggregator.aggregate(positions, iv_regime)

    def scan(self, universe: Sequence[LiveOptionSnapshot]) -> ScanResult:
        """Split a universe into high-risk contracts and opportunities."""
        return self.scanner.scan(universe)

    def generate_signals(self, universe: Sequence[LiveOptionSnapshot]) -> List[Signal]:
        """Greeks-driven trade signals, strongest first."""
        return self.signal_generator.generate_signals(universe)

    def analyze(self, snapshot: LiveOptionSnapshot) -> ContractAnalysis:
        """Narrative risk assessment for one contract."""
        return self.analyzer.analyze(snapshot)
