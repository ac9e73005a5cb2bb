"""
Unified Greeks engine configuration.

A single JSON config file defines a complete monitoring setup:
- Classifier, recommendation and analysis thresholds
- Risk score, hedging, scanner and signal parameters
- Market data source
- Monitor loop settings
- Output and logging options

Every section is optional; missing keys fall back to DEFAULT_CONFIG.

Example usage:
    config = EngineConfig.from_json('configs/default.json')
    engine = config.create_engine()
    provider = config.create_provider()
    monitor = GreeksMonitor(engine, provider)
    monitor.run(**config.monitor_kwargs())
"""

import copy
import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import date
from pathlib import Path
from typing import Dict, Any, Optional

from dateutil import parser as date_parser

from greeks_engine.data.base import IMarketDataProvider
from greeks_engine.data.file_provider import FileMarketDataProvider
from greeks_engine.data.synthetic import SyntheticMarketDataProvider
from greeks_engine.engine import GreeksRiskEngine
from greeks_engine.portfolio.aggregator import PortfolioAggregator, RiskScoreConfig
from greeks_engine.portfolio.hedging import HedgingAdvisor, HedgingConfig, VolatilityRegime
from greeks_engine.risk.classifier import (
    AnalysisThresholds,
    ClassifierThresholds,
    ContractAnalyzer,
    ContractRiskClassifier,
    RecommendationPolicy,
)
from greeks_engine.scanner.opportunity import OpportunityScanner, ScannerConfig
from greeks_engine.signals.greeks_signals import GreeksSignalGenerator, SignalConfig

logger = logging.getLogger(__name__)


# Sections that map one-to-one onto a parameter dataclass
PARAMETER_SECTIONS = {
    'classifier': ClassifierThresholds,
    'recommendation': RecommendationPolicy,
    'analysis': AnalysisThresholds,
    'risk_score': RiskScoreConfig,
    'hedging': HedgingConfig,
    'scanner': ScannerConfig,
    'signals': SignalConfig,
}

VALID_DATA_SOURCES = ['synthetic', 'file']


# Default configuration values
DEFAULT_CONFIG = {
    "config_version": "1.0",
    "classifier": asdict(ClassifierThresholds()),
    "recommendation": asdict(RecommendationPolicy()),
    "analysis": asdict(AnalysisThresholds()),
    "risk_score": asdict(RiskScoreConfig()),
    "hedging": asdict(HedgingConfig()),
    "scanner": asdict(ScannerConfig()),
    "signals": asdict(SignalConfig()),
    "engine": {
        "max_workers": None
    },
    "data_source": {
        "type": "synthetic",
        "params": {
            "seed": 42,
            "underlying": "NIFTY",
            "base_spot": 18000.0,
            "risk_free_rate": 0.06
        }
    },
    "monitor": {
        "interval_seconds": 10.0,
        "max_ticks": None,
        "iv_regime": None
    },
    "output": {
        "results_dir": "results",
        "save_snapshots": False,
        "snapshots_filename": "snapshots.csv"
    },
    "logging": {
        "level": "INFO",
        "log_file": None,
        "console_output": True
    }
}


@dataclass
class EngineConfig:
    """
    Unified configuration for an engine plus its market data source.

    Load from JSON and build the engine and provider from it.

    Example:
        >>> config = EngineConfig.from_json('configs/default.json')
        >>> engine = config.create_engine()
        >>> provider = config.create_provider()
    """

    # Meta
    config_version: str = "1.0"
    config_name: str = "unnamed"
    description: str = ""

    # Policy parameters (optional - default to built-in constants)
    classifier: Dict[str, Any] = field(default_factory=dict)
    recommendation: Dict[str, Any] = field(default_factory=dict)
    analysis: Dict[str, Any] = field(default_factory=dict)
    risk_score: Dict[str, Any] = field(default_factory=dict)
    hedging: Dict[str, Any] = field(default_factory=dict)
    scanner: Dict[str, Any] = field(default_factory=dict)
    signals: Dict[str, Any] = field(default_factory=dict)

    # Engine (optional - sequential evaluation)
    engine: Dict[str, Any] = field(default_factory=dict)

    # Data source (optional - defaults to seeded synthetic data)
    data_source: Dict[str, Any] = field(default_factory=dict)

    # Monitor loop (optional)
    monitor: Dict[str, Any] = field(default_factory=dict)

    # Output (optional)
    output: Dict[str, Any] = field(default_factory=dict)

    # Logging (optional)
    logging: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Apply defaults and validate configuration"""
        self._apply_defaults()
        self._validate()

    def _apply_defaults(self):
        """Merge user config with defaults"""
        for section, defaults in DEFAULT_CONFIG.items():
            if section == 'data_source' and self.data_source.get('type', 'synthetic') != 'synthetic':
                # Synthetic params do not apply to other source types
                defaults = {"params": {}}
            if isinstance(defaults, dict):
                current = getattr(self, section, {})
                if isinstance(current, dict):
                    setattr(self, section, self._deep_merge(copy.deepcopy(defaults), current))

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = EngineConfig._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _validate(self):
        """Validate configuration, reporting every problem at once"""
        errors = []

        # Parameter sections: construct each dataclass to run its own checks
        for section, params_cls in PARAMETER_SECTIONS.items():
            try:
                params_cls(**getattr(self, section))
            except (TypeError, ValueError) as e:
                errors.append(f"{section}: {e}")

        # Engine
        max_workers = self.engine.get('max_workers')
        if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
            errors.append("engine.max_workers must be null or an integer >= 1")

        # Data source
        source_type = self.data_source.get('type')
        params = self.data_source.get('params', {})
        if source_type not in VALID_DATA_SOURCES:
            errors.append(f"data_source.type must be one of {VALID_DATA_SOURCES}, got {source_type!r}")
        elif source_type == 'file':
            if 'quotes_path' not in params:
                errors.append("file data source requires data_source.params.quotes_path")
            if params.get('as_of') is not None:
                try:
                    date_parser.parse(str(params['as_of']))
                except (ValueError, OverflowError):
                    errors.append(f"data_source.params.as_of is not a date: {params['as_of']!r}")
        elif source_type == 'synthetic':
            if not isinstance(params.get('seed'), int):
                errors.append("synthetic data source requires an integer data_source.params.seed")

        # Monitor
        if self.monitor['interval_seconds'] < 0:
            errors.append("monitor.interval_seconds must be >= 0")
        max_ticks = self.monitor.get('max_ticks')
        if max_ticks is not None and max_ticks < 1:
            errors.append("monitor.max_ticks must be null or >= 1")
        regime = self.monitor.get('iv_regime')
        valid_regimes = [r.value for r in VolatilityRegime]
        if regime is not None and regime not in valid_regimes:
            errors.append(f"monitor.iv_regime must be null or one of {valid_regimes}")

        # Logging
        if not isinstance(getattr(logging, str(self.logging.get('level')), None), int):
            errors.append(f"Unknown logging level: {self.logging.get('level')}")

        if errors:
            raise ValueError(f"Config validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

    @classmethod
    def from_json(cls, json_path: str) -> 'EngineConfig':
        """
        Load config from JSON file.

        Args:
            json_path: Path to JSON config file

        Returns:
            EngineConfig instance with defaults applied
        """
        json_path = Path(json_path)
        if not json_path.exists():
            raise FileNotFoundError(f"Config file not found: {json_path}")

        logger.info(f"Loading config from {json_path}")

        with open(json_path) as f:
            data = json.load(f)

        return cls(**data)

    def to_json(self, json_path: str):
        """
        Save config to JSON file.

        Args:
            json_path: Path to save JSON config
        """
        json_path = Path(json_path)
        json_path.parent.mkdir(parents=True, exist_ok=True)

        with open(json_path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

        logger.info(f"Saved config to {json_path}")

    def create_engine(self) -> GreeksRiskEngine:
        """
        Factory method: build a GreeksRiskEngine from the policy sections.

        The aggregator reuses the classifier's gamma bands so contract and
        portfolio gamma levels agree.
        """
        thresholds = ClassifierThresholds(**self.classifier)
        classifier = ContractRiskClassifier(
            thresholds=thresholds,
            policy=RecommendationPolicy(**self.recommendation),
        )
        aggregator = PortfolioAggregator(
            score_config=RiskScoreConfig(**self.risk_score),
            gamma_thresholds=thresholds,
            advisor=HedgingAdvisor(HedgingConfig(**self.hedging)),
        )

        return GreeksRiskEngine(
            classifier=classifier,
            aggregator=aggregator,
            scanner=OpportunityScanner(ScannerConfig(**self.scanner)),
            signal_generator=GreeksSignalGenerator(SignalConfig(**self.signals)),
            analyzer=ContractAnalyzer(AnalysisThresholds(**self.analysis)),
            max_workers=self.engine.get('max_workers'),
        )

    def create_provider(self) -> IMarketDataProvider:
        """Create market data provider from config"""
        source_type = self.data_source['type']
        params = self.data_source['params']

        if source_type == 'synthetic':
            return SyntheticMarketDataProvider(
                seed=params['seed'],
                underlying=params.get('underlying', 'NIFTY'),
                base_spot=params.get('base_spot', 18000.0),
                risk_free_rate=params.get('risk_free_rate', 0.06),
            )

        elif source_type == 'file':
            as_of = params.get('as_of')
            return FileMarketDataProvider(
                quotes_path=params['quotes_path'],
                holdings_path=params.get('holdings_path'),
                as_of=date_parser.parse(str(as_of)).date() if as_of is not None else None,
                default_risk_free_rate=params.get('risk_free_rate', 0.06),
            )

        else:
            raise ValueError(f"Unknown data source type: {source_type}")

    @property
    def iv_regime(self) -> Optional[VolatilityRegime]:
        """Configured volatility regime for hedging, if any"""
        regime = self.monitor.get('iv_regime')
        return VolatilityRegime(regime) if regime is not None else None

    def monitor_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for GreeksMonitor.run"""
        return {
            'interval_seconds': self.monitor['interval_seconds'],
            'max_ticks': self.monitor.get('max_ticks'),
        }

    @property
    def output_dir(self) -> Path:
        """Get output directory for this config"""
        base = Path(self.output['results_dir'])
        return base / self.config_name

    def setup_logging(self):
        """Setup logging based on config"""
        level = getattr(logging, self.logging['level'])

        # Configure root logger
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[]
        )
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        # Console handler
        if self.logging['console_output']:
            console = logging.StreamHandler()
            console.setLevel(level)
            console.setFormatter(formatter)
            logging.getLogger().addHandler(console)

        # File handler
        if self.logging['log_file']:
            log_path = self.logging['log_file'].format(
                config_name=self.config_name,
                timestamp=date.today().isoformat()
            )
            log_path = Path(log_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logging.getLogger().addHandler(file_handler)
            logger.info(f"Logging to file: {log_path}")
