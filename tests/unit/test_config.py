"""
Unit tests for EngineConfig
File: tests/unit/test_config.py
Target: greeks_engine/config.py
"""

from datetime import date

import pytest

from greeks_engine.config import DEFAULT_CONFIG, EngineConfig
from greeks_engine.data.file_provider import FileMarketDataProvider
from greeks_engine.data.synthetic import SyntheticMarketDataProvider
from greeks_engine.engine import GreeksRiskEngine
from greeks_engine.portfolio.hedging import VolatilityRegime


# ============================================================================
# Defaults and validation
# ============================================================================

class TestDefaults:
    def test_empty_config_is_valid(self):
        # ACT
        config = EngineConfig()

        # ASSERT
        assert config.data_source['type'] == 'synthetic'
        assert config.data_source['params']['seed'] == 42
        assert config.scanner['min_volume'] == 500
        assert config.iv_regime is None

    def test_partial_section_merged_with_defaults(self):
        config = EngineConfig(hedging={'delta_limit': 25.0})

        assert config.hedging['delta_limit'] == 25.0
        assert config.hedging['reference_spot'] == DEFAULT_CONFIG['hedging']['reference_spot']

    def test_defaults_not_shared_between_instances(self):
        a = EngineConfig()
        a.data_source['params']['seed'] = 99

        assert EngineConfig().data_source['params']['seed'] == 42
        assert DEFAULT_CONFIG['data_source']['params']['seed'] == 42


class TestValidation:
    def test_unknown_data_source(self):
        with pytest.raises(ValueError, match="data_source.type"):
            EngineConfig(data_source={'type': 'websocket'})

    def test_file_source_requires_quotes_path(self):
        with pytest.raises(ValueError, match="quotes_path"):
            EngineConfig(data_source={'type': 'file', 'params': {}})

    def test_file_source_bad_as_of(self):
        with pytest.raises(ValueError, match="as_of"):
            EngineConfig(data_source={'type': 'file', 'params': {'quotes_path': 'q.csv', 'as_of': 'not a date'}})

    def test_synthetic_requires_seed(self):
        with pytest.raises(ValueError, match="seed"):
            EngineConfig(data_source={'type': 'synthetic', 'params': {'seed': None}})

    def test_invalid_threshold_reported_with_section(self):
        with pytest.raises(ValueError, match="classifier"):
            EngineConfig(classifier={'extreme_gamma': -1.0})

    def test_unknown_key_in_section(self):
        with pytest.raises(ValueError, match="scanner"):
            EngineConfig(scanner={'min_liquidity': 5})

    def test_bad_logging_level(self):
        with pytest.raises(ValueError, match="logging level"):
            EngineConfig(logging={'level': 'LOUD'})

    @pytest.mark.parametrize("monitor", [
        {'interval_seconds': -1.0},
        {'max_ticks': 0},
        {'iv_regime': 'sideways'},
    ])
    def test_bad_monitor_settings(self, monitor):
        with pytest.raises(ValueError, match="monitor"):
            EngineConfig(monitor=monitor)

    def test_all_errors_reported_together(self):
        with pytest.raises(ValueError) as exc_info:
            EngineConfig(engine={'max_workers': 0}, logging={'level': 'LOUD'})

        message = str(exc_info.value)
        assert "max_workers" in message
        assert "LOUD" in message


# ============================================================================
# JSON round trip
# ============================================================================

class TestJson:
    def test_round_trip(self, tmp_path):
        # ARRANGE
        path = tmp_path / 'configs' / 'test.json'
        config = EngineConfig(config_name='test', scanner={'rank': True}, monitor={'iv_regime': 'rising'})

        # ACT
        config.to_json(path)
        loaded = EngineConfig.from_json(path)

        # ASSERT
        assert loaded == config
        assert loaded.scanner['rank'] is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineConfig.from_json(tmp_path / 'missing.json')


# ============================================================================
# Factories
# ============================================================================

class TestFactories:
    def test_create_engine_applies_sections(self):
        config = EngineConfig(scanner={'min_volume': 0}, engine={'max_workers': 3})

        engine = config.create_engine()

        assert isinstance(engine, GreeksRiskEngine)
        assert engine.max_workers == 3
        assert engine.scanner.config.min_volume == 0

    def test_create_synthetic_provider(self):
        provider = EngineConfig(data_source={'params': {'seed': 5}}).create_provider()

        assert isinstance(provider, SyntheticMarketDataProvider)
        assert provider.get_quotes() == SyntheticMarketDataProvider(seed=5).get_quotes()

    def test_create_file_provider(self):
        config = EngineConfig(data_source={
            'type': 'file',
            'params': {'quotes_path': 'data/quotes.csv', 'holdings_path': 'data/book.csv', 'as_of': '2024-01-02'},
        })

        provider = config.create_provider()

        assert isinstance(provider, FileMarketDataProvider)
        assert provider.as_of == date(2024, 1, 2)
        assert provider.holdings_path is not None

    def test_iv_regime_and_monitor_kwargs(self):
        config = EngineConfig(monitor={'iv_regime': 'falling', 'interval_seconds': 2.5, 'max_ticks': 4})

        assert config.iv_regime is VolatilityRegime.FALLING
        assert config.monitor_kwargs() == {'interval_seconds': 2.5, 'max_ticks': 4}

    def test_output_dir(self):
        config = EngineConfig(config_name='desk', output={'results_dir': 'out'})
        assert config.output_dir.parts[-2:] == ('out', 'desk')
