"""Greeks-driven signal generation"""

from greeks_engine.signals.greeks_signals import GreeksSignalGenerator, SignalConfig

__all__ = ['GreeksSignalGenerator', 'SignalConfig']
