"""Contract risk classification and narrative analysis"""

from greeks_engine.risk.classifier import (
    ClassifierThresholds,
    RecommendationPolicy,
    ContractRiskClassifier,
    AnalysisThresholds,
    ContractAnalyzer,
)

__all__ = [
    'ClassifierThresholds',
    'RecommendationPolicy',
    'ContractRiskClassifier',
    'AnalysisThresholds',
    'ContractAnalyzer',
]
