"""Universe scanning"""

from greeks_engine.scanner.opportunity import (
    OpportunityScanner,
    ScannerConfig,
    ScanResult,
    snapshots_to_frame,
)

__all__ = ['OpportunityScanner', 'ScannerConfig', 'ScanResult', 'snapshots_to_frame']
