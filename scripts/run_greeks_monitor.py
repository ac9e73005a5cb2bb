"""
Run the Greeks monitor from a JSON configuration file.

This script loads an engine configuration, builds the engine and market data
provider, runs the refresh loop and prints a portfolio risk summary after
every tick. Optionally writes the last evaluated universe to CSV.

Usage:
    python scripts/run_greeks_monitor.py configs/default.json
    python scripts/run_greeks_monitor.py configs/default.json --ticks 3 --interval 1
    python scripts/run_greeks_monitor.py configs/default.json --once --output results/universe.csv
"""

import sys
import argparse
import logging
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from greeks_engine.config import EngineConfig
from greeks_engine.monitor import GreeksMonitor, MonitorUpdate
from greeks_engine.scanner.opportunity import snapshots_to_frame

logger = logging.getLogger(__name__)


def print_update(update: MonitorUpdate):
    """Print one tick's portfolio summary to console"""
    risk = update.portfolio_risk

    print("\n" + "="*80)
    print(f"TICK {update.tick}: {len(update.snapshots)} contracts, {risk.position_count} positions")
    print("="*80)

    print(f"\nPortfolio Greeks:")
    print(f"  Delta:            {risk.total_delta:>12,.2f}")
    print(f"  Gamma:            {risk.total_gamma:>12,.4f}")
    print(f"  Theta / day:      {risk.total_theta_per_day:>12,.2f}")
    print(f"  Vega / vol pt:    {risk.total_vega_per_vol_point:>12,.2f}")
    print(f"  Value:            {risk.portfolio_value:>12,.2f}")

    print(f"\nRisk:")
    print(f"  Risk Score:       {risk.risk_score:>12}")
    print(f"  Gamma Exposure:   {risk.gamma_exposure.value:>12}")
    print(f"  Max Drawdown:     {risk.max_drawdown_risk:>12,.2f}")
    for rec in risk.hedging_recommendations:
        print(f"  - {rec}")

    print(f"\nScan: {len(update.scan.high_risk)} high risk, "
          f"{len(update.scan.opportunities)} opportunities")
    for signal in update.signals[:5]:
        print(f"  {signal.action.upper():<4} {signal.symbol:<20} "
              f"{signal.conviction:.2f}  {signal.reason}")
    print("="*80 + "\n")


def save_snapshots(update: MonitorUpdate, output_path: Path):
    """Write the evaluated universe of one tick to CSV"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    snapshots_to_frame(update.snapshots).to_csv(output_path, index=False)
    logger.info(f"Saved {len(update.snapshots)} snapshots to {output_path}")


def main():
    parser = argparse.ArgumentParser(
        description='Run the options Greeks monitor from JSON configuration',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
            Examples:
            python scripts/run_greeks_monitor.py configs/default.json
            python scripts/run_greeks_monitor.py configs/default.json --ticks 3 --interval 1
            python scripts/run_greeks_monitor.py configs/default.json --once --output universe.csv
        """
    )

    parser.add_argument(
        'config',
        type=str,
        help='Path to JSON config file'
    )

    parser.add_argument(
        '--ticks',
        type=int,
        default=None,
        help='Stop after this many ticks (overrides monitor.max_ticks)'
    )

    parser.add_argument(
        '--interval',
        type=float,
        default=None,
        help='Seconds between ticks (overrides monitor.interval_seconds)'
    )

    parser.add_argument(
        '--once',
        action='store_true',
        help='Run a single tick and exit'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Write the last evaluated universe to this CSV file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (DEBUG) logging'
    )

    args = parser.parse_args()

    # Load config
    try:
        config = EngineConfig.from_json(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}")
        sys.exit(1)

    # Override logging level if verbose
    if args.verbose:
        config.logging['level'] = 'DEBUG'

    # Setup logging
    config.setup_logging()

    logger.info(f"Starting monitor: {config.config_name}")
    logger.info(f"Data source: {config.data_source['type']}")

    run_kwargs = config.monitor_kwargs()
    if args.ticks is not None:
        run_kwargs['max_ticks'] = args.ticks
    if args.interval is not None:
        run_kwargs['interval_seconds'] = args.interval
    if args.once:
        run_kwargs['max_ticks'] = 1

    try:
        monitor = GreeksMonitor(
            engine=config.create_engine(),
            provider=config.create_provider(),
            iv_regime=config.iv_regime,
        )
        monitor.subscribe(print_update)

        ticks = monitor.run(**run_kwargs)
        logger.info(f"Monitor finished after {ticks} ticks")

        # Save last universe
        output_path = None
        if args.output:
            output_path = Path(args.output)
        elif config.output['save_snapshots']:
            output_path = config.output_dir / config.output['snapshots_filename']

        if output_path is not None and monitor.latest is not None:
            save_snapshots(monitor.latest, output_path)

    except Exception as e:
        logger.error(f"Monitor failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
