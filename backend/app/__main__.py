"""CLI entry point for the pool slope trader.

Replays decoded DEX pool records (one JSON object per line) through the
trading engine and logs the resulting performance summary.

Usage:
    python -m app --input records.jsonl
    python -m app --input records.jsonl --strategy B --output summary.json
    cat records.jsonl | python -m app --input -
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from app.clients.record_stream import JsonLinesRecordSource
from app.config import get_settings
from app.report import ReportFormatter
from app.services.pool_monitor import PoolMonitor
from app.trading_config import load_config_env, load_trading_config
from core.engine import TradingEngine

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate the pool slope strategy on decoded DEX pool records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m app --input records.jsonl
  python -m app --input records.jsonl --strategy B --summary-interval 30
  python -m app --input - --output summary.json < records.jsonl
        """,
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="JSON-lines file of decoded records, or '-' for stdin",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="trading.yaml with strategy overrides",
    )
    parser.add_argument(
        "--strategy",
        choices=["A", "B"],
        default=None,
        help="Override the configured strategy",
    )
    parser.add_argument(
        "--summary-interval",
        type=float,
        default=None,
        help="Seconds between performance summaries (0 disables)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for JSON results",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """Build the engine, replay the input and report."""
    settings = get_settings()
    config_path = args.config or Path(settings.trading_config_path)
    config = load_trading_config(config_path, settings=settings)
    if args.strategy:
        config = config.model_copy(update={"strategy": args.strategy})

    interval = (
        args.summary_interval
        if args.summary_interval is not None
        else settings.summary_interval
    )

    engine = TradingEngine(config)
    monitor = PoolMonitor(engine, summary_interval=interval)
    source = JsonLinesRecordSource(args.input)

    logger.info(
        f"Starting pool monitor: strategy={config.strategy} "
        f"trade_size={config.trade_size} slippage={config.slippage} "
        f"slope_threshold={config.slope_threshold}"
    )

    task = asyncio.create_task(monitor.run(source))

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except NotImplementedError:
            pass  # Windows

    # The monitor logs the final summary when it stops
    try:
        summary = await task
    except asyncio.CancelledError:
        logger.info("Shutting down...")
        summary = engine.performance_summary()

    if args.output:
        ReportFormatter.save_json(summary, args.output)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # Settings are cached on first use; the config's .env must be loaded first
    if args.config is not None:
        load_config_env(args.config)

    # Configure logging
    level = logging.DEBUG if args.verbose else getattr(
        logging, get_settings().log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    try:
        return asyncio.run(run(args))
    except FileNotFoundError as e:
        logger.error(f"Input not found: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
