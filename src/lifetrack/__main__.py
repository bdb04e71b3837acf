"""lifetrack command line entry point.

Usage:
    python -m lifetrack [OPTIONS] COMMAND [ARGS]

Commands:
    capture TEXT...          Extract structured records from free text
    reparse ORIGINAL EDITED  Re-extract an edited capture if it changed
    dashboard                Show today's derived metrics
    analytics                Show analytics series for a range
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from . import __version__
from .capture import CaptureError, create_extraction_service, create_extractor
from .config import LifeTrackConfig
from .config.loader import load_config
from .metrics import TimeRange
from .service import LifeTrackService
from .storage import MongoStorageClient

logger = logging.getLogger("lifetrack")


def setup_logging(
    level: str,
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="lifetrack",
        description="lifetrack - free-text capture and life metrics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m lifetrack capture "call mom tomorrow, 3x10 squats at 135"
  python -m lifetrack --mock capture "first" "second"
  python -m lifetrack --profile prod analytics --range weekly

Environment:
  LIFETRACK_PROFILE    Set profile (dev, prod, test)
  ANTHROPIC_API_KEY    Credential for the extraction service
""",
    )

    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile (default: auto-detect)",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the scripted extraction service instead of Claude",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", required=True)

    capture = commands.add_parser("capture", help="Extract structured records from free text")
    capture.add_argument("texts", nargs="+", metavar="TEXT")

    reparse = commands.add_parser("reparse", help="Re-extract an edited capture if it changed")
    reparse.add_argument("original")
    reparse.add_argument("edited")

    commands.add_parser("dashboard", help="Show today's derived metrics")

    analytics = commands.add_parser("analytics", help="Show analytics series")
    analytics.add_argument(
        "--range",
        dest="time_range",
        choices=[choice.value for choice in TimeRange],
        default=TimeRange.WEEKLY.value,
    )

    return parser.parse_args(argv)


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _print(data: Any) -> None:
    print(json.dumps(data, indent=2, default=_json_default))


def build_service(
    config: LifeTrackConfig,
    use_mock: bool,
    storage: MongoStorageClient | None,
) -> LifeTrackService:
    """Assemble the service from configuration."""
    service = create_extraction_service(config.extraction, use_mock=use_mock)
    extractor = create_extractor(service, config.extraction, config.cache)
    tz = ZoneInfo(config.analytics.timezone) if config.analytics.timezone else None
    return LifeTrackService(
        extractor,
        repository=storage.records() if storage is not None else None,
        user_id=config.user_id,
        batch_max_tokens=config.extraction.batch_max_tokens,
        tz=tz,
    )


def run(args: argparse.Namespace, config: LifeTrackConfig) -> int:
    """Run the selected command."""
    storage = None
    if config.storage.enabled:
        storage = MongoStorageClient(uri=config.storage.uri, database=config.storage.database)
        storage.connect()

    try:
        service = build_service(config, args.mock, storage)

        if args.command == "capture":
            if len(args.texts) == 1:
                outcomes = [service.capture(args.texts[0])]
            else:
                outcomes = service.capture_many(args.texts)
            _print([{"text": o.text, **o.result.to_dict(), "saved": o.saved_ids} for o in outcomes])

        elif args.command == "reparse":
            prior = service.extractor.extract(args.original)
            outcome = service.edit_capture(args.original, args.edited, prior)
            _print({"changed": outcome.changed, "parsed": outcome.parsed.to_dict()})

        elif args.command == "dashboard":
            if storage is None:
                logger.warning("Storage is disabled; dashboard metrics will be empty")
            _print(asdict(service.dashboard()))

        elif args.command == "analytics":
            series = service.analytics(TimeRange(args.time_range))
            _print({name: [asdict(row) for row in rows] for name, rows in series.items()})

    finally:
        if storage is not None:
            storage.disconnect()

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    # Load .env from the project root, falling back to the working directory
    env_file = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_file if env_file.exists() else None)

    args = parse_args(argv)

    try:
        config = load_config(path=args.config, profile=args.profile)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config.logging.level, config.logging.format)
    logger.debug(f"lifetrack {__version__} starting ({args.command})")

    try:
        return run(args, config)
    except CaptureError as e:
        logger.error(f"Capture failed: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
