"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys
import uuid
from pathlib import Path

from huur_violations.config import config, Config
from huur_violations.finders.registry import load_finders, supported_finders
from huur_violations.jobs.loader import Query, ViolationLoader
from huur_violations.jobs.metrics_exporter import MetricsExporter
from huur_violations.logging_conf import setup_logging
from huur_violations.store.dev_storage import DevStorage
from huur_violations.store.huur_api import HuurApiClient

logger = logging.getLogger(__name__)


def parse_query(value: str) -> Query:
    """Parse `PLATE:STATE` (a comma also works as separator)."""
    for separator in (":", ","):
        if separator in value:
            plate, state = value.split(separator, 1)
            if plate.strip() and state.strip():
                return Query(plate=plate.strip().upper(), state=state.strip().upper())
    raise argparse.ArgumentTypeError(f"Expected PLATE:STATE, got {value!r}")


def read_queries(path: Path) -> list[Query]:
    """One `PLATE,STATE` per line; blank lines and # comments are skipped."""
    queries = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                queries.append(parse_query(line))
            except argparse.ArgumentTypeError:
                logger.warning(f"{path}:{line_no}: skipping invalid line {line!r}")
    return queries


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Huur parking violation finder")

    # Queries
    parser.add_argument(
        "--query",
        type=parse_query,
        action="append",
        default=[],
        metavar="PLATE:STATE",
        help="Plate and state to search (repeatable)",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="File with one PLATE,STATE per line",
    )

    # Finders
    parser.add_argument(
        "--finders",
        type=str,
        default=None,
        help=f"Comma-separated finders to run (default: all of {', '.join(supported_finders())})",
    )
    parser.add_argument(
        "--max-threads",
        type=int,
        default=None,
        help=f"Concurrent finder invocations (default: {config.MAX_THREADS})",
    )

    # Mode flags
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (verbose logs, local storage, no submission unless --submit)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run: search only, nothing is submitted to the Huur API",
    )
    parser.add_argument(
        "--submit",
        action="store_true",
        help="Explicitly enable submission (required in DEV mode)",
    )

    # Informational
    parser.add_argument(
        "--list-finders",
        action="store_true",
        help="List registered finders and exit",
    )
    parser.add_argument(
        "--list-submitted",
        action="store_true",
        help="List violations stored in the Huur API and exit",
    )

    return parser.parse_args(argv)


async def list_submitted() -> int:
    async with HuurApiClient(config.HUUR_API_BASE) as client:
        violations = await client.list_violations()
    logger.info(f"Huur API holds {len(violations)} violation(s)")
    for violation in violations:
        logger.info(violation.summary_line())
    return len(violations)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    setup_logging()
    args = parse_args(argv)

    if args.list_finders:
        for finder in load_finders(supported_finders()):
            logger.info(f"{finder.key}: {finder.name} ({finder.link})")
        return

    if args.list_submitted:
        try:
            Config.validate(require_sink=True)
        except ValueError as e:
            logger.error(f"Configuration error: {e}")
            sys.exit(1)
        asyncio.run(list_submitted())
        return

    is_dev = args.dev
    is_dry_run = args.dry_run
    if is_dev:
        logging.getLogger().setLevel(logging.DEBUG)
        if not args.submit:
            logger.warning("DEV mode: submission disabled (use --submit to enable)")
            is_dry_run = True

    queries = list(args.query)
    if args.input:
        queries.extend(read_queries(args.input))
    if not queries:
        logger.error("Must specify at least one --query or an --input file")
        sys.exit(1)

    if args.max_threads is not None:
        config.MAX_THREADS = max(args.max_threads, 1)
    enabled = [key for key in args.finders.split(",") if key.strip()] if args.finders else None

    # Validate config (sink not required in dry-run)
    try:
        Config.validate(require_sink=not is_dry_run)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    run_id = str(uuid.uuid4())[:8]
    logger.info("=" * 60)
    logger.info("Huur Violations Finder Starting")
    logger.info(f"Mode: {'DEV' if is_dev else 'PROD'}")
    logger.info(f"Run ID: {run_id}")
    logger.info(f"Queries: {len(queries)}")
    logger.info(f"Max threads: {config.MAX_THREADS}")
    logger.info(f"Dry-run: {is_dry_run}")
    logger.info("=" * 60)

    loader = ViolationLoader(
        finders=load_finders(enabled),
        max_threads=config.MAX_THREADS,
        dry_run=is_dry_run,
        dev_storage=DevStorage(run_id) if is_dev else None,
        exporter=MetricsExporter(run_id),
    )
    try:
        asyncio.run(loader.run(queries))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
