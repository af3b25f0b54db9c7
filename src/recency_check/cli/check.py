from __future__ import annotations

import argparse
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from recency_check.config import CheckConfig
from recency_check.models import RunResult
from recency_check.services.collector import collect_entries
from recency_check.services.fetchers import PageFetcher, make_fetcher
from recency_check.services.reporter import (
    capture_artifact,
    emit,
    format_error,
    format_report,
    report_to_dict,
    should_capture,
)
from recency_check.services.validator import validate_order

log = logging.getLogger(__name__)


def close_quietly(fetcher: PageFetcher) -> None:
    """Close the page session, logging rather than raising on failure."""
    try:
        fetcher.close()
    except Exception as e:
        log.warning("Could not close page session: %s", e)


def run_check(config: CheckConfig, fetcher: Optional[PageFetcher] = None) -> RunResult:
    """Run one check and return its result.

    The fetcher is closed on every exit path. Unexpected errors are logged,
    a best-effort "error" artifact is captured, and the exception re-raised.
    """
    started = time.monotonic()
    try:
        if fetcher is None:
            fetcher = make_fetcher(config)
        # One reference time for the whole run so entries stay comparable.
        now = datetime.now(timezone.utc)
        entries = collect_entries(fetcher, config, now)
        verdict = validate_order(entries, exhaustive=config.exhaustive)
        artifact = None
        if should_capture(verdict):
            artifact = capture_artifact(fetcher, config.artifact_dir, "validation_failure")
        return RunResult(
            url=config.url,
            now=now,
            entries=entries,
            verdict=verdict,
            elapsed_seconds=time.monotonic() - started,
            artifact=artifact,
        )
    except Exception as e:
        log.exception("Unexpected error while checking %s", config.url)
        artifact = None
        if fetcher is not None:
            artifact = capture_artifact(fetcher, config.artifact_dir, "error")
        emit(format_error(e, time.monotonic() - started, artifact), logging.ERROR)
        raise
    finally:
        if fetcher is not None:
            close_quietly(fetcher)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check that a listing page is ordered from newest to oldest"
    )
    parser.add_argument("--url", help="Listing URL to check")
    parser.add_argument("--max-items", type=int, help="Maximum number of items to collect")
    parser.add_argument("--fetcher", choices=["html", "selenium"], help="Page fetcher to use")
    parser.add_argument(
        "--headed", action="store_true", help="Show the browser window (selenium fetcher only)"
    )
    parser.add_argument("--retries", type=int, help="Navigation attempts before giving up")
    parser.add_argument("--retry-delay", type=float, help="Base backoff delay in seconds")
    parser.add_argument("--artifact-dir", type=Path, help="Directory for failure artifacts")
    parser.add_argument(
        "--exhaustive", action="store_true", help="Report every inversion, not just the first"
    )
    parser.add_argument("--json", type=Path, dest="json_path", help="Also write a JSON report here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace, base: Optional[CheckConfig] = None) -> CheckConfig:
    return (base or CheckConfig()).with_overrides(
        url=args.url,
        max_items=args.max_items,
        fetcher=args.fetcher,
        headless=False if args.headed else None,
        max_retries=args.retries,
        retry_base_delay=args.retry_delay,
        artifact_dir=args.artifact_dir,
        exhaustive=True if args.exhaustive else None,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    config = config_from_args(args)

    result = run_check(config)
    emit(format_report(result), logging.INFO if result.verdict.sorted else logging.ERROR)
    if args.json_path:
        args.json_path.write_text(json.dumps(report_to_dict(result), indent=2), encoding="utf-8")
    return 0 if result.verdict.sorted else 1


if __name__ == "__main__":
    raise SystemExit(main())
