"""Turn check results into human-readable lines and failure artifacts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from recency_check.models import Inversion, RunResult, ValidationVerdict
from recency_check.services.fetchers import PageFetcher
from recency_check.utils.artifacts import artifact_stem

log = logging.getLogger(__name__)

PASS_MESSAGE = "✅ Validation passed: items are sorted from newest to oldest"
FAIL_MESSAGE = "❌ Validation failed: items are not sorted from newest to oldest"


def describe_inversion(inv: Inversion) -> List[str]:
    return [
        f"Sorting error detected at position {inv.index}:",
        f"  [{inv.index - 1}] {inv.previous.title} ({inv.previous.label})",
        f"  [{inv.index}] {inv.current.title} ({inv.current.label})",
        f"  item {inv.index} is {inv.delta_minutes} minute(s) newer than the one before it",
    ]


def format_report(result: RunResult) -> List[str]:
    verdict = result.verdict
    lines = [f"Collected {len(result.entries)} items from {result.url}"]
    if verdict.sorted:
        lines.append(PASS_MESSAGE)
    else:
        for inv in verdict.inversions:
            lines.extend(describe_inversion(inv))
        lines.append(FAIL_MESSAGE)
    anomalies = result.anomalies
    if anomalies:
        lines.append(f"{len(anomalies)} time label(s) could not be parsed and were treated as 'now':")
        lines.extend(f"  [{e.position}] {e.label!r}: {e.anomaly}" for e in anomalies)
    if result.artifact is not None:
        lines.append(f"Failure artifact saved to {result.artifact}")
    lines.append(f"Finished in {result.elapsed_seconds:.2f}s")
    return lines


def format_error(exc: BaseException, elapsed_seconds: float, artifact: Optional[Path] = None) -> List[str]:
    lines = [f"Run aborted: {type(exc).__name__}: {exc}"]
    if artifact is not None:
        lines.append(f"Failure artifact saved to {artifact}")
    lines.append(f"Finished in {elapsed_seconds:.2f}s")
    return lines


def emit(lines: List[str], level: int = logging.INFO) -> None:
    for line in lines:
        log.log(level, line)


def should_capture(verdict: ValidationVerdict) -> bool:
    return not verdict.sorted


def capture_artifact(fetcher: PageFetcher, directory: Path, context: str) -> Optional[Path]:
    """Save a snapshot of the current page; failures are logged, not raised."""
    try:
        path = fetcher.capture(artifact_stem(directory, context))
    except Exception as e:
        log.warning("Could not capture %s artifact: %s", context, e)
        return None
    if path is not None:
        log.info("Saved %s artifact to %s", context, path)
    return path


def report_to_dict(result: RunResult) -> Dict[str, Any]:
    """JSON-serialisable summary of a run."""
    data = result.model_dump(mode="json")
    data["anomalies"] = [e.position for e in result.anomalies]
    return data
