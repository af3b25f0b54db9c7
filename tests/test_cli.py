from __future__ import annotations

import json
from pathlib import Path

import pytest

import recency_check.cli.check as check
from recency_check.config import CheckConfig
from recency_check.errors import ExtractionError, FetchError


def test_run_check_passes_and_closes(fake_fetcher, config: CheckConfig) -> None:
    fetcher = fake_fetcher([("A", "1 minute ago"), ("B", "2 minutes ago")])
    result = check.run_check(config, fetcher=fetcher)
    assert result.verdict.sorted
    assert result.artifact is None
    assert result.elapsed_seconds >= 0
    assert fetcher.closed
    assert fetcher.captured == []


def test_run_check_captures_on_inversion(fake_fetcher, config: CheckConfig) -> None:
    fetcher = fake_fetcher([("A", "5 minutes ago"), ("B", "2 minutes ago")])
    result = check.run_check(config, fetcher=fetcher)
    assert not result.verdict.sorted
    assert result.artifact is not None
    assert result.artifact.name.startswith("validation_failure_")
    assert fetcher.closed


def test_run_check_uses_single_reference_time(fake_fetcher, config: CheckConfig) -> None:
    fetcher = fake_fetcher([("A", "10 minutes ago"), ("B", "10 minutes ago")])
    result = check.run_check(config, fetcher=fetcher)
    assert result.entries[0].instant == result.entries[1].instant
    assert result.verdict.sorted


def test_run_check_reraises_and_cleans_up(fake_fetcher, config: CheckConfig) -> None:
    fetcher = fake_fetcher([("A", "1 minute ago"), (None, "2 minutes ago")])
    with pytest.raises(ExtractionError):
        check.run_check(config, fetcher=fetcher)
    assert fetcher.closed
    assert len(fetcher.captured) == 1
    assert fetcher.captured[0].name.startswith("error_")


def test_run_check_fetch_failure(fake_fetcher, config: CheckConfig) -> None:
    fetcher = fake_fetcher([], goto_failures=10)
    with pytest.raises(FetchError):
        check.run_check(config, fetcher=fetcher)
    assert fetcher.closed


def test_main_exit_codes_and_json(
    monkeypatch: pytest.MonkeyPatch, fake_fetcher, tmp_path: Path
) -> None:
    rows = {"value": [("A", "1 minute ago"), ("B", "1 hour ago")]}
    monkeypatch.setattr(check, "make_fetcher", lambda cfg: fake_fetcher(rows["value"]))
    out = tmp_path / "report.json"
    argv = ["--url", "http://example.com", "--retry-delay", "0", "--artifact-dir", str(tmp_path), "--json", str(out)]

    assert check.main(argv) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["verdict"]["sorted"] is True
    assert data["url"] == "http://example.com"

    rows["value"] = [("A", "1 hour ago"), ("B", "1 minute ago")]
    assert check.main(argv) == 1


def test_config_from_args_applies_flags() -> None:
    args = check.build_parser().parse_args(
        ["--max-items", "10", "--fetcher", "selenium", "--headed", "--exhaustive", "--retries", "5"]
    )
    cfg = check.config_from_args(args, CheckConfig(url="http://x"))
    assert cfg.url == "http://x"
    assert cfg.max_items == 10
    assert cfg.fetcher == "selenium"
    assert cfg.headless is False
    assert cfg.exhaustive is True
    assert cfg.max_retries == 5


def test_fetcher_construction_failure_is_reported(
    monkeypatch: pytest.MonkeyPatch, config: CheckConfig, caplog: pytest.LogCaptureFixture
) -> None:
    def no_browser(cfg: CheckConfig):
        raise RuntimeError("chromedriver not found")

    monkeypatch.setattr(check, "make_fetcher", no_browser)
    with pytest.raises(RuntimeError, match="chromedriver"):
        check.run_check(config)
    assert "Unexpected error while checking" in caplog.text
    assert "Run aborted: RuntimeError: chromedriver not found" in caplog.text


def test_close_failure_does_not_mask_original_error(fake_fetcher, config: CheckConfig) -> None:
    fetcher = fake_fetcher([(None, "1 minute ago")])

    def broken_close() -> None:
        raise OSError("browser already gone")

    fetcher.close = broken_close  # type: ignore[method-assign]
    with pytest.raises(ExtractionError):
        check.run_check(config, fetcher=fetcher)


def test_close_failure_after_success_is_logged(
    fake_fetcher, config: CheckConfig, caplog: pytest.LogCaptureFixture
) -> None:
    fetcher = fake_fetcher([("A", "1 minute ago")])

    def broken_close() -> None:
        raise OSError("browser already gone")

    fetcher.close = broken_close  # type: ignore[method-assign]
    result = check.run_check(config, fetcher=fetcher)
    assert result.verdict.sorted
    assert "Could not close page session: browser already gone" in caplog.text
