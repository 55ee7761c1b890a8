import json
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from structlog.testing import capture_logs

from athlete_results.config import Settings
from athlete_results.exceptions import StorageError
from athlete_results.pipeline import Pipeline
from athlete_results.scraper import Scraper
from tests.conftest import FLOW_URL, TRACK_URL, WRESTLING_URL

FLOW_TABLE = """
<table>
  <thead><tr><th>Date</th><th>Event</th><th>Result</th></tr></thead>
  <tbody><tr><td>3/1/24</td><td>Regional Open</td><td>1st</td></tr></tbody>
</table>
"""


def _pipeline(settings: Settings, pages: dict[str, httpx.Response], calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        return pages.get(str(request.url), httpx.Response(404))

    scraper = Scraper(transport=httpx.MockTransport(handler))
    return Pipeline(settings, scraper=scraper)


def _read(path: Path) -> list[dict]:
    return json.loads(path.read_text(encoding="utf-8"))


def test_single_flow_row_end_to_end(settings: Settings, results_file: Path) -> None:
    pages = {FLOW_URL: httpx.Response(200, text=FLOW_TABLE)}

    result = _pipeline(settings, pages).run()

    assert _read(results_file) == [
        {
            "date": "2024-03-01",
            "title": "Regional Open",
            "result": "1st",
            "source": "flow",
            "link": FLOW_URL,
        }
    ]
    assert result.written == 1
    assert result.new == 1


def test_all_sources_are_scraped(settings, results_file, load_html) -> None:
    pages = {
        FLOW_URL: httpx.Response(200, text=load_html("flow_profile.html")),
        WRESTLING_URL: httpx.Response(200, text=load_html("wrestling_profile.html")),
        TRACK_URL: httpx.Response(200, text=load_html("track_profile.html")),
    }

    result = _pipeline(settings, pages).run()
    data = _read(results_file)

    assert result.extracted == {"flow": 6, "wrestlingtournaments": 3, "track": 3}
    assert result.written == len(data) == 12
    assert data[0]["title"] == "Regional Open"
    assert data[0]["date"] == "2024-03-01"
    turkey_bowl = next(d for d in data if d["title"] == "Turkey Bowl")
    assert turkey_bowl["date"] == "2023-11-18"
    assert turkey_bowl["result"] == "Champion - 4-0"
    # Unparseable dates sort last
    assert data[-1]["date"] in ("", "not listed")


def test_failed_source_is_skipped(settings, results_file, load_html) -> None:
    pages = {
        FLOW_URL: httpx.Response(200, text=load_html("flow_profile.html")),
        WRESTLING_URL: httpx.Response(500, text="Internal Server Error"),
        TRACK_URL: httpx.Response(200, text=load_html("track_profile.html")),
    }

    with capture_logs() as logs:
        result = _pipeline(settings, pages).run()

    warnings = [e for e in logs if e["event"] == "fetch_failed"]
    assert len(warnings) == 1
    assert warnings[0]["error_data"]["url"] == WRESTLING_URL

    assert result.extracted["wrestlingtournaments"] == 0
    sources = {d["source"] for d in _read(results_file)}
    assert sources == {"flow", "track"}


def test_rerun_does_not_grow_results(settings, results_file, load_html) -> None:
    pages = {FLOW_URL: httpx.Response(200, text=load_html("flow_profile.html"))}

    first = _pipeline(settings, pages).run()
    snapshot = results_file.read_text(encoding="utf-8")
    second = _pipeline(settings, pages).run()

    assert second.written == first.written
    assert second.new == 0
    assert results_file.read_text(encoding="utf-8") == snapshot


def test_curated_records_are_preserved(settings, results_file) -> None:
    results_file.parent.mkdir(parents=True)
    curated = {
        "date": "2024-03-01",
        "title": "Regional Open",
        "result": "1st",
        "source": "flow",
        "link": "https://manual.test/bracket",
        "notes": "Outstanding wrestler award",
    }
    results_file.write_text(json.dumps([curated]), encoding="utf-8")
    pages = {FLOW_URL: httpx.Response(200, text=FLOW_TABLE)}

    result = _pipeline(settings, pages).run()

    assert _read(results_file) == [curated]
    assert result.new == 0


def test_corrupt_state_aborts_before_fetching(settings, results_file) -> None:
    results_file.parent.mkdir(parents=True)
    results_file.write_text("[{broken", encoding="utf-8")
    calls: list[str] = []
    pages = {FLOW_URL: httpx.Response(200, text=FLOW_TABLE)}

    with pytest.raises(StorageError):
        _pipeline(settings, pages, calls).run()

    assert calls == []
    assert results_file.read_text(encoding="utf-8") == "[{broken"


def test_extraction_error_is_isolated(settings, results_file) -> None:
    pages = {
        FLOW_URL: httpx.Response(200, text=FLOW_TABLE),
        TRACK_URL: httpx.Response(200, text="<table></table>"),
    }
    pipeline = _pipeline(settings, pages)

    with patch.object(
        pipeline.sources[2], "extract", side_effect=RuntimeError("unexpected")
    ):
        with capture_logs() as logs:
            result = pipeline.run()

    assert any(
        e["event"] == "extraction_failed" and e["source"] == "track" for e in logs
    )
    assert result.extracted["track"] == 0
    assert result.written == 1


def test_dry_run_does_not_write(settings, results_file) -> None:
    pages = {FLOW_URL: httpx.Response(200, text=FLOW_TABLE)}

    result = _pipeline(replace(settings, dry_run=True), pages).run()

    assert result.dry_run
    assert result.written == 1
    assert not results_file.exists()


def test_fetches_all_sources(settings) -> None:
    calls: list[str] = []
    pipeline = _pipeline(settings, {}, calls)

    pipeline.run()

    assert sorted(calls) == sorted([FLOW_URL, WRESTLING_URL, TRACK_URL])


def test_run_message_summarizes_changes(settings) -> None:
    pages = {FLOW_URL: httpx.Response(200, text=FLOW_TABLE)}

    result = _pipeline(settings, pages).run()

    assert "New: 1, Total: 1" in result.message
    assert "Extracted: flow=1, wrestlingtournaments=0, track=0" in result.message


def test_malformed_source_url_only_skips_that_source(settings, results_file) -> None:
    bad_settings = replace(settings, track_url="https://exa mple.com/\x00")
    pages = {FLOW_URL: httpx.Response(200, text=FLOW_TABLE)}

    result = _pipeline(bad_settings, pages).run()

    assert result.extracted == {"flow": 1, "wrestlingtournaments": 0, "track": 0}
    assert [d["title"] for d in _read(results_file)] == ["Regional Open"]


def test_explicit_empty_source_list_is_respected(settings, results_file) -> None:
    calls: list[str] = []
    scraper = Scraper(transport=httpx.MockTransport(lambda r: calls.append(r)))

    result = Pipeline(settings, scraper=scraper, sources=[]).run()

    assert calls == []
    assert result.extracted == {}
    assert result.written == 0
    assert _read(results_file) == []
