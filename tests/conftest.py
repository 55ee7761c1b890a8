"""Shared pytest fixtures for athlete results scraper tests."""

from pathlib import Path

import pytest

from athlete_results.config import Settings

FLOW_URL = "https://flow.test/people/1"
WRESTLING_URL = "https://wrestling.test/wrestlerProfile/2"
TRACK_URL = "https://track.test/ViewProfile.jsp?twId=3"


@pytest.fixture
def test_data_dir() -> Path:
    """Returns the path to the test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture
def load_html(test_data_dir: Path):
    """Returns a loader for HTML fixtures in tests/data."""

    def _load(filename: str) -> str:
        return (test_data_dir / filename).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def results_file(tmp_path: Path) -> Path:
    """Provides a results file path inside a not yet existing data directory."""
    return tmp_path / "data" / "tournaments.json"


@pytest.fixture
def settings(results_file: Path) -> Settings:
    """Settings pointing at fake source URLs and a temporary results file."""
    return Settings(
        flow_url=FLOW_URL,
        wrestling_url=WRESTLING_URL,
        track_url=TRACK_URL,
        output_path=str(results_file),
    )
