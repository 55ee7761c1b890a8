from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import soupsieve
import structlog
import yaml

from .exceptions import ConfigurationError
from .sources import SOURCES, SourceHeuristics

logger = structlog.get_logger(__name__)

DEFAULT_FLOW_URL = "https://www.flowrestling.org/nextgen/people/13583018?tab=home"
DEFAULT_WRESTLING_URL = (
    "https://www.wrestlingtournaments.com/wrestlerProfile/76818?tab=results"
)
DEFAULT_TRACK_URL = (
    "https://www.trackwrestling.com/membership/ViewProfile.jsp?twId=1225324138"
)
DEFAULT_OUTPUT = "data/tournaments.json"
DEFAULT_USER_AGENT = "HebrewHammerScraper/1.0 (+https://hebrewhammer.live/)"

HEURISTIC_KEYS = ("keywords", "containers", "items")


@dataclass(frozen=True)
class Settings:
    """Run configuration, resolved once at startup and passed to the pipeline."""

    flow_url: str = DEFAULT_FLOW_URL
    wrestling_url: str = DEFAULT_WRESTLING_URL
    track_url: str = DEFAULT_TRACK_URL
    output_path: str = DEFAULT_OUTPUT
    user_agent: str = DEFAULT_USER_AGENT
    heuristics: dict[str, SourceHeuristics] = field(default_factory=dict)
    dry_run: bool = False

    @property
    def source_urls(self) -> dict[str, str]:
        """Profile URL per source name."""
        return {
            "flow": self.flow_url,
            "wrestlingtournaments": self.wrestling_url,
            "track": self.track_url,
        }


def load_heuristics(path: str | Path) -> dict[str, SourceHeuristics]:
    """Loads per-source keyword and selector overrides from a YAML file.

    Keys left out of a section keep the source's default value.

    Args:
        path: Path to the YAML file.

    Returns:
        A mapping of source name to the effective heuristics.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed.
    """
    heuristics_file = Path(path)
    if not heuristics_file.exists():
        raise ConfigurationError(
            f"Heuristics file not found: {heuristics_file}",
            parameter="heuristics",
            expected_format="a path to an existing YAML file",
        )

    try:
        with open(heuristics_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read heuristics file {heuristics_file}: {e}",
            parameter="heuristics",
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Heuristics file must map source names to settings",
            parameter="heuristics",
            expected_format="a mapping of source name to keywords/containers/items",
        )

    result = {}
    for source_name, section in data.items():
        source_cls = SOURCES.get(source_name)
        if source_cls is None:
            raise ConfigurationError(
                f"Unknown source in heuristics file: {source_name}",
                parameter=str(source_name),
                expected_format=f"one of {', '.join(SOURCES)}",
            )
        result[source_name] = _parse_section(
            source_name, section or {}, source_cls.default_heuristics
        )

    logger.info("heuristics_loaded", path=str(heuristics_file), sources=list(result))
    return result


def _parse_section(
    source_name: str, section: Any, defaults: SourceHeuristics
) -> SourceHeuristics:
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Heuristics for {source_name} must be a mapping",
            parameter=source_name,
            expected_format="a mapping with keywords, containers and items",
        )

    overrides = {}
    for key, value in section.items():
        if key not in HEURISTIC_KEYS:
            raise ConfigurationError(
                f"Unknown heuristics key for {source_name}: {key}",
                parameter=f"{source_name}.{key}",
                expected_format=f"one of {', '.join(HEURISTIC_KEYS)}",
            )
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(
                f"Heuristics value {source_name}.{key} must be a list of strings",
                parameter=f"{source_name}.{key}",
                expected_format="a list of strings",
            )
        if key == "keywords":
            overrides[key] = tuple(v.lower() for v in value)
        else:
            overrides[key] = tuple(value)

    heuristics = replace(defaults, **overrides)
    if heuristics.list_selector:
        try:
            soupsieve.compile(heuristics.list_selector)
        except soupsieve.SelectorSyntaxError as e:
            raise ConfigurationError(
                f"Invalid selector for {source_name}: {e}",
                parameter=source_name,
                expected_format="valid CSS selectors in containers and items",
            ) from e

    return heuristics
