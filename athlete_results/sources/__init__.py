"""Profile page extractors, one per results site."""

from athlete_results.sources.base_source import BaseSource, SourceHeuristics
from athlete_results.sources.flow import FlowSource
from athlete_results.sources.track import TrackSource
from athlete_results.sources.wrestlingtournaments import WrestlingTournamentsSource

# Ordered as the sources are fetched and reported.
SOURCES: dict[str, type[BaseSource]] = {
    FlowSource.name: FlowSource,
    WrestlingTournamentsSource.name: WrestlingTournamentsSource,
    TrackSource.name: TrackSource,
}


def build_sources(
    urls: dict[str, str],
    heuristics: dict[str, SourceHeuristics] | None = None,
) -> list[BaseSource]:
    """Instantiates one extractor per configured source.

    Args:
        urls: Mapping of source name to profile URL.
        heuristics: Optional per-source heuristics overrides.

    Returns:
        Extractors in registry order, skipping sources without a URL.
    """
    heuristics = heuristics or {}
    return [
        source_cls(urls[name], heuristics.get(name))
        for name, source_cls in SOURCES.items()
        if urls.get(name)
    ]


__all__ = [
    "SOURCES",
    "BaseSource",
    "FlowSource",
    "SourceHeuristics",
    "TrackSource",
    "WrestlingTournamentsSource",
    "build_sources",
]
