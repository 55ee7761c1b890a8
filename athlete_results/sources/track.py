from athlete_results.sources.base_source import BaseSource, SourceHeuristics


class TrackSource(BaseSource):
    """Extractor for TrackWrestling membership profiles."""

    name = "track"
    default_heuristics = SourceHeuristics(
        keywords=("tournament", "place", "result"),
        containers=(".competition-history", ".results"),
        items=("li", "tr"),
    )
