from athlete_results.sources.base_source import BaseSource, SourceHeuristics


class WrestlingTournamentsSource(BaseSource):
    """Extractor for wrestlingtournaments.com wrestler profiles.

    Results are usually listed as match rows (date, event, place/opponent).
    """

    name = "wrestlingtournaments"
    default_heuristics = SourceHeuristics(
        keywords=("event", "place", "opponent"),
        containers=(".profileResults", ".results"),
        items=("li", "tr"),
    )
