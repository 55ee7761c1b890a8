from athlete_results.sources.base_source import BaseSource, SourceHeuristics


class FlowSource(BaseSource):
    """Extractor for Flowrestling athlete profiles."""

    name = "flow"
    default_heuristics = SourceHeuristics(
        keywords=("event", "result", "tournament"),
        containers=(".results", ".result-list", ".profile-results"),
        items=("li", ".row"),
    )
