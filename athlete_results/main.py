import logging
import sys
from pathlib import Path

import click
import structlog

from athlete_results.config import (
    DEFAULT_FLOW_URL,
    DEFAULT_OUTPUT,
    DEFAULT_TRACK_URL,
    DEFAULT_USER_AGENT,
    DEFAULT_WRESTLING_URL,
    Settings,
    load_heuristics,
)
from athlete_results.exceptions import ScraperError
from athlete_results.pipeline import Pipeline

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Routes structlog through stdlib logging on stdout."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


@click.command()
@click.option(
    "--flow-url",
    envvar="FLOW_URL",
    default=DEFAULT_FLOW_URL,
    show_default=True,
    help="Flowrestling profile URL",
)
@click.option(
    "--wrestling-url",
    envvar="WRESTLING_URL",
    default=DEFAULT_WRESTLING_URL,
    show_default=True,
    help="WrestlingTournaments profile URL",
)
@click.option(
    "--track-url",
    envvar="TRACK_URL",
    default=DEFAULT_TRACK_URL,
    show_default=True,
    help="TrackWrestling profile URL",
)
@click.option(
    "--output",
    envvar="RESULTS_OUTPUT",
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Results JSON file (read, merged and rewritten)",
)
@click.option(
    "--user-agent",
    envvar="SCRAPER_USER_AGENT",
    default=DEFAULT_USER_AGENT,
    help="User-Agent header for page fetches",
)
@click.option(
    "--heuristics",
    envvar="SCRAPER_HEURISTICS",
    type=click.Path(dir_okay=False),
    help="YAML file overriding table keywords and list selectors per source",
)
@click.option("--dry-run", is_flag=True, help="Scrape and merge without writing")
@click.option(
    "--commit-message",
    type=click.Path(dir_okay=False),
    help="Write a summary of the run to this file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(
    flow_url,
    wrestling_url,
    track_url,
    output,
    user_agent,
    heuristics,
    dry_run,
    commit_message,
    verbose,
):
    """Scrape athlete results and update the results JSON file."""
    configure_logging(verbose)
    logger.info("scraper_started", output=output, dry_run=dry_run)

    try:
        settings = Settings(
            flow_url=flow_url,
            wrestling_url=wrestling_url,
            track_url=track_url,
            output_path=output,
            user_agent=user_agent,
            heuristics=load_heuristics(heuristics) if heuristics else {},
            dry_run=dry_run,
        )
        result = Pipeline(settings).run()
    except ScraperError as e:
        logger.error("pipeline_failed", **e.to_dict())
        sys.exit(1)

    if commit_message:
        Path(commit_message).write_text(result.message + "\n", encoding="utf-8")

    verb = "Would write" if result.dry_run else "Wrote"
    click.echo(f"{verb} {output} with {result.written} entries ({result.new} new)")


if __name__ == "__main__":
    main()
