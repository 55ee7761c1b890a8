import asyncio
from dataclasses import dataclass, field

import structlog

from .config import Settings
from .merge import identity_key, merge_results
from .models import ResultRecord
from .scraper import Scraper
from .sources import BaseSource, build_sources
from .storage import Storage
from .utils.date_and_time import normalize_date
from .utils.diff import calculate_stats

logger = structlog.get_logger(__name__)


@dataclass
class PipelineResult:
    """Outcome of a successful run."""

    written: int
    new: int
    extracted: dict[str, int] = field(default_factory=dict)
    message: str = ""
    dry_run: bool = False


class Pipeline:
    """Fetches all profile pages, extracts results and updates the data file.

    Per-source problems (unreachable site, unexpected markup) reduce the
    output of that source only. Problems with the data file raise
    StorageError and leave the file as it was.
    """

    def __init__(
        self,
        settings: Settings,
        storage: Storage | None = None,
        scraper: Scraper | None = None,
        sources: list[BaseSource] | None = None,
    ):
        """Initializes the Pipeline.

        Args:
            settings: Resolved run configuration.
            storage: Optional Storage, defaults to settings.output_path.
            scraper: Optional Scraper, e.g. one with a fake transport.
            sources: Optional extractors, defaults to one per configured URL.
        """
        self.settings = settings
        self.storage = storage or Storage(settings.output_path)
        self.scraper = scraper or Scraper(user_agent=settings.user_agent)
        if sources is None:
            sources = build_sources(settings.source_urls, settings.heuristics)
        self.sources = sources

    def run(self) -> PipelineResult:
        """Runs the pipeline to completion.

        Returns:
            Counts of written, new and extracted records.

        Raises:
            StorageError: If the data file cannot be read or written.
        """
        existing = self.storage.load()

        pages = asyncio.run(self.fetch_pages())

        extracted: list[ResultRecord] = []
        counts: dict[str, int] = {}
        for source in self.sources:
            records = self._extract(source, pages.get(source.name, ""))
            counts[source.name] = len(records)
            extracted.extend(records)

        for record in extracted:
            if record.date:
                record.date = normalize_date(record.date)

        merged = merge_results(existing, extracted)
        existing_keys = {identity_key(r) for r in existing}
        new_count = sum(1 for r in merged if identity_key(r) not in existing_keys)

        if self.settings.dry_run:
            logger.info("dry_run_skip_write", count=len(merged))
        else:
            self.storage.save(merged)
            logger.info(
                "results_written",
                path=str(self.storage.path),
                count=len(merged),
                new=new_count,
            )

        return PipelineResult(
            written=len(merged),
            new=new_count,
            extracted=counts,
            message=calculate_stats(existing, merged, counts),
            dry_run=self.settings.dry_run,
        )

    async def fetch_pages(self) -> dict[str, str]:
        """Fetches every source page concurrently.

        Returns:
            Page markup per source name; failed fetches map to "".
        """
        async with self.scraper as scraper:
            pages = await asyncio.gather(
                *(scraper.get(source.link) for source in self.sources)
            )
        return {source.name: html for source, html in zip(self.sources, pages)}

    def _extract(self, source: BaseSource, html: str) -> list[ResultRecord]:
        try:
            records = source.extract(html)
        except Exception as e:
            logger.error("extraction_failed", source=source.name, error=str(e))
            return []

        logger.info("source_extracted", source=source.name, count=len(records))
        return records
