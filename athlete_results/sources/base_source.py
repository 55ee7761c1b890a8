import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

import structlog
from bs4 import BeautifulSoup, Tag

from athlete_results.models import ResultRecord

logger = structlog.get_logger(__name__)

# Runs of two or more whitespace characters separate fields in list items.
FIELD_GAP_RE = re.compile(r"\s{2,}")

TITLE_SEPARATOR = " | "
TABLE_RESULT_SEPARATOR = " | "
LIST_RESULT_SEPARATOR = " - "


@dataclass(frozen=True)
class SourceHeuristics:
    """Markup hints used to locate results on a profile page.

    Attributes:
        keywords: Lower-case words; a table whose header text contains any of
            them is treated as a results table.
        containers: CSS selectors for elements wrapping a results list.
        items: CSS selectors for the individual results inside a container.
    """

    keywords: tuple[str, ...]
    containers: tuple[str, ...]
    items: tuple[str, ...]

    @property
    def list_selector(self) -> str:
        """Combined selector matching every item inside every container."""
        return ", ".join(
            f"{container} {item}"
            for container in self.containers
            for item in self.items
        )


class BaseSource(ABC):
    """Base class for profile page extractors.

    Subclasses set `name` and override `default_heuristics` with a class
    attribute. The two-pass extraction is shared:

    1. Tables whose header cells mention a keyword yield one record per body
       row.
    2. Items inside known result containers yield one record each, with
       fields split on wide whitespace gaps or pipes.
    """

    name: str = ""

    @property
    @abstractmethod
    def default_heuristics(self) -> SourceHeuristics:
        """Keyword and selector sets used when no override is configured."""

    def __init__(self, link: str, heuristics: SourceHeuristics | None = None):
        """Initializes the source.

        Args:
            link: The profile URL, stored on every extracted record.
            heuristics: Optional override of the default keyword and
                selector sets.
        """
        self.link = link
        self.heuristics = heuristics or self.default_heuristics

    def extract(self, html: str) -> list[ResultRecord]:
        """Extracts raw result records from a profile page.

        Dates are returned as found on the page. Pages without recognizable
        structure produce an empty list.

        Args:
            html: The page markup, possibly empty.

        Returns:
            Records from the table pass followed by records from the list pass.
        """
        if not html or not html.strip():
            return []

        soup = BeautifulSoup(html, "lxml")
        records = self._extract_tables(soup)
        records.extend(self._extract_lists(soup))

        logger.debug("records_extracted", source=self.name, count=len(records))
        return records

    def _is_results_table(self, table: Tag) -> bool:
        headers = " ".join(th.get_text().lower() for th in table.find_all("th"))
        return any(keyword in headers for keyword in self.heuristics.keywords)

    def _table_rows(self, table: Tag) -> list[Tag]:
        rows = table.select("tbody tr")
        if not rows:
            # lxml does not insert an implicit tbody
            rows = table.find_all("tr")
        return rows

    def _extract_tables(self, soup: BeautifulSoup) -> list[ResultRecord]:
        records = []
        for table in soup.find_all("table"):
            if not self._is_results_table(table):
                continue

            for row in self._table_rows(table):
                cells = [td.get_text().strip() for td in row.find_all("td")]
                if not cells:
                    # Header row
                    continue
                records.append(self._record_from_cells(cells))
        return records

    def _record_from_cells(self, cells: list[str]) -> ResultRecord:
        if len(cells) >= 3:
            return self._record(
                date=cells[0],
                title=cells[1],
                result=TABLE_RESULT_SEPARATOR.join(cells[2:]),
            )
        return self._record(title=TITLE_SEPARATOR.join(cells))

    def _extract_lists(self, soup: BeautifulSoup) -> list[ResultRecord]:
        selector = self.heuristics.list_selector
        if not selector:
            return []

        records = []
        for element in soup.select(selector):
            text = element.get_text().strip()
            if not text:
                continue
            records.append(self._record_from_text(text))
        return records

    def _record_from_text(self, text: str) -> ResultRecord:
        split_text = FIELD_GAP_RE.sub(TITLE_SEPARATOR, text)
        parts = [p.strip() for p in split_text.split("|") if p.strip()]

        if len(parts) >= 3:
            return self._record(
                date=parts[0],
                title=parts[1],
                result=LIST_RESULT_SEPARATOR.join(parts[2:]),
            )
        if len(parts) == 2:
            return self._record(title=parts[0], result=parts[1])
        return self._record(title=text)

    def _record(
        self, date: str = "", title: str = "", result: str = ""
    ) -> ResultRecord:
        return ResultRecord(
            date=date, title=title, result=result, source=self.name, link=self.link
        )
