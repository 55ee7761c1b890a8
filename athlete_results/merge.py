from collections.abc import Iterable

import structlog

from .models import ResultRecord
from .utils.date_and_time import sortable_date_value

logger = structlog.get_logger(__name__)

IdentityKey = tuple[str, str, str, str]


def identity_key(record: ResultRecord) -> IdentityKey:
    """Returns the (title, date, result, source) key used to detect duplicates.

    The link is left out: it identifies the profile page, not the result.
    """
    return (
        record.title.strip(),
        record.date.strip(),
        record.result.strip(),
        record.source.strip(),
    )


def merge_results(
    existing: Iterable[ResultRecord], incoming: Iterable[ResultRecord]
) -> list[ResultRecord]:
    """Merges freshly scraped results into the persisted collection.

    Persisted records win over scraped records with the same identity key, so
    manual corrections in the data file survive later runs.

    Args:
        existing: Records loaded from the data file.
        incoming: Records extracted during this run.

    Returns:
        The union of both inputs without duplicate keys, newest first.
        Records whose date cannot be parsed come last.
    """
    by_key: dict[IdentityKey, ResultRecord] = {}

    # A key repeated in the stored data keeps its first position and its
    # last value
    for record in existing:
        by_key[identity_key(record)] = record

    added = 0
    for record in incoming:
        key = identity_key(record)
        if key not in by_key:
            by_key[key] = record
            added += 1

    logger.debug("results_merged", total=len(by_key), added=added)

    # sorted() is stable, so equal dates keep insertion order
    return sorted(
        by_key.values(),
        key=lambda r: sortable_date_value(r.date),
        reverse=True,
    )
