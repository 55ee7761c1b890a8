import datetime

from ..merge import identity_key
from ..models import ResultRecord


def calculate_stats(
    old_results: list[ResultRecord],
    new_results: list[ResultRecord],
    extracted: dict[str, int] | None = None,
) -> str:
    """Summarizes a run as a commit message for the updated data file.

    Args:
        old_results: Records loaded at the start of the run.
        new_results: Records written at the end of the run.
        extracted: Optional raw record count per source for this run.

    Returns:
        A formatted commit message string summarizing the changes.
    """
    old_keys = {identity_key(r) for r in old_results}
    new_keys = {identity_key(r) for r in new_results}
    added = len(new_keys - old_keys)

    today = datetime.date.today().isoformat()
    msg = f"Update tournament results: {today}\n"
    msg += f"New: {added}, Total: {len(new_results)}"

    if extracted:
        counts = ", ".join(f"{name}={count}" for name, count in extracted.items())
        msg += f"\nExtracted: {counts}"

    return msg
