import json
import os
import tempfile
from pathlib import Path

import structlog

from .exceptions import StorageError
from .models import ResultRecord

logger = structlog.get_logger(__name__)


class Storage:
    """Loads and saves the persisted results file (a JSON array of results).

    The file is read once at the start of a run and fully replaced at the end.
    A missing file is an empty collection; an unreadable one is fatal, so a
    corrupt file is never silently overwritten.
    """

    def __init__(self, path: str):
        """Initializes the Storage instance.

        Args:
            path: Path to the results file (e.g. 'data/tournaments.json').
        """
        self.path = Path(path)

    def load(self) -> list[ResultRecord]:
        """Loads all persisted results.

        Returns:
            The stored records in file order, or an empty list if the file
            does not exist.

        Raises:
            StorageError: If the file cannot be read or is not a JSON array
                of objects.
        """
        if not self.path.exists():
            logger.info("results_file_missing", path=str(self.path))
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(
                f"Could not load results from {self.path}: {e}",
                path=str(self.path),
                operation="load",
            ) from e

        if not isinstance(data, list):
            raise StorageError(
                f"Expected a JSON array in {self.path}, got {type(data).__name__}",
                path=str(self.path),
                operation="load",
            )

        records = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise StorageError(
                    f"Entry {index} in {self.path} is not an object",
                    path=str(self.path),
                    operation="load",
                    error_data={"index": index},
                )
            records.append(ResultRecord.from_dict(item))

        logger.info("results_loaded", path=str(self.path), count=len(records))
        return records

    def save(self, records: list[ResultRecord]) -> None:
        """Replaces the results file with the given records.

        The data is written to a temporary file next to the target and moved
        into place, so the previous file survives any failure.

        Args:
            records: The complete, merged collection.

        Raises:
            StorageError: If the file cannot be written.
        """
        payload = [r.to_dict() for r in records]
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(
                f"Could not write results to {self.path}: {e}",
                path=str(self.path),
                operation="save",
            ) from e

        logger.info("results_saved", path=str(self.path), count=len(records))
