from dataclasses import dataclass, field
from typing import Any, TypedDict

# Fields written for every record, in output order.
RECORD_FIELDS = ("date", "title", "result", "source", "link")


class ResultRecordDict(TypedDict):
    """Dictionary representation of a result as stored in tournaments.json."""

    date: str
    title: str
    result: str
    source: str
    link: str


@dataclass
class ResultRecord:
    """A single competition result observed on a source profile page.

    Date format: ISO 8601 (YYYY-MM-DD) once normalized, empty if unknown.
    The link is the profile page the result was scraped from, so it is the
    same for every record of a source.
    """

    date: str = ""
    title: str = ""
    result: str = ""
    source: str = ""  # "flow", "wrestlingtournaments" or "track"
    link: str = ""

    # Unknown keys from the persisted file, written back untouched
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResultRecord":
        """Builds a record from a JSON object, tolerating missing or null fields."""
        values = {name: _as_text(data.get(name)) for name in RECORD_FIELDS}
        extra = {k: v for k, v in data.items() if k not in RECORD_FIELDS}
        return cls(**values, extra=extra)

    def to_dict(self) -> ResultRecordDict:
        out: dict[str, Any] = {
            "date": self.date,
            "title": self.title,
            "result": self.result,
            "source": self.source,
            "link": self.link,
        }
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out  # type: ignore[return-value]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
