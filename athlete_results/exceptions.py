"""Exception hierarchy for the athlete results scraper.

Errors carry structured context and a correction hint so that a failed
scheduled run can be diagnosed from its log output alone.
"""

from typing import Any


class ScraperError(Exception):
    """Base class for errors raised while updating the results file.

    The CLI catches this type, logs `to_dict()` as the `pipeline_failed`
    event and exits with status 1.

    Attributes:
        message: What went wrong, e.g. which file or URL was involved.
        error_data: Key/value context copied into the log event.
        suggestion: What the operator of the scheduled job should check.
    """

    def __init__(
        self,
        message: str,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_data = error_data or {}
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Returns the fields logged for a failed run."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_data": self.error_data,
            "suggestion": self.suggestion,
        }


class NetworkError(ScraperError):
    """A profile page could not be fetched.

    Examples:
        - Connection refused or DNS failure
        - HTTP 404/500 responses
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize network error.

        Args:
            message: Human-readable error message.
            url: The URL that failed.
            status_code: HTTP status code if a response was received.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"url": url, "status_code": status_code})

        default_suggestion = suggestion or (
            "The source is skipped for this run. Check that the profile URL "
            "is still valid if the failure repeats."
        )

        super().__init__(message, data, default_suggestion)
        self.url = url
        self.status_code = status_code


class StorageError(ScraperError):
    """The persisted results file could not be read, parsed or written.

    Examples:
        - tournaments.json contains invalid JSON
        - tournaments.json is not a JSON array of objects
        - The output directory is not writable
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize storage error.

        Args:
            message: Human-readable error message.
            path: Path of the state file.
            operation: "load" or "save".
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"path": path, "operation": operation})

        if suggestion is None:
            if operation == "load":
                suggestion = (
                    f"Fix or restore '{path}' from version control. The file "
                    "was left untouched."
                )
            else:
                suggestion = f"Check that '{path}' and its directory are writable."

        super().__init__(message, data, suggestion)
        self.path = path
        self.operation = operation


class ConfigurationError(ScraperError):
    """Invalid configuration or CLI arguments.

    Examples:
        - Heuristics file does not exist
        - Heuristics file names an unknown source
        - Keyword or selector lists are not lists of strings
        - A container or item selector is not valid CSS
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        expected_format: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Human-readable error message.
            parameter: Parameter or config key that's invalid.
            expected_format: Expected format for the parameter.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"parameter": parameter, "expected_format": expected_format})

        default_suggestion = suggestion or (
            f"'{parameter}' must be {expected_format}."
            if parameter and expected_format
            else "Check the command-line arguments and heuristics file."
        )

        super().__init__(message, data, default_suggestion)
        self.parameter = parameter
        self.expected_format = expected_format
