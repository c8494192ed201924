"""Error hierarchy for schedule fetching and extraction."""


class ScheduleError(Exception):
    """Base exception for all schedule errors."""

    pass


class FetchError(ScheduleError):
    """The schedule page could not be fetched.

    ``status`` carries the upstream HTTP status when a response was received,
    and is None for transport failures (DNS, connection reset, timeout).
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ExtractionError(ScheduleError):
    """The parser was called without usable input."""

    pass
