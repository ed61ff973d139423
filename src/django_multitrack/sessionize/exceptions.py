"""Exception hierarchy for the Sessionize schedule import."""

from __future__ import annotations


class SessionizeAPIError(RuntimeError):
    """The Sessionize API could not be reached or returned unusable data."""


class ScheduleImportError(RuntimeError):
    """A schedule import stopped before completing.

    ``stage`` names the step that failed (``"fetch"``, ``"delete rooms"``,
    ``"create session"``, ...).  The underlying exception is chained as
    ``__cause__``.  Writes made before the failing stage stay committed unless
    the import ran in atomic mode.
    """

    def __init__(self, message: str, *, stage: str) -> None:
        super().__init__(message)
        self.stage = stage


class ImportInProgressError(ScheduleImportError):
    """Another import currently holds the lock for the same event."""

    def __init__(self, message: str) -> None:
        super().__init__(message, stage="lock")


class ImportTimeoutError(ScheduleImportError):
    """The import deadline passed before the pipeline finished."""

    def __init__(self, message: str) -> None:
        super().__init__(message, stage="timeout")
