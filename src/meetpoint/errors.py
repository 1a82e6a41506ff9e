"""Error taxonomy for meeting point resolution."""

from __future__ import annotations


class MeetpointError(Exception):
    """Base class for resolution failures surfaced to callers."""


class RequesterFailure(MeetpointError):
    """An external collaborator was unreachable or answered with an invalid payload."""

    def __init__(self, requester: str, message: str) -> None:
        super().__init__(f"{requester}: {message}")
        self.requester = requester
        self.message = message


class NoCandidateFound(MeetpointError):
    """No candidate station remained to grade."""


class CacheUnavailable(MeetpointError):
    """The path cache backend could not be read or written."""


class UnknownCategory(MeetpointError, ValueError):
    """A utility search named a category with no Kakao group code."""
