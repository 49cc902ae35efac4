"""Error taxonomy for CopyHub.

Every failure a caller can observe is a subclass of :class:`CopyHubError`.
The HTTP layer maps each class to a status code in one place
(``copyhub.api.app``); the CLI maps them all to exit code 1.

- :class:`InvalidArgument`   -> 400 (malformed ``since`` timestamp)
- :class:`NotFound`          -> 404 (key lookup miss)
- :class:`RemoteFetchFailure` -> 502 (remote source unreachable or rejected us)

"No records after the given time" is *not* an error; see
:class:`copyhub.core.query.Empty`.
"""

from __future__ import annotations


class CopyHubError(Exception):
    """Base class for all domain errors raised by CopyHub."""


class InvalidArgument(CopyHubError, ValueError):
    """A request parameter could not be interpreted (e.g. a bad timestamp)."""


class NotFound(CopyHubError, LookupError):
    """No copy record matches the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__("Key not found")
        self.key = key


class RemoteFetchFailure(CopyHubError):
    """The remote source could not deliver a complete, well-formed snapshot.

    Parameters
    ----------
    message:
        Human-readable cause.
    status_code:
        HTTP status returned by the remote API, when there was one.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["CopyHubError", "InvalidArgument", "NotFound", "RemoteFetchFailure"]
