# ==============================================================================
# errors.py  –  Error taxonomy for the PGN import pipeline
#
# Two categories callers map onto responses:
#   • ClientInputError      → the request/PGN is at fault (HTTP 400)
#   • TransientServerError  → try again later (HTTP 500)
# PgnParseError belongs to neither: ply counting is best-effort.
# ==============================================================================

from __future__ import annotations

from typing import Optional


class PgnImportError(Exception):
    """
    Base class for every error raised by the import pipeline.

    Parameters
    ----------
    public_message : str
        Safe to show to the end user.
    private_message : str
        Extra detail for the logs only.
    """

    status_code: int = 500

    def __init__(self, public_message: str, private_message: str = "") -> None:
        super().__init__(public_message)
        self.public_message = public_message
        self.private_message = private_message

    def __str__(self) -> str:
        if self.private_message:
            return f"{self.public_message} ({self.private_message})"
        return self.public_message


class ClientInputError(PgnImportError):
    status_code = 400


class TransientServerError(PgnImportError):
    status_code = 500


# ------------------------------------------------------------------------------
# Client errors
# ------------------------------------------------------------------------------


class MissingRequiredTag(ClientInputError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Invalid request: PGN missing `{tag}` tag")
        self.tag = tag


class InvalidDateFormat(ClientInputError):
    def __init__(self, value: str) -> None:
        super().__init__(
            "Invalid request: PGN `Date` tag must be in YYYY.MM.DD format",
            f"got `{value}`",
        )
        self.value = value


class MalformedHeader(ClientInputError):
    def __init__(self, line: str) -> None:
        super().__init__(f"Invalid request: PGN header `{line}` has wrong format")
        self.line = line


class MalformedPgn(ClientInputError):
    """The header block is not followed by a blank line and movetext."""


class InvalidStudyUrl(ClientInputError):
    def __init__(self, url: str, kind: str) -> None:
        super().__init__(
            f"Invalid request: url `{url}` does not match the Lichess {kind} format"
        )
        self.url = url
        self.kind = kind


class StudyNotFound(ClientInputError):
    def __init__(self, url: str, status: int) -> None:
        super().__init__(
            f"Invalid request: lichess returned status `{status}`. "
            "The study must be unlisted or public.",
            url,
        )
        self.url = url
        self.status = status


class StudyEncodingError(ClientInputError):
    def __init__(self, url: str, cause: UnicodeDecodeError) -> None:
        super().__init__(
            "Invalid request: the study PGN is not valid UTF-8.",
            f"{url}: {cause}",
        )
        self.url = url


class InvalidImportRequest(ClientInputError):
    pass


# ------------------------------------------------------------------------------
# Server errors
# ------------------------------------------------------------------------------


class StudyFetchError(TransientServerError):
    def __init__(self, url: str, cause: Optional[BaseException] = None) -> None:
        super().__init__("Temporary server error", f"failed to fetch {url}: {cause}")
        self.url = url


# ------------------------------------------------------------------------------
# Best-effort errors
# ------------------------------------------------------------------------------


class PgnParseError(PgnImportError):
    """Movetext could not be read; callers log and carry on."""
