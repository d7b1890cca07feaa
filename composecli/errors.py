"""Errors raised by compose backends and commands."""

from __future__ import annotations

EXIT_CODE_LOGIN_REQUIRED = 5


class ComposeError(Exception):
    """Base class of the errors a compose backend reports.

    An optional detail is put in front of the error's own message,
    as in ``object "name": not found``.
    """

    message = "compose error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{detail}: {self.message}" if detail else self.message)


class NotFoundError(ComposeError):
    """An object was not found."""

    message = "not found"


class AlreadyExistsError(ComposeError):
    """An object already exists."""

    message = "already exists"


class ForbiddenError(ComposeError):
    """An operation is not permitted."""

    message = "forbidden"


class UnknownError(ComposeError):
    """The error type is unmapped."""

    message = "unknown"


class LoginFailedError(ComposeError):
    """Login failed."""

    message = "login failed"


class LoginRequiredError(ComposeError):
    """Login is required for an action."""

    message = "login required"


class NotImplementedByBackendError(ComposeError, NotImplementedError):
    """A backend does not implement an action."""

    message = "not implemented"


class UnsupportedFlagError(ComposeError):
    """A backend does not support a flag."""

    message = "unsupported flag"


class CanceledError(ComposeError):
    """The command was canceled by the user."""

    message = "canceled"


class ParsingFailedError(ComposeError):
    """A string could not be parsed."""

    message = "parsing failed"


class WrongContextTypeError(ComposeError):
    """A context of the wrong type was requested."""

    message = "wrong context type"


class StatusError(Exception):
    """A failure that carries the exit code the command ends with."""

    def __init__(self, status_code: int, status: str = "") -> None:
        self.status_code = status_code
        self.status = status
        super().__init__(status)

    def __str__(self) -> str:
        return self.status


def _caused_by(err: BaseException | None, kind: type[BaseException]) -> bool:
    """True if ``err`` or any error in its cause chain is a ``kind``."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, kind):
            return True
        seen.add(id(err))
        err = err.__cause__
    return False


def is_not_found_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, a NotFoundError."""
    return _caused_by(err, NotFoundError)


def is_already_exists_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, an AlreadyExistsError."""
    return _caused_by(err, AlreadyExistsError)


def is_forbidden_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, a ForbiddenError."""
    return _caused_by(err, ForbiddenError)


def is_unknown_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, an UnknownError."""
    return _caused_by(err, UnknownError)


def is_unsupported_flag_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, an UnsupportedFlagError."""
    return _caused_by(err, UnsupportedFlagError)


def is_not_implemented_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, a NotImplementedByBackendError."""
    return _caused_by(err, NotImplementedByBackendError)


def is_parsing_failed_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, a ParsingFailedError."""
    return _caused_by(err, ParsingFailedError)


def is_canceled_error(err: BaseException | None) -> bool:
    """True if the error is, or was caused by, a CanceledError."""
    return _caused_by(err, CanceledError)