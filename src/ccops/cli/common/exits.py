"""Exit handling utilities for the CLI.

Failures from the core map onto distinct exit codes so scripts wrapping the
CLI can tell a retryable API failure from an RBAC problem or a bad argument.
"""

from typing import NoReturn

import typer

from ccops.cli.common.output import out
from ccops.core.errors import AccessDeniedError, ConflictError, TransportError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_ACCESS_DENIED = 3
EXIT_CONFLICT = 4
EXIT_TRANSPORT = 5

# most specific first: AccessDeniedError is a TransportError
_EXIT_CODES: tuple[tuple[type[Exception], int], ...] = (
    (AccessDeniedError, EXIT_ACCESS_DENIED),
    (ConflictError, EXIT_CONFLICT),
    (TransportError, EXIT_TRANSPORT),
    (ValueError, EXIT_USAGE),
)


def exit_code_for(exc: Exception) -> int:
    """Return the exit code the CLI uses for `exc`."""
    for exc_type, code in _EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return EXIT_FAILURE


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(EXIT_OK)


def die(msg: str, code: int = EXIT_FAILURE) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = EXIT_OK) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int | None = None) -> NoReturn:
    """
    Print an error message and exit, chaining `exc`.

    Without an explicit `code` the exit code is derived from the exception
    type via `exit_code_for`.
    """
    out.error(message)
    if isinstance(exc, AccessDeniedError):
        out.hint("Check the RBAC permissions of the current kubeconfig user.")
    raise typer.Exit(exit_code_for(exc) if code is None else code) from exc
