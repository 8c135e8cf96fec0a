"""
Error taxonomy for the Vault lookup backend.

Configuration and caller errors are raised; environmental failures
(connection loss, per-path read/write errors) are logged and degrade to a miss.

Exit Codes:
- 0: Success
- 1: Key not found
- 10: Configuration error
- 11: Secret store error
- 12: Lookup error (bad override flag, type mismatch)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Exit codes for the command-line entry point."""

    SUCCESS = 0
    NOT_FOUND = 1
    CONFIG_ERROR = 10
    STORE_ERROR = 11
    LOOKUP_ERROR = 12
    UNKNOWN_ERROR = 127


class HieraVaultError(Exception):
    """Base exception for backend errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigInvalidError(HieraVaultError):
    """Raised when backend configuration holds an invalid value."""

    exit_code = ExitCode.CONFIG_ERROR


class StoreUnavailableError(HieraVaultError):
    """Raised when a store read is mandatory but no connection is available."""

    exit_code = ExitCode.STORE_ERROR


class RemoteReadError(HieraVaultError):
    """Raised by the store adapter when the server rejects a read."""

    exit_code = ExitCode.STORE_ERROR


class RemoteWriteError(HieraVaultError):
    """Raised by the store adapter when the server rejects a write."""

    exit_code = ExitCode.STORE_ERROR


class InvalidOverrideFlagError(HieraVaultError):
    """Raised for an unrecognized 'flag' value in an override directive."""

    exit_code = ExitCode.LOOKUP_ERROR


class TypeMismatchError(HieraVaultError):
    """Raised when a secret's shape disagrees with the requested resolution type."""

    exit_code = ExitCode.LOOKUP_ERROR


class KeyNotFoundError(HieraVaultError):
    """Raised by the vault_only lookup helpers when nothing was found."""

    exit_code = ExitCode.NOT_FOUND


F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(func: F) -> F:
    """Convert exceptions raised by a CLI command into its exit code.

    Backend errors use their ``exit_code``, Ctrl-C exits 130 and anything
    else exits 127.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> int:
        try:
            return func(*args, **kwargs)
        except HieraVaultError as e:
            logger.error(
                "command_error",
                error_type=type(e).__name__,
                message=e.message,
                exit_code=e.exit_code,
                **e.details,
            )
            return e.exit_code
        except KeyboardInterrupt:
            logger.info("command_interrupted")
            return 130
        except Exception as e:
            logger.error(
                "unexpected_error",
                error_type=type(e).__name__,
                message=str(e),
                exit_code=ExitCode.UNKNOWN_ERROR,
            )
            return ExitCode.UNKNOWN_ERROR

    return wrapper  # type: ignore[return-value]
