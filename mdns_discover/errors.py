"""Discovery error taxonomy and process exit codes."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    ERROR = 1
    USAGE = 2
    RESOLVER_INIT = 3
    BROWSE_FAILED = 4
    TIMEOUT_ZERO = 5


class DiscoveryError(Exception):
    """Base error for discovery failures."""

    exit_code = ExitCode.ERROR


class ResolverInitError(DiscoveryError):
    """Raised when a resolver cannot be constructed."""

    exit_code = ExitCode.RESOLVER_INIT

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"resolver init failed: {detail}" if detail else "resolver init failed")


class BrowseError(DiscoveryError):
    """Raised when a browse request cannot be issued."""

    exit_code = ExitCode.BROWSE_FAILED

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"browse failed: {detail}" if detail else "browse failed")


class TimedOutZeroError(DiscoveryError):
    """A query reached its deadline without a single result.

    Expected on most networks for most service types, so the orchestrator
    counts it as a suppressed timeout rather than an error.
    """

    exit_code = ExitCode.TIMEOUT_ZERO

    def __init__(self) -> None:
        super().__init__("timeout no results")


class NoServicesConfiguredError(DiscoveryError):
    """Raised when a run is started with an empty catalog."""

    exit_code = ExitCode.USAGE

    def __init__(self) -> None:
        super().__init__("no built-in services configured")


# Checked in order; the first matching class decides the exit code.
EXIT_CODE_PRECEDENCE: tuple[type[DiscoveryError], ...] = (
    ResolverInitError,
    BrowseError,
    TimedOutZeroError,
    NoServicesConfiguredError,
)


def exit_code_for(exc: BaseException) -> ExitCode:
    """Map an exception onto the process exit code."""
    for cls in EXIT_CODE_PRECEDENCE:
        if isinstance(exc, cls):
            return cls.exit_code
    return ExitCode.ERROR
