# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Fatal error reporters.

A reporter decides what happens when a group cannot be built. It exposes a
single ``fatal(error)`` operation that must not return. Reporters are passed
explicitly to ``Group`` and ``install``; there is no process-wide hook.

Reporters
---------
- ``RaisingReporter`` (default): logs at ERROR and raises the error.
- ``ExitingReporter``: logs at CRITICAL and terminates with ``SystemExit(1)``.
- ``CapturingReporter``: records every error, then raises it. Meant for tests.

Example::

    from route_groups import ExitingReporter, Group

    api = Group("api", reporter=ExitingReporter())
"""

from __future__ import annotations

import logging
from typing import NoReturn, Protocol, runtime_checkable

from route_groups.exceptions import CompositionError

__all__ = [
    "FatalReporter",
    "RaisingReporter",
    "ExitingReporter",
    "CapturingReporter",
    "default_reporter",
]


@runtime_checkable
class FatalReporter(Protocol):
    """Capability reporting a fatal construction error."""

    def fatal(self, error: CompositionError) -> NoReturn: ...


class RaisingReporter:
    """Log the failure and raise it to the caller."""

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("route_groups")

    def fatal(self, error: CompositionError) -> NoReturn:
        self._logger.error("%s: %s", type(error).__name__, error)
        raise error


class ExitingReporter:
    """Log the failure and stop the process with exit code 1."""

    __slots__ = ("_logger", "code")

    def __init__(self, logger: logging.Logger | None = None, *, code: int = 1) -> None:
        self._logger = logger or logging.getLogger("route_groups")
        self.code = code

    def fatal(self, error: CompositionError) -> NoReturn:
        self._logger.critical("%s: %s", type(error).__name__, error)
        raise SystemExit(self.code) from error


class CapturingReporter:
    """Record reported errors, then raise them.

    Attributes:
        errors: Errors reported so far, oldest first.
    """

    def __init__(self) -> None:
        self.errors: list[CompositionError] = []

    def fatal(self, error: CompositionError) -> NoReturn:
        self.errors.append(error)
        raise error

    @property
    def last(self) -> CompositionError | None:
        return self.errors[-1] if self.errors else None


_DEFAULT = RaisingReporter()


def default_reporter() -> FatalReporter:
    """Return the reporter used when none is given."""
    return _DEFAULT


def report(reporter: FatalReporter | None, error: CompositionError) -> NoReturn:
    """Send ``error`` to ``reporter`` and make sure control never comes back."""
    (reporter or _DEFAULT).fatal(error)
    # reporters must not return
    raise error
