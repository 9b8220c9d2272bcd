# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Route Groups.

Every error raised while building a group derives from ``CompositionError``.
They describe configuration-time integrity violations: a group that fails to
build must not be installed. ``NotFound`` is the only runtime error and is
raised by :class:`~route_groups.core.dispatch.ServeMux` when a request path
has no binding.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "CompositionError",
    "InvalidHandler",
    "InvalidMiddleware",
    "NilHandlerInChain",
    "MiddlewareProducedNil",
    "UnrecognizedRegistrationType",
    "MalformedRegistration",
    "GroupAlreadyComposed",
    "NotFound",
]


class CompositionError(Exception):
    """Base class for build-time failures of a group.

    Attributes:
        value: The offending value, when the failure is tied to one.
    """

    default_message = "route composition failed"

    def __init__(self, message: str | None = None, *, value: Any = None) -> None:
        self.value = value
        super().__init__(message or self.default_message)


class InvalidHandler(CompositionError):
    """Raised when a route is defined without a callable handler."""

    default_message = "nil handler"


class InvalidMiddleware(CompositionError):
    """Raised when a missing or non-callable middleware is attached."""

    default_message = "nil middleware"


class NilHandlerInChain(CompositionError):
    """Raised when composition meets a unit whose handler is not callable."""

    default_message = "nil handler found in chain"


class MiddlewareProducedNil(CompositionError):
    """Raised when a middleware returns no callable handler once applied.

    Attributes:
        middleware: The middleware that produced the bad value.
    """

    default_message = "middleware returned nil"

    def __init__(self, middleware: Any, produced: Any = None) -> None:
        self.middleware = middleware
        name = getattr(middleware, "__name__", type(middleware).__name__)
        super().__init__(f"middleware {name!r} returned {produced!r}", value=produced)


class UnrecognizedRegistrationType(CompositionError):
    """Raised when a registration item is neither a unit, a group nor a pair."""

    default_message = "switch default, unknown type"

    def __init__(self, value: Any) -> None:
        super().__init__(f"{type(value).__name__}: unknown type {value!r}", value=value)


class MalformedRegistration(CompositionError):
    """Raised when path/handler arguments do not form proper pairs."""

    default_message = "format error, should be (<path>, <handler>) pairs"


class GroupAlreadyComposed(CompositionError):
    """Raised when a group is modified after it has been composed.

    Attributes:
        group: Name of the composed group (may be None).
    """

    def __init__(self, group: str | None, operation: str) -> None:
        self.group = group
        label = f"group {group!r}" if group else "group"
        super().__init__(f"{label} is already composed, {operation}() not allowed")


class NotFound(Exception):
    """Raised when a dispatched path has no bound handler.

    Attributes:
        selector: The requested path.
    """

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Entry '{selector}' not found")
