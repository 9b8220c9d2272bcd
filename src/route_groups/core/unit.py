# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Handler units and middleware primitives.

Objects
-------
``HandlerUnit``
    Frozen dataclass pairing a path with a handler; a missing handler is
    rejected with ``InvalidHandler``. Fields:
        - ``path``: path bound on the server
        - ``handler``: callable invoked for the path (wrapped once composed)
        - ``func``: the undecorated handler as registered
        - ``metadata``: read-only annotations collected from ``meta_*`` options
        - ``layers``: names of the middleware around ``func``, outermost first

``define(path, handler, **options)``
    Validated constructor. ``handler`` must be callable, ``path`` a non-empty
    string. ``meta_*`` options are stored in ``metadata`` without the prefix.

``chain(*middleware)``
    Collapse a middleware list into one middleware. The first middleware
    given is the outermost wrapper: ``chain(m0, m1)(h) == m0(m1(h))``.

``apply_middleware(handler, middleware)``
    The right-to-left fold behind ``chain`` and group composition. Each step
    is checked: a middleware returning a non-callable is fatal.

Example::

    from route_groups import chain, define

    def hello(request):
        return "hello"

    unit = define("/hello", hello, meta_summary="Greets")
    wrapped = unit.wrap(timing, auth)  # timing(auth(hello))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from functools import reduce
from types import MappingProxyType
from typing import Any

from genro_toolbox import dictExtract

from route_groups.exceptions import (
    InvalidHandler,
    InvalidMiddleware,
    MalformedRegistration,
    MiddlewareProducedNil,
)

from .reporting import FatalReporter, report

__all__ = [
    "Handler",
    "Middleware",
    "HandlerUnit",
    "define",
    "chain",
    "apply_middleware",
    "middleware_layers",
    "validate_middleware",
]

Handler = Callable[..., Any]
Middleware = Callable[[Handler], Handler]


@dataclass(frozen=True)
class HandlerUnit:
    """An immutable ``(path, handler)`` registration."""

    path: str
    handler: Handler
    func: Handler | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)
    layers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path.strip():
            report(None, MalformedRegistration(f"invalid path {self.path!r}", value=self.path))
        if self.handler is None or not callable(self.handler):
            report(None, InvalidHandler(f"nil handler for path {self.path!r}", value=self.handler))
        if self.func is None:
            object.__setattr__(self, "func", self.handler)
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def name(self) -> str:
        """Name of the undecorated handler."""
        func = self.func
        return getattr(func, "__name__", None) or type(func).__name__

    def wrap(self, *middleware: Middleware, reporter: FatalReporter | None = None) -> HandlerUnit:
        """Return a copy of this unit with ``middleware`` wrapped around its handler."""
        validate_middleware(middleware, reporter=reporter)
        wrapped = apply_middleware(self.handler, middleware, reporter=reporter)
        return self.with_handler(wrapped, middleware)

    def with_handler(self, handler: Handler, middleware: Sequence[Middleware]) -> HandlerUnit:
        """Return a copy carrying ``handler``, wrapped by ``middleware``."""
        layers: list[str] = []
        for mw in middleware:
            layers.extend(middleware_layers(mw))
        return replace(self, handler=handler, layers=(*layers, *self.layers))


def define(
    path: str,
    handler: Handler,
    *,
    metadata: Mapping[str, Any] | None = None,
    reporter: FatalReporter | None = None,
    **options: Any,
) -> HandlerUnit:
    """Build a ``HandlerUnit`` after validating its inputs.

    Args:
        path: Path bound on the server (e.g. ``"/users"``).
        handler: Callable serving the path.
        metadata: Extra metadata stored on the unit.
        reporter: Reporter receiving validation failures.
        **options: ``meta_*`` keys merged into ``metadata`` (prefix removed).

    Returns:
        The new unit.

    Raises:
        InvalidHandler: ``handler`` is None or not callable.
        MalformedRegistration: ``path`` is not a non-empty string.
        TypeError: an option without the ``meta_`` prefix was given.
    """
    if not isinstance(path, str) or not path.strip():
        report(reporter, MalformedRegistration(f"invalid path {path!r}", value=path))
    if handler is None or not callable(handler):
        report(reporter, InvalidHandler(f"nil handler for path {path!r}", value=handler))
    unknown = sorted(key for key in options if not key.startswith("meta_"))
    if unknown:
        raise TypeError(f"Unsupported route option(s): {', '.join(unknown)}")
    entry_meta = dict(metadata or {})
    entry_meta.update(dictExtract(options, "meta_", slice_prefix=True, pop=False))
    return HandlerUnit(path=path, handler=handler, metadata=entry_meta)


def middleware_layers(middleware: Middleware) -> tuple[str, ...]:
    """Names describing ``middleware`` in a unit's ``layers``."""
    layers = getattr(middleware, "layers", None)
    if isinstance(layers, tuple):
        return layers
    name = getattr(middleware, "__name__", None) or type(middleware).__name__
    return (name,)


def validate_middleware(
    middleware: Iterable[Any], *, reporter: FatalReporter | None = None
) -> None:
    """Report ``InvalidMiddleware`` for the first non-callable item."""
    for index, mw in enumerate(middleware):
        if mw is None or not callable(mw):
            report(
                reporter,
                InvalidMiddleware(f"nil middleware at position {index}: {mw!r}", value=mw),
            )


def apply_middleware(
    handler: Handler,
    middleware: Sequence[Middleware],
    *,
    reporter: FatalReporter | None = None,
) -> Handler:
    """Wrap ``handler`` so that ``middleware[0]`` ends up outermost."""

    def step(wrapped: Handler, mw: Middleware) -> Handler:
        result = mw(wrapped)
        if result is None or not callable(result):
            report(reporter, MiddlewareProducedNil(mw, result))
        return result

    return reduce(step, reversed(middleware), handler)


def chain(*middleware: Middleware, reporter: FatalReporter | None = None) -> Middleware:
    """Combine ``middleware`` into a single middleware, first in first applied."""
    validate_middleware(middleware, reporter=reporter)
    if not middleware:
        report(reporter, InvalidMiddleware("chain() requires at least one middleware"))
    stack = tuple(middleware)

    def chained(next_handler: Handler) -> Handler:
        return apply_middleware(next_handler, stack, reporter=reporter)

    layers: list[str] = []
    for mw in stack:
        layers.extend(middleware_layers(mw))
    chained.layers = tuple(layers)  # type: ignore[attr-defined]
    return chained
