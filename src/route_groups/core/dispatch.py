# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Dispatch tables and their installation on a server.

``DispatchTable``
    Immutable, ordered sequence of composed ``HandlerUnit`` values, as
    returned by ``Group.compose()``.

``install(table, server=None)``
    Bind every ``(path, handler)`` of ``table`` on ``server``. The server only
    needs a ``bind(path, handler)`` method; what it does with duplicate paths
    is its own policy. Without a server a new ``ServeMux`` is used.

``ServeMux``
    Minimal in-memory server: exact path lookup, no pattern matching.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Protocol, overload, runtime_checkable

from route_groups.exceptions import NilHandlerInChain, NotFound

from .reporting import FatalReporter, report
from .unit import Handler, HandlerUnit

__all__ = ["DispatchTable", "ServerCollaborator", "ServeMux", "install"]

logger = logging.getLogger("route_groups")


@runtime_checkable
class ServerCollaborator(Protocol):
    """Anything able to bind a path to a handler."""

    def bind(self, path: str, handler: Handler) -> None: ...


class DispatchTable(Sequence[HandlerUnit]):
    """Flat, ordered list of wrapped handler units."""

    __slots__ = ("_units", "name")

    def __init__(self, units: Iterable[HandlerUnit] = (), *, name: str | None = None) -> None:
        self._units: tuple[HandlerUnit, ...] = tuple(units)
        self.name = name

    @overload
    def __getitem__(self, index: int) -> HandlerUnit: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[HandlerUnit, ...]: ...

    def __getitem__(self, index: int | slice) -> HandlerUnit | tuple[HandlerUnit, ...]:
        return self._units[index]

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[HandlerUnit]:
        return iter(self._units)

    def paths(self) -> list[str]:
        return [unit.path for unit in self._units]

    def routes(self) -> list[tuple[str, Handler]]:
        """Return ``(path, handler)`` pairs in registration order."""
        return [(unit.path, unit.handler) for unit in self._units]

    def get(self, path: str) -> HandlerUnit | None:
        """Return the last unit registered on ``path``, if any."""
        for unit in reversed(self._units):
            if unit.path == path:
                return unit
        return None

    def __repr__(self) -> str:
        return f"DispatchTable(name={self.name!r}, paths={self.paths()!r})"


class ServeMux:
    """In-memory path → handler map.

    Args:
        replace: Allow rebinding a path already bound. When False (default)
            a duplicate path raises ``ValueError``.
    """

    __slots__ = ("_handlers", "replace")

    def __init__(self, *, replace: bool = False) -> None:
        self._handlers: dict[str, Handler] = {}
        self.replace = replace

    def bind(self, path: str, handler: Handler) -> None:
        if path in self._handlers and not self.replace:
            raise ValueError(f"Handler path collision: {path}")
        self._handlers[path] = handler

    def handler_for(self, path: str) -> Handler | None:
        return self._handlers.get(path)

    def dispatch(self, request: Any, *args: Any, **kwargs: Any) -> Any:
        """Call the handler bound on the request path.

        ``request`` is either a path string or an object with a ``path``
        attribute; it is passed to the handler unchanged.

        Raises:
            NotFound: no handler is bound on the path.
        """
        path = request if isinstance(request, str) else getattr(request, "path", None)
        handler = self._handlers.get(path) if isinstance(path, str) else None
        if handler is None:
            raise NotFound(str(path))
        return handler(request, *args, **kwargs)

    def paths(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, path: object) -> bool:
        return path in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"ServeMux(paths={self.paths()!r})"


def install(
    table: Iterable[HandlerUnit],
    server: Any = None,
    *,
    reporter: FatalReporter | None = None,
) -> Any:
    """Bind every unit of ``table`` on ``server`` and return the server.

    All units are checked before the first bind, so a broken table is never
    partially installed.

    Args:
        table: Composed units, usually a ``DispatchTable``.
        server: Object exposing ``bind(path, handler)``. Defaults to a new
            ``ServeMux``.
        reporter: Reporter receiving validation failures.

    Raises:
        TypeError: ``server`` has no callable ``bind``.
        NilHandlerInChain: a unit has no callable handler.
    """
    if server is None:
        server = ServeMux()
    if not isinstance(server, ServerCollaborator) or not callable(getattr(server, "bind", None)):
        raise TypeError(f"Server must expose bind(path, handler), got {type(server).__name__}")
    units = list(table)
    for unit in units:
        if not callable(unit.handler):
            report(
                reporter,
                NilHandlerInChain(f"nil handler in chain for path {unit.path!r}", value=unit),
            )
    for unit in units:
        server.bind(unit.path, unit.handler)
    logger.debug("installed %d route(s) on %s", len(units), type(server).__name__)
    return server
