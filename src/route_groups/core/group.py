# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Group builder and composer for Route Groups.

``Group`` collects handler units and middleware, accepts other groups as
subgroups and flattens everything into a ``DispatchTable``.

Internal state
--------------
- ``_units``: registered ``HandlerUnit`` values, in registration order.
  Subgroups contribute their composed (already wrapped) units.
- ``_middleware``: attached middleware, in attachment order.
- ``_table``: the ``DispatchTable`` produced by the first ``compose()``;
  ``None`` while the group is still open.
- ``_reporter``: ``FatalReporter`` receiving every build failure.

Registration
------------
``register(*items)`` accepts units, groups and ``(path, handler)`` argument
pairs. A subgroup is composed before its units are copied in, so its
middleware only ever wraps its own units. Arguments are validated and staged
first, subgroups last; an invalid argument leaves the group and its subgroups
untouched.

``attach_middleware(*middleware)`` (alias ``wrap``) appends middleware. The
whole group middleware list wraps every unit of the group at composition
time, regardless of the order in which units and middleware were added.

Composition
-----------
``compose()`` folds the middleware around each unit, first attached
outermost, and caches the result. Composing again returns the cached table;
a composed group rejects further registration with ``GroupAlreadyComposed``.

Example::

    from route_groups import Group

    admin = Group("admin").attach_middleware(require_admin)
    admin.register("/admin/users", list_users)

    site = Group("site").attach_middleware(access_log)
    site.register("/", index, admin)
    mux = site.compile()
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from route_groups.exceptions import (
    GroupAlreadyComposed,
    InvalidMiddleware,
    NilHandlerInChain,
    UnrecognizedRegistrationType,
)

from .dispatch import DispatchTable, install
from .registration import Registration, classify
from .reporting import FatalReporter, default_reporter, report
from .unit import (
    Handler,
    HandlerUnit,
    Middleware,
    apply_middleware,
    define,
    validate_middleware,
)

__all__ = ["Group", "new_group"]

logger = logging.getLogger("route_groups")


class Group:
    """Builder grouping routes under a shared middleware stack.

    Responsibilities:
        - Collect units, path/handler pairs and subgroups in order
        - Collect middleware in order
        - Compose once into a flat, fully wrapped dispatch table
        - Report malformed input through the injected reporter
    """

    __slots__ = ("name", "description", "_units", "_middleware", "_table", "_reporter")

    def __init__(
        self,
        name: str | None = None,
        *,
        description: str | None = None,
        reporter: FatalReporter | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self._units: list[HandlerUnit] = []
        self._middleware: list[Middleware] = []
        self._table: DispatchTable | None = None
        if reporter is not None and not isinstance(reporter, FatalReporter):
            raise TypeError(f"reporter must provide fatal(error), got {type(reporter).__name__}")
        self._reporter = reporter or default_reporter()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def reporter(self) -> FatalReporter:
        return self._reporter

    @property
    def units(self) -> tuple[HandlerUnit, ...]:
        """Units registered so far (wrapped ones once composed)."""
        if self._table is not None:
            return tuple(self._table)
        return tuple(self._units)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return tuple(self._middleware)

    @property
    def composed(self) -> bool:
        return self._table is not None

    def _ensure_open(self, operation: str) -> None:
        if self._table is not None:
            report(self._reporter, GroupAlreadyComposed(self.name, operation))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, *items: Any) -> Group:
        """Register units, subgroups or ``path, handler`` pairs.

        Args:
            *items: Any mix of ``HandlerUnit``, ``Group`` and ``str`` paths
                each followed by its handler.

        Returns:
            self (for method chaining).

        Raises:
            UnrecognizedRegistrationType: an item has an unsupported type.
            MalformedRegistration: a path is not followed by its handler.
            InvalidHandler: a pair carries a missing or non-callable handler.
            GroupAlreadyComposed: the group has been composed already.
        """
        self._ensure_open("register")
        registrations = classify(items, owner=self, reporter=self._reporter)
        pending = [self._resolve(item) for item in registrations]
        # subgroups are composed only once every item is known to be valid
        staged: list[HandlerUnit] = []
        for entry in pending:
            staged.extend(entry.compose() if isinstance(entry, Group) else entry)
        self._units.extend(staged)
        logger.debug(
            "group %r: registered %d unit(s), %d total", self.name, len(staged), len(self._units)
        )
        return self

    def _resolve(self, item: Registration) -> list[HandlerUnit] | Group:
        match item:
            case Registration(kind="unit", value=unit):
                return [unit]
            case Registration(kind="pair", value=(path, handler)):
                return [define(path, handler, reporter=self._reporter)]
            case Registration(kind="group", value=subgroup):
                return subgroup
            case _:
                report(self._reporter, UnrecognizedRegistrationType(item.value))

    def route(self, path: str, **options: Any) -> Callable[[Handler], Handler]:
        """Register the decorated function on ``path``.

        Args:
            path: Path bound on the server.
            **options: ``meta_*`` options stored as unit metadata.

        Returns:
            Decorator returning the function unchanged.

        Example::

            api = Group("api")

            @api.route("/status", meta_summary="Health check")
            def status(request):
                return "ok"
        """

        def decorator(func: Handler) -> Handler:
            self._ensure_open("route")
            self._units.append(define(path, func, reporter=self._reporter, **options))
            return func

        return decorator

    def attach_middleware(self, *middleware: Middleware) -> Group:
        """Append middleware, applied first in first out at composition.

        Returns:
            self (for method chaining).

        Raises:
            InvalidMiddleware: nothing was given, or an item is not callable.
            GroupAlreadyComposed: the group has been composed already.
        """
        self._ensure_open("attach_middleware")
        if not middleware:
            report(self._reporter, InvalidMiddleware("attach_middleware() called without middleware"))
        validate_middleware(middleware, reporter=self._reporter)
        self._middleware.extend(middleware)
        return self

    wrap = attach_middleware

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def compose(self) -> DispatchTable:
        """Wrap every unit with the group middleware and return the table.

        The first call does the work; later calls return the same table
        without wrapping again.

        Raises:
            NilHandlerInChain: a unit has no callable handler.
            MiddlewareProducedNil: a middleware returned a non-callable.
        """
        if self._table is not None:
            return self._table
        wrapped: list[HandlerUnit] = []
        for unit in self._units:
            handler = unit.handler
            if handler is None or not callable(handler):
                # a unit is never wrapped around a missing handler
                report(
                    self._reporter,
                    NilHandlerInChain(f"nil handler in chain for path {unit.path!r}", value=unit),
                )
            if not self._middleware:
                wrapped.append(unit)
                continue
            handler = apply_middleware(handler, self._middleware, reporter=self._reporter)
            wrapped.append(unit.with_handler(handler, self._middleware))
        self._table = DispatchTable(wrapped, name=self.name)
        logger.debug(
            "group %r: composed %d unit(s) with %d middleware",
            self.name,
            len(wrapped),
            len(self._middleware),
        )
        return self._table

    def compile(self, server: Any = None) -> Any:
        """Compose the group and install it on ``server`` (a new ``ServeMux`` by default)."""
        return install(self.compose(), server, reporter=self._reporter)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def describe(self) -> list[dict[str, Any]]:
        """Return one info dict per composed unit, in dispatch order."""
        return [
            {
                "path": unit.path,
                "name": unit.name,
                "doc": inspect.getdoc(unit.func) or "",
                "layers": list(unit.layers),
                "metadata": dict(unit.metadata),
            }
            for unit in self.compose()
        ]

    def __repr__(self) -> str:
        state = "composed" if self._table is not None else "open"
        return (
            f"Group(name={self.name!r}, units={len(self._units)}, "
            f"middleware={len(self._middleware)}, {state})"
        )


def new_group(name: str | None = None, **kwargs: Any) -> Group:
    """Create an empty ``Group``."""
    return Group(name, **kwargs)
