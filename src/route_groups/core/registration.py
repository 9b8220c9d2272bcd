# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Classification of ``Group.register`` arguments.

``register`` accepts a mixed argument list. ``classify`` turns it into a list
of ``Registration`` values whose ``kind`` is one of:

- ``"unit"``: a ``HandlerUnit``, registered as-is
- ``"group"``: a ``Group``, composed and flattened into the parent
- ``"pair"``: a path string immediately followed by a handler
- ``"unknown"``: anything else, rejected by the registering group

Path strings that are not followed by a handler are reported here as
``MalformedRegistration``, as is a group registered into itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from genro_toolbox.typeutils import safe_is_instance

from route_groups.exceptions import MalformedRegistration

from .reporting import FatalReporter, report
from .unit import HandlerUnit

__all__ = ["Registration", "RegistrationKind", "classify"]

RegistrationKind = Literal["unit", "group", "pair", "unknown"]

_GROUP_CLASS = "route_groups.core.group.Group"


@dataclass(frozen=True)
class Registration:
    """One classified ``register`` argument.

    ``value`` is the unit, the group, the ``(path, handler)`` tuple, or the
    unrecognized object, depending on ``kind``.
    """

    kind: RegistrationKind
    value: Any


def _is_registrable(item: Any) -> bool:
    return isinstance(item, (str, HandlerUnit)) or safe_is_instance(item, _GROUP_CLASS)


def classify(
    items: Sequence[Any],
    *,
    owner: Any = None,
    reporter: FatalReporter | None = None,
) -> list[Registration]:
    """Split ``items`` into registrations, validating path/handler pairs."""
    result: list[Registration] = []
    index = 0
    while index < len(items):
        item = items[index]
        if isinstance(item, HandlerUnit):
            result.append(Registration("unit", item))
        elif safe_is_instance(item, _GROUP_CLASS):
            if owner is not None and item is owner:
                report(
                    reporter,
                    MalformedRegistration("a group cannot be registered into itself", value=item),
                )
            result.append(Registration("group", item))
        elif isinstance(item, str):
            following = index + 1
            if following >= len(items) or _is_registrable(items[following]):
                report(
                    reporter,
                    MalformedRegistration(
                        f"path {item!r} has no handler, should be (<path>, <handler>) pairs",
                        value=item,
                    ),
                )
            result.append(Registration("pair", (item, items[following])))
            index += 2
            continue
        else:
            result.append(Registration("unknown", item))
        index += 1
    return result
