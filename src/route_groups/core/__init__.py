"""Core runtime aggregator for Route Groups.

Exposes the building blocks from a single module:

Public API:
    - ``HandlerUnit`` / ``define``: immutable path/handler registrations
    - ``chain`` / ``apply_middleware``: first in first applied wrapping
    - ``Group`` / ``new_group``: nestable builder and composer
    - ``DispatchTable`` / ``install`` / ``ServeMux``: installation on a server
    - reporters deciding what a build failure does

Importing this module performs only imports; it does not create groups.
"""

from .dispatch import DispatchTable, ServeMux, ServerCollaborator, install
from .group import Group, new_group
from .registration import Registration, classify
from .reporting import (
    CapturingReporter,
    ExitingReporter,
    FatalReporter,
    RaisingReporter,
    default_reporter,
)
from .unit import HandlerUnit, Middleware, apply_middleware, chain, define

__all__ = [
    "CapturingReporter",
    "DispatchTable",
    "ExitingReporter",
    "FatalReporter",
    "Group",
    "HandlerUnit",
    "Middleware",
    "RaisingReporter",
    "Registration",
    "ServeMux",
    "ServerCollaborator",
    "apply_middleware",
    "chain",
    "classify",
    "default_reporter",
    "define",
    "install",
    "new_group",
]
