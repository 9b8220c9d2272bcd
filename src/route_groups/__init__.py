"""Route Groups - Composable route groups with scoped middleware.

Public API surface for declaring endpoints and middleware in independent
groups, nesting groups as subgroups and flattening the result into a single
dispatch table installed on a server.

Public exports:
    - ``Group``: Builder collecting routes, subgroups and middleware
    - ``define``: Validated constructor for a ``HandlerUnit``
    - ``chain``: Collapse several middleware into one
    - ``install``: Bind a composed table on a server
    - ``ServeMux``: Minimal in-memory server
    - Reporters and exceptions for build failures

Middleware attached to a group wraps every route of that group, the first
attached being the outermost. Middleware attached to a subgroup never
reaches the parent or its siblings.

Example::

    from route_groups import Group, logging_middleware

    admin = Group("admin").attach_middleware(require_admin)
    admin.register("/admin/stats", stats)

    site = Group("site").attach_middleware(logging_middleware())
    site.register("/", index, admin)

    mux = site.compile()
    mux.dispatch(request)
"""

__version__ = "0.1.0"

from .core import (
    CapturingReporter,
    DispatchTable,
    ExitingReporter,
    FatalReporter,
    Group,
    HandlerUnit,
    Middleware,
    RaisingReporter,
    ServeMux,
    ServerCollaborator,
    apply_middleware,
    chain,
    define,
    install,
    new_group,
)
from .exceptions import (
    CompositionError,
    GroupAlreadyComposed,
    InvalidHandler,
    InvalidMiddleware,
    MalformedRegistration,
    MiddlewareProducedNil,
    NilHandlerInChain,
    NotFound,
    UnrecognizedRegistrationType,
)
from .middleware import logging_middleware

__all__ = [
    "CapturingReporter",
    "CompositionError",
    "DispatchTable",
    "ExitingReporter",
    "FatalReporter",
    "Group",
    "GroupAlreadyComposed",
    "HandlerUnit",
    "InvalidHandler",
    "InvalidMiddleware",
    "MalformedRegistration",
    "Middleware",
    "MiddlewareProducedNil",
    "NilHandlerInChain",
    "NotFound",
    "RaisingReporter",
    "ServeMux",
    "ServerCollaborator",
    "UnrecognizedRegistrationType",
    "apply_middleware",
    "chain",
    "define",
    "install",
    "logging_middleware",
    "new_group",
]
