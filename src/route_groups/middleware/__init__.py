"""Built-in middleware for Route Groups.

Every middleware here is a factory returning a ``handler -> handler``
callable ready for ``Group.attach_middleware``.
"""

from .logging import logging_middleware

__all__ = ["logging_middleware"]
