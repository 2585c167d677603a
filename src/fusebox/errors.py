"""Fuse container errors.

All errors raised by single-fuse operations are local: the container is left
exactly as it was before the failing call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fusebox.types import FuseHandle


class FuseError(Exception):
    """Base class for fuse container errors."""


class InvalidArgumentError(FuseError, ValueError):
    """Missing payload, missing callback, or an unusable duration."""


class FuseNotFoundError(FuseError, LookupError):
    """Handle or position does not refer to a live fuse."""

    def __init__(self, message: str, handle: FuseHandle | None = None):
        super().__init__(message)
        self.handle = handle


class ReentrantCallError(FuseError, RuntimeError):
    """A callback tried to mutate the container it is firing from."""


class ContainerClosedError(FuseError, RuntimeError):
    """Operation attempted on a closed container."""
