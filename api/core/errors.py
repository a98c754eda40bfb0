"""
Error types shared by the store, the service and the HTTP layer.

`InvalidArgument` and `NotFound` are domain errors and pass through unchanged.
Anything else coming out of persistence is reported as `StorageFault`, whose
message is generic on purpose: the underlying cause is logged, not returned.
"""

from __future__ import annotations


class BlogError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(BlogError):
    pass


class NotFound(BlogError):
    pass


class StorageFault(BlogError):
    pass
