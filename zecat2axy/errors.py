from __future__ import annotations


class Cat2AxyError(Exception):
    pass


class LoadError(Cat2AxyError):
    """The source catalog could not be opened or read."""


class WriteError(Cat2AxyError):
    """The axy table could not be written; no usable output exists."""


class InsufficientReferenceStars(Cat2AxyError):
    def __init__(self, found: int, required: int) -> None:
        super().__init__(f"not found enough reference stars ({found} < {required})")
        self.found = found
        self.required = required
