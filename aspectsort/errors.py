"""
Exception hierarchy for aspectsort.
"""


class AspectSortError(Exception):
    """Base exception for all aspectsort errors."""


class ValidationError(AspectSortError):
    """Source or destination paths are unusable; no run is started."""


class DecodeError(AspectSortError):
    """An image file could not be opened or its header could not be read."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Cannot decode {path}: {message}")


class TransferError(AspectSortError):
    """Copying a qualifying image to its destination failed."""

    def __init__(self, source, dest, message: str):
        self.source = source
        self.dest = dest
        super().__init__(f"Failed to copy {source} -> {dest}: {message}")
