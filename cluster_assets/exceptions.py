"""Exceptions related to cluster-assets."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .asset.asset import AssetKey

__all__ = [
    "AssetException",
    "InputException",
    "ConfigurationError",
    "CycleError",
    "CollisionError",
    "EncodingError",
    "GenerationError",
    "DependencyFailedError",
]


class AssetException(Exception):
    """Generic base exception used for this library.

    The resolver attaches the identity of the failing asset and the resolution
    path (from the requested target down to the failing asset) as the error
    propagates, so callers can report which component failed.
    """

    def __init__(self, message: str, asset: "AssetKey | None" = None) -> None:
        super().__init__(message)
        self.message = message
        self.asset = asset
        self.path: list["AssetKey"] = []

    def __str__(self) -> str:
        """Return the message prefixed with the failing asset, if known."""
        if self.asset is None:
            return self.message
        return f"{self.asset}: {self.message}"


class InputException(AssetException):
    """Raised when the input files or values are not formatted as expected."""


class ConfigurationError(InputException):
    """Raised when an asset cannot consume a value produced by a dependency."""


class CycleError(ConfigurationError):
    """Raised when the asset dependency graph contains a cycle."""

    def __init__(self, cycle: Sequence["AssetKey"]) -> None:
        self.cycle = list(cycle)
        chain = " -> ".join(str(key) for key in self.cycle)
        super().__init__(f"Dependency cycle detected: {chain}", self.cycle[0])


class CollisionError(AssetException):
    """Raised when more than one asset produces the same output file name."""

    def __init__(self, file_name: str, assets: Sequence["AssetKey"]) -> None:
        self.file_name = file_name
        self.assets = list(assets)
        producers = ", ".join(str(key) for key in self.assets)
        super().__init__(
            f"Output file '{file_name}' produced more than once by: {producers}"
        )


class EncodingError(AssetException):
    """Raised when serializing an object into a content payload fails."""


class GenerationError(AssetException):
    """Raised when an asset fails to generate for an unexpected reason."""


class DependencyFailedError(AssetException):
    """Raised when waiting on an asset that failed to generate."""

    def __init__(self, dependency: "AssetKey", error: str | None) -> None:
        self.dependency = dependency
        self.error = error
        super().__init__(
            f"Generation failed: {error or 'Unknown error'}",
            dependency,
        )
