"""Store module for holding generated results during a run."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any

from cluster_assets.asset import AssetKey, ResultSet


class Status(StrEnum):
    """Generation status of an asset."""

    PENDING = "Pending"
    READY = "Ready"
    FAILED = "Failed"


@dataclass
class StatusInfo:
    """Generation status and optional error message for an asset."""

    status: Status
    error: str | None = None

    def __str__(self) -> str:
        if self.error:
            return f"{self.status}: {self.error}"
        return str(self.status)


class StoreEvent(str, Enum):
    """Enum for store events."""

    STATUS_UPDATED = "status_updated"
    RESULT_UPDATED = "result_updated"


class Store(ABC):
    """Resolution cache for a single run.

    Holds the result set of every asset that generated successfully along with
    the generation status of every asset the resolver has started.
    """

    @abstractmethod
    def set_result(self, key: AssetKey, result: ResultSet) -> None:
        """Record the result set of an asset that generated successfully."""

    @abstractmethod
    def get_result(self, key: AssetKey) -> ResultSet | None:
        """Retrieve the cached result set of an asset."""

    @abstractmethod
    def update_status(
        self, key: AssetKey, status: Status, error: str | None = None
    ) -> None:
        """Update the generation status and optional error message for an asset."""

    @abstractmethod
    def get_status(self, key: AssetKey) -> StatusInfo | None:
        """Retrieve the generation status of an asset."""

    @abstractmethod
    def claim(self, key: AssetKey) -> bool:
        """Mark an asset as pending unless it has already been started.

        Returns:
            bool: True if the caller is now responsible for generating the
                asset, False if another caller already claimed it.
        """

    @abstractmethod
    def add_listener(
        self,
        event: StoreEvent,
        callback: Callable[[AssetKey, Any], None],
    ) -> Callable[[], None]:
        """Register a callback for a store event.

        Returns a callable that can be called to remove the listener.
        """

    @abstractmethod
    async def watch_ready(self, key: AssetKey) -> ResultSet:
        """Wait for the specified asset to finish generating.

        Returns:
            The result set of the asset once it is READY.

        Raises:
            DependencyFailedError: If the asset is or becomes FAILED.
            asyncio.CancelledError: If the watch is cancelled.
        """
