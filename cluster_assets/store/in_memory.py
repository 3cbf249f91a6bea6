"""Module for in memory resolution cache."""

import asyncio
from collections import defaultdict
from collections.abc import Callable
from typing import Any, DefaultDict

import logging

from cluster_assets.asset import AssetKey, ResultSet
from cluster_assets.exceptions import DependencyFailedError

from .store import Status, StatusInfo, Store, StoreEvent


_LOGGER = logging.getLogger(__name__)


class InMemoryStore(Store):
    """In-memory implementation of the Store interface.

    Stores result sets and status keyed by AssetKey. Supports event listeners
    for status and result changes.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryStore."""
        self._results: dict[AssetKey, ResultSet] = {}
        self._status: dict[AssetKey, StatusInfo] = {}
        self._listeners: DefaultDict[StoreEvent, list[Callable[..., None]]] = (
            defaultdict(list)
        )

    def set_result(self, key: AssetKey, result: ResultSet) -> None:
        """Record the result set of an asset that generated successfully."""
        if not isinstance(result, ResultSet):
            raise ValueError(
                f"Result for {key} is not of type {ResultSet.__name__} "
                f"(was {result.__class__.__name__})"
            )
        if key in self._results:
            raise ValueError(f"Result for {key} was already stored")
        _LOGGER.debug("Storing result for %s: %s", key, list(result))
        self._results[key] = result
        self._fire_event(StoreEvent.RESULT_UPDATED, key, result)

    def get_result(self, key: AssetKey) -> ResultSet | None:
        """Retrieve the cached result set of an asset."""
        return self._results.get(key)

    def update_status(
        self, key: AssetKey, status: Status, error: str | None = None
    ) -> None:
        """Update the generation status and optional error message for an asset."""
        if status == Status.FAILED:
            _LOGGER.error("Asset %s status %s with error: %s", key, status, error)
        else:
            _LOGGER.debug("Updating status for asset %s to %s", key, status)
        self._status[key] = StatusInfo(status=status, error=error)
        self._fire_event(StoreEvent.STATUS_UPDATED, key, self._status[key])

    def get_status(self, key: AssetKey) -> StatusInfo | None:
        """Retrieve the generation status of an asset."""
        return self._status.get(key)

    def claim(self, key: AssetKey) -> bool:
        """Mark an asset as pending unless it has already been started."""
        if key in self._status:
            return False
        self.update_status(key, Status.PENDING)
        return True

    def add_listener(
        self,
        event: StoreEvent,
        callback: Callable[[AssetKey, Any], None],
    ) -> Callable[[], None]:
        """Register a callback for a store event."""

        def remove() -> None:
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)

        self._listeners[event].append(callback)
        return remove

    def _fire_event(self, event: StoreEvent, *args: Any) -> None:
        for cb in list(self._listeners[event]):
            try:
                cb(*args)
            except Exception:
                _LOGGER.exception("Store listener callback failed for event %s", event)

    async def watch_ready(self, key: AssetKey) -> ResultSet:
        """Wait for the specified asset to finish generating.

        If the asset already generated, returns its result set immediately.
        If the asset is FAILED or transitions to FAILED, raises DependencyFailedError.
        """
        if (result := self._results.get(key)) is not None:
            return result
        if (info := self._status.get(key)) is not None and info.status == Status.FAILED:
            raise DependencyFailedError(key, info.error)

        done = asyncio.Event()
        failures: list[StatusInfo] = []

        def on_result(fired_key: AssetKey, result: ResultSet) -> None:
            if fired_key == key:
                done.set()

        def on_status(fired_key: AssetKey, status_info: StatusInfo) -> None:
            if fired_key == key and status_info.status == Status.FAILED:
                failures.append(status_info)
                done.set()

        remove_result = self.add_listener(StoreEvent.RESULT_UPDATED, on_result)
        remove_status = self.add_listener(StoreEvent.STATUS_UPDATED, on_status)
        try:
            await done.wait()
            if failures:
                raise DependencyFailedError(key, failures[0].error)
            if (result := self._results.get(key)) is not None:
                return result
            raise RuntimeError(f"watch_ready for {key} ended without a result")
        except asyncio.CancelledError:
            _LOGGER.debug("watch_ready for %s cancelled", key)
            raise
        finally:
            remove_result()
            remove_status()
