"""Content produced by an asset."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from cluster_assets.exceptions import CollisionError


@dataclass(frozen=True, kw_only=True)
class Content:
    """A named payload that will be written as a single file.

    Attributes:
        name: Logical file name of the payload.
        data: Raw payload bytes.
    """

    name: str
    data: bytes

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Content name must not be empty")
        if not isinstance(self.data, bytes):
            raise ValueError(
                f"Content {self.name} data must be bytes "
                f"(was {self.data.__class__.__name__})"
            )


class ResultSet(Mapping[str, bytes]):
    """The ordered contents generated by a single asset.

    Maps file name to payload, preserving the order the contents were
    produced in. A result set is never modified after it is created.
    """

    def __init__(self, contents: Iterable[Content] = ()) -> None:
        """Initialize ResultSet and reject duplicate file names."""
        self._contents: tuple[Content, ...] = tuple(contents)
        self._data: dict[str, bytes] = {}
        for content in self._contents:
            if content.name in self._data:
                raise CollisionError(content.name, [])
            self._data[content.name] = content.data

    @property
    def contents(self) -> tuple[Content, ...]:
        """Return the contents in the order they were produced."""
        return self._contents

    def __getitem__(self, name: str) -> bytes:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultSet):
            return self._contents == other._contents
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(self._contents)

    def __repr__(self) -> str:
        return f"ResultSet({list(self._data)})"
