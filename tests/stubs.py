"""Asset implementations used by the tests."""

from cluster_assets.asset import Asset, Content, Dependencies, ResultSet


class StubAsset(Asset):
    """Asset that records every call made to it."""

    def __init__(
        self,
        name: str,
        deps: list[Asset] | None = None,
        files: dict[str, bytes] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self._deps = list(deps or [])
        self.files = files if files is not None else {f"{name}.txt": name.encode()}
        self.error = error
        self.calls: list[Dependencies] = []
        self.dependency_calls = 0

    @property
    def name(self) -> str:
        return self._name

    def depends_on(self, *assets: Asset) -> None:
        self._deps.extend(assets)

    def dependencies(self) -> list[Asset]:
        self.dependency_calls += 1
        return list(self._deps)

    def generate(self, results: Dependencies) -> ResultSet:
        self.calls.append(results)
        if self.error is not None:
            raise self.error
        return ResultSet(
            [Content(name=name, data=data) for name, data in self.files.items()]
        )
