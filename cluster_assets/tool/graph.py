"""cluster-assets graph action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import Any, cast

from cluster_assets.asset import AssetGraph
from cluster_assets.installconfig import read_install_config

from .create import add_common_flags
from .format import PrintFormatter, YamlFormatter
from .targets import DEFAULT_TARGETS, build_targets

_LOGGER = logging.getLogger(__name__)


class GraphAction:
    """cluster-assets graph action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "graph",
                help="Print the assets of a run in dependency order",
                description="""Prints every asset reachable from the targets,
                    dependencies first, without generating anything.""",
            ),
        )
        add_common_flags(args)
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml"],
            default="table",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        install_config: pathlib.Path,
        targets: list[str] | None,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await read_install_config(install_config)
        graph = AssetGraph.build(build_targets(config, targets or DEFAULT_TARGETS))
        results: list[dict[str, Any]] = []
        for asset in graph.order():
            results.append(
                {
                    "kind": asset.key.kind,
                    "name": asset.key.name,
                    "dependencies": [
                        str(dep.key) for dep in graph.dependencies(asset.key)
                    ],
                }
            )
        if output == "yaml":
            YamlFormatter().print(results)
            return
        for row in results:
            row["dependencies"] = ", ".join(row["dependencies"]) or "-"
        PrintFormatter(["kind", "name", "dependencies"]).print(results)
