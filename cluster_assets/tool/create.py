"""cluster-assets create action."""

from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
    BooleanOptionalAction,
)
import logging
import pathlib
from typing import cast

from cluster_assets.installconfig import read_install_config
from cluster_assets.orchestrator import (
    Orchestrator,
    OrchestratorConfig,
    write_bundle,
)

from .targets import DEFAULT_TARGETS, TARGETS, build_targets

_LOGGER = logging.getLogger(__name__)


def add_common_flags(args: ArgumentParser) -> None:
    """Add flags shared by the actions that load an install config."""
    args.add_argument(
        "--install-config",
        type=pathlib.Path,
        required=True,
        help="Path to the install-config.yaml file of the cluster",
    )
    args.add_argument(
        "--target",
        dest="targets",
        action="append",
        choices=sorted(TARGETS),
        help=(
            "Target asset to generate, may be repeated "
            f"(default: {', '.join(DEFAULT_TARGETS)})"
        ),
    )


class CreateAction:
    """cluster-assets create action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "create",
                help="Generate the target assets into a directory",
                description="""Generates the target assets and all of their
                    dependencies from an install config, then writes the
                    resulting files into the output directory. Nothing is
                    written if any asset fails.""",
            ),
        )
        add_common_flags(args)
        args.add_argument(
            "--dir",
            dest="output_dir",
            type=pathlib.Path,
            default=pathlib.Path("."),
            help="Directory the generated files are written to",
        )
        args.add_argument(
            "--concurrent",
            action=BooleanOptionalAction,
            default=False,
            help="Generate independent assets concurrently",
        )
        args.add_argument(
            "--include-dependencies",
            action=BooleanOptionalAction,
            default=False,
            help="Also write the files of the dependencies of the targets",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        install_config: pathlib.Path,
        targets: list[str] | None,
        output_dir: pathlib.Path,
        concurrent: bool,
        include_dependencies: bool,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await read_install_config(install_config)
        assets = build_targets(config, targets or DEFAULT_TARGETS)
        orchestrator = Orchestrator(
            OrchestratorConfig(
                concurrent=concurrent,
                include_dependencies=include_dependencies,
            )
        )
        bundle = await orchestrator.async_generate(assets)
        for path in await write_bundle(bundle, output_dir):
            print(path)
