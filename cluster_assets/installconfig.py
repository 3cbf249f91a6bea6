"""Install config asset.

The install config is the root of the asset graph. It is loaded and validated
outside of the engine and handed to the asset, which publishes it as content so
that dependents read it from their resolved dependencies rather than from
shared state.
"""

import logging
from pathlib import Path
from typing import cast

import aiofiles

from .asset import Asset, Content, Dependencies, ResultSet
from .exceptions import ConfigurationError, InputException
from .manifest import InstallConfig

__all__ = [
    "INSTALL_CONFIG_FILENAME",
    "InstallConfigAsset",
    "get_install_config",
    "read_install_config",
]

_LOGGER = logging.getLogger(__name__)

INSTALL_CONFIG_FILENAME = "install-config.yml"


class InstallConfigAsset(Asset):
    """Publishes the validated install config of the cluster."""

    def __init__(self, install_config: InstallConfig) -> None:
        """Initialize InstallConfigAsset."""
        self._install_config = install_config

    @property
    def name(self) -> str:
        return "Install Config"

    def dependencies(self) -> list[Asset]:
        return []

    def generate(self, results: Dependencies) -> ResultSet:
        return ResultSet(
            [
                Content(
                    name=INSTALL_CONFIG_FILENAME,
                    data=self._install_config.yaml(),
                )
            ]
        )


def get_install_config(asset: Asset, results: Dependencies) -> InstallConfig:
    """Return the install config published by an InstallConfigAsset dependency.

    Raises:
        ConfigurationError: If the dependency did not publish a usable install config.
    """
    data = results.content(asset, INSTALL_CONFIG_FILENAME)
    try:
        return cast(InstallConfig, InstallConfig.parse_yaml(data))
    except InputException as err:
        raise ConfigurationError(
            f"Unable to read install config: {err.message}", asset.key
        ) from err


async def read_install_config(path: Path) -> InstallConfig:
    """Return the contents of an install config file."""
    try:
        async with aiofiles.open(str(path)) as config_file:
            content = await config_file.read()
    except OSError as err:
        raise InputException(f"Unable to read install config {path}: {err}") from err
    if not content:
        raise InputException(f"Install config file {path} is empty")
    _LOGGER.debug("Read install config from %s", path)
    return cast(InstallConfig, InstallConfig.parse_yaml(content))
