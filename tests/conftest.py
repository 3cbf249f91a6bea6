"""Test fixtures for cluster-assets."""

from pathlib import Path
from typing import cast

import pytest

from cluster_assets.installconfig import InstallConfigAsset
from cluster_assets.manifest import InstallConfig

TESTDATA_DIR = Path(__file__).parent / "testdata"
INSTALL_CONFIG_FILE = TESTDATA_DIR / "install-config.yaml"


@pytest.fixture
def install_config_file() -> Path:
    """Path to a valid install config file."""
    return INSTALL_CONFIG_FILE


@pytest.fixture
def install_config() -> InstallConfig:
    """A validated install config."""
    return cast(InstallConfig, InstallConfig.parse_yaml(INSTALL_CONFIG_FILE.read_text()))


@pytest.fixture
def install_config_asset(install_config: InstallConfig) -> InstallConfigAsset:
    """The root asset publishing the install config."""
    return InstallConfigAsset(install_config)
