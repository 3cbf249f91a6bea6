"""Selection of the target assets of a run."""

from collections.abc import Callable
import logging

from cluster_assets.asset import Asset
from cluster_assets.installconfig import InstallConfigAsset
from cluster_assets.manifest import InstallConfig
from cluster_assets.network_operator import NetworkOperator

_LOGGER = logging.getLogger(__name__)

TargetFactory = Callable[[InstallConfigAsset], Asset]

TARGETS: dict[str, TargetFactory] = {
    "install-config": lambda install_config: install_config,
    "network-operator": NetworkOperator,
}
DEFAULT_TARGETS = ["network-operator"]


def build_targets(install_config: InstallConfig, names: list[str]) -> list[Asset]:
    """Return the target assets with the given names.

    Every target shares one install config asset.
    """
    root = InstallConfigAsset(install_config)
    targets = [TARGETS[name](root) for name in names]
    _LOGGER.debug("Selected targets: %s", ", ".join(str(t.key) for t in targets))
    return targets
