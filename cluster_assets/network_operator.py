"""Network operator asset.

Generates the configuration consumed by the cluster network operator from the
networking section of the install config.
"""

from collections.abc import Callable
import ipaddress
import logging

from .asset import Asset, Content, Dependencies, ResultSet
from .exceptions import ConfigurationError
from .installconfig import get_install_config
from .manifest import (
    ClusterNetwork,
    DEFAULT_NETWORK_CONFIG_NAME,
    DefaultNetworkDefinition,
    InstallConfig,
    NetworkConfig,
    NetworkConfigSpec,
    NetworkType,
    ObjectMeta,
    OpenshiftSDNConfig,
    SDNMode,
)

__all__ = [
    "NETWORK_CONFIG_FILENAME",
    "NETWORK_MANIFESTS_FILENAME",
    "NetworkOperator",
    "ManifestBuilder",
    "empty_manifest",
]

_LOGGER = logging.getLogger(__name__)

NETWORK_CONFIG_FILENAME = "network-operator-config.yml"
NETWORK_MANIFESTS_FILENAME = "network-operator-manifests.yml"

# Each node is allocated a subnet with this many host bits out of the cluster network
HOST_SUBNET_LENGTH = 9

ManifestBuilder = Callable[[InstallConfig], bytes]


def empty_manifest(install_config: InstallConfig) -> bytes:
    """Manifest builder that produces no manifests."""
    return b""


def _parse_cidr(
    value: str, field_name: str, asset: Asset
) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    try:
        return ipaddress.ip_network(value, strict=False)
    except ValueError as err:
        raise ConfigurationError(
            f"Invalid networking.{field_name} '{value}': {err}", asset.key
        ) from err


class NetworkOperator(Asset):
    """Generates the network-operator-*.yml files."""

    def __init__(
        self,
        install_config_asset: Asset,
        manifest_builder: ManifestBuilder = empty_manifest,
    ) -> None:
        """Initialize NetworkOperator.

        Args:
            install_config_asset: The asset publishing the install config.
            manifest_builder: Produces the operator manifests from the install config.
        """
        self._install_config_asset = install_config_asset
        self._manifest_builder = manifest_builder

    @property
    def name(self) -> str:
        return "Network Operator"

    def dependencies(self) -> list[Asset]:
        return [self._install_config_asset]

    def generate(self, results: Dependencies) -> ResultSet:
        """Generate the network operator config and manifests files."""
        install_config = get_install_config(self._install_config_asset, results)
        net_config = self.net_config(install_config)
        manifest = self._manifest_builder(install_config)
        _LOGGER.debug(
            "Generated network config for cluster %s", install_config.cluster_name
        )
        return ResultSet(
            [
                Content(name=NETWORK_CONFIG_FILENAME, data=net_config.yaml()),
                Content(name=NETWORK_MANIFESTS_FILENAME, data=manifest),
            ]
        )

    def net_config(self, install_config: InstallConfig) -> NetworkConfig:
        """Return the NetworkConfig derived from the install config."""
        networking = install_config.networking
        service_network = _parse_cidr(networking.service_cidr, "serviceCIDR", self)
        pod_network = _parse_cidr(networking.pod_cidr, "podCIDR", self)
        if pod_network.prefixlen > pod_network.max_prefixlen - HOST_SUBNET_LENGTH:
            raise ConfigurationError(
                f"networking.podCIDR {pod_network} is too small for host subnets "
                f"of length {HOST_SUBNET_LENGTH}",
                self.key,
            )
        return NetworkConfig(
            metadata=ObjectMeta(name=DEFAULT_NETWORK_CONFIG_NAME),
            spec=NetworkConfigSpec(
                service_network=str(service_network),
                cluster_networks=[
                    ClusterNetwork(
                        cidr=str(pod_network),
                        host_subnet_length=HOST_SUBNET_LENGTH,
                    )
                ],
                default_network=DefaultNetworkDefinition(
                    type=NetworkType.OPENSHIFT_SDN,
                    openshift_sdn_config=OpenshiftSDNConfig(mode=SDNMode.POLICY),
                ),
            ),
        )
