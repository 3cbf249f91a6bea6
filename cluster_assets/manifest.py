"""Representation of the configuration objects read and written by assets.

The install config is the validated input of a run. The remaining objects are
kubernetes-style custom resources (apiVersion, kind, metadata, spec) that are
serialized to YAML and written out as manifests.
"""

from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import Any, ClassVar, cast

import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import MissingField, InvalidFieldValue

from .exceptions import EncodingError, InputException

__all__ = [
    "KubernetesObject",
    "ObjectMeta",
    "Networking",
    "InstallConfig",
    "NetworkConfig",
    "NetworkConfigSpec",
    "ClusterNetwork",
    "DefaultNetworkDefinition",
    "OpenshiftSDNConfig",
    "NetworkType",
    "SDNMode",
    "encode_yaml",
]

_LOGGER = logging.getLogger(__name__)


INSTALL_CONFIG_API_VERSION = "v1beta1"
INSTALL_CONFIG_KIND = "InstallConfig"
NETWORK_OPERATOR_GROUP = "networkoperator.openshift.io"
NETWORK_OPERATOR_VERSION = "v1"
NETWORK_CONFIG_KIND = "NetworkConfig"
DEFAULT_NETWORK_CONFIG_NAME = "default"


class NetworkType(StrEnum):
    """Type of the default cluster network plugin."""

    OPENSHIFT_SDN = "OpenshiftSDN"
    OVN_KUBERNETES = "OVNKubernetes"
    CALICO = "Calico"
    KURYR = "Kuryr"


class SDNMode(StrEnum):
    """Isolation mode of the OpenShift SDN plugin."""

    SUBNET = "Subnet"
    MULTITENANT = "Multitenant"
    POLICY = "NetworkPolicy"


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all configuration objects."""

    def yaml(self) -> bytes:
        """Return the YAML serialization of the object."""
        return encode_yaml(self)

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class KubernetesObject(BaseManifest):
    """Base class for objects with an apiVersion and kind type envelope."""

    kind: ClassVar[str]
    api_version: ClassVar[str]

    def to_doc(self) -> dict[str, Any]:
        """Return the object with its type envelope as a dictionary."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            **self.to_dict(),
        }

    def yaml(self) -> bytes:
        """Return the YAML serialization of the object with its type envelope."""
        return encode_yaml(self.to_doc())

    @classmethod
    def _check_envelope(cls, doc: dict[str, Any]) -> None:
        """Assert that the document has the kind and apiVersion of this class."""
        if doc.get("kind") != cls.kind:
            raise InputException(f"Invalid object expected kind '{cls.kind}': {doc}")
        if not (api_version := doc.get("apiVersion")):
            raise InputException(f"Invalid object missing apiVersion: {doc}")
        # Only the group is checked so newer versions of an object still parse
        group = cls.api_version.split("/")[0]
        if not str(api_version).startswith(group):
            raise InputException(f"Invalid object expected '{group}': {doc}")

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "KubernetesObject":
        """Parse an object from a decoded yaml document."""
        cls._check_envelope(doc)
        return cls._from_doc(doc)

    @classmethod
    def _from_doc(cls, doc: dict[str, Any]) -> "KubernetesObject":
        try:
            return cls.from_dict(doc)
        except (MissingField, InvalidFieldValue) as err:
            raise InputException(f"Invalid {cls.kind}: {err}") from err

    @classmethod
    def parse_yaml(cls, content: str | bytes) -> "KubernetesObject":
        """Parse a serialized object."""
        try:
            doc = yaml.load(content, Loader=yaml.SafeLoader)
        except yaml.YAMLError as err:
            raise InputException(f"Unable to parse {cls.kind} yaml: {err}") from err
        if not isinstance(doc, dict):
            raise InputException(f"Invalid {cls.kind} document: {doc!r}")
        return cls.parse_doc(doc)


@dataclass
class ObjectMeta(BaseManifest):
    """Metadata of a kubernetes-style object."""

    name: str
    """The name of the object."""

    namespace: str | None = None
    """The namespace of the object, if namespaced."""

    labels: dict[str, str] | None = None
    """Labels attached to the object."""


@dataclass
class Networking(BaseManifest):
    """Cluster level networking settings of the install config."""

    service_cidr: str = field(metadata=field_options(alias="serviceCIDR"))
    """The address range used for service virtual IPs."""

    pod_cidr: str = field(metadata=field_options(alias="podCIDR"))
    """The address range pod addresses are allocated from."""

    type: str = NetworkType.OPENSHIFT_SDN.value
    """The network plugin to deploy."""


@dataclass
class InstallConfig(KubernetesObject):
    """The validated configuration a cluster is installed from."""

    kind: ClassVar[str] = INSTALL_CONFIG_KIND
    api_version: ClassVar[str] = INSTALL_CONFIG_API_VERSION

    metadata: ObjectMeta
    """Metadata, where the name is the cluster name."""

    base_domain: str = field(metadata=field_options(alias="baseDomain"))
    """The base domain of the cluster."""

    networking: Networking
    """Networking settings of the cluster."""

    cluster_id: str | None = field(
        metadata=field_options(alias="clusterID"), default=None
    )
    """Unique identifier of the cluster."""

    platform: dict[str, Any] | None = None
    """Platform specific settings, not interpreted by the networking assets."""

    pull_secret: str | None = field(
        metadata=field_options(alias="pullSecret"), default=None
    )
    """Secret used to pull release images."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "InstallConfig":
        """Parse an InstallConfig from a decoded yaml document.

        Hand written install configs commonly omit the type envelope, so kind
        and apiVersion are only checked when present.
        """
        if (kind := doc.get("kind")) is not None and kind != cls.kind:
            raise InputException(f"Invalid object expected kind '{cls.kind}': {doc}")
        metadata = doc.get("metadata")
        if not isinstance(metadata, dict) or not metadata.get("name"):
            raise InputException(f"Invalid {cls.kind} missing metadata.name")
        if not doc.get("networking"):
            raise InputException(f"Invalid {cls.kind} missing networking")
        return cast(InstallConfig, cls._from_doc(doc))

    @property
    def cluster_name(self) -> str:
        """Name of the cluster being installed."""
        return self.metadata.name


@dataclass
class ClusterNetwork(BaseManifest):
    """An address range pod subnets are carved out of."""

    cidr: str
    """The cluster network address range."""

    host_subnet_length: int = field(metadata=field_options(alias="hostSubnetLength"))
    """Number of host bits of the subnet allocated to each node."""


@dataclass
class OpenshiftSDNConfig(BaseManifest):
    """Settings of the OpenShift SDN plugin."""

    mode: SDNMode
    """The isolation mode."""

    vxlan_port: int | None = field(
        metadata=field_options(alias="vxlanPort"), default=None
    )
    """Port used for VXLAN traffic, plugin default when unset."""

    mtu: int | None = None
    """MTU of the overlay, plugin default when unset."""


@dataclass
class DefaultNetworkDefinition(BaseManifest):
    """The network all pods are attached to."""

    type: NetworkType
    """The network plugin."""

    openshift_sdn_config: OpenshiftSDNConfig | None = field(
        metadata=field_options(alias="openshiftSDNConfig"), default=None
    )
    """Settings for the OpenShift SDN plugin."""


@dataclass
class NetworkConfigSpec(BaseManifest):
    """Desired state of the cluster network."""

    cluster_networks: list[ClusterNetwork] = field(
        metadata=field_options(alias="clusterNetworks")
    )
    """Address ranges for pod IPs."""

    service_network: str = field(metadata=field_options(alias="serviceNetwork"))
    """Address range for service IPs."""

    default_network: DefaultNetworkDefinition = field(
        metadata=field_options(alias="defaultNetwork")
    )
    """The default network provider."""


@dataclass
class NetworkConfig(KubernetesObject):
    """Configuration consumed by the cluster network operator."""

    kind: ClassVar[str] = NETWORK_CONFIG_KIND
    api_version: ClassVar[str] = f"{NETWORK_OPERATOR_GROUP}/{NETWORK_OPERATOR_VERSION}"

    metadata: ObjectMeta
    """Metadata of the object."""

    spec: NetworkConfigSpec
    """Desired state of the network."""


def encode_yaml(obj: DataClassDictMixin | dict[str, Any] | list[Any]) -> bytes:
    """Serialize an object to deterministic YAML bytes.

    Keys are written in declaration order and fields that are unset are omitted.

    Raises:
        EncodingError: If the object cannot be represented as YAML.
    """
    try:
        doc = obj.to_dict() if isinstance(obj, DataClassDictMixin) else obj
        content = yaml.dump(
            doc,
            Dumper=yaml.SafeDumper,
            sort_keys=False,
            default_flow_style=False,
        )
    except (yaml.YAMLError, TypeError, ValueError) as err:
        raise EncodingError(f"Unable to encode {type(obj).__name__}: {err}") from err
    _LOGGER.debug("Encoded %s (%d bytes)", type(obj).__name__, len(content))
    return content.encode()
