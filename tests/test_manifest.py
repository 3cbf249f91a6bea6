"""Tests for the configuration objects."""

from typing import Any

import pytest

from cluster_assets.exceptions import EncodingError, InputException
from cluster_assets.manifest import (
    ClusterNetwork,
    DefaultNetworkDefinition,
    InstallConfig,
    NetworkConfig,
    NetworkConfigSpec,
    NetworkType,
    ObjectMeta,
    OpenshiftSDNConfig,
    SDNMode,
    encode_yaml,
)

from tests.conftest import INSTALL_CONFIG_FILE


def install_config_doc() -> dict[str, Any]:
    return {
        "metadata": {"name": "example"},
        "baseDomain": "example.com",
        "networking": {
            "serviceCIDR": "172.30.0.0/16",
            "podCIDR": "10.128.0.0/14",
        },
    }


def test_parse_install_config() -> None:
    """Test parsing an install config file."""
    install_config = InstallConfig.parse_yaml(INSTALL_CONFIG_FILE.read_text())
    assert isinstance(install_config, InstallConfig)
    assert install_config.cluster_name == "test-cluster"
    assert install_config.base_domain == "example.com"
    assert install_config.cluster_id == "6b0f3bc6-2ed0-4d6c-9f4e-5a1b7c1f3e20"
    assert install_config.networking.type == "OpenshiftSDN"
    assert install_config.networking.service_cidr == "172.30.0.0/16"
    assert install_config.networking.pod_cidr == "10.128.0.0/14"
    assert install_config.platform == {
        "libvirt": {"URI": "qemu+tcp://192.168.122.1/system"}
    }
    assert install_config.pull_secret == '{"auths": {}}'


def test_install_config_defaults() -> None:
    """Test the optional fields of an install config."""
    install_config = InstallConfig.parse_doc(install_config_doc())
    assert install_config.cluster_id is None
    assert install_config.platform is None
    assert install_config.pull_secret is None
    assert install_config.networking.type == NetworkType.OPENSHIFT_SDN


def test_install_config_yaml() -> None:
    """Test the install config is written with its type envelope."""
    install_config = InstallConfig.parse_doc(install_config_doc())
    assert install_config.yaml() == (
        b"apiVersion: v1beta1\n"
        b"kind: InstallConfig\n"
        b"metadata:\n"
        b"  name: example\n"
        b"baseDomain: example.com\n"
        b"networking:\n"
        b"  serviceCIDR: 172.30.0.0/16\n"
        b"  podCIDR: 10.128.0.0/14\n"
        b"  type: OpenshiftSDN\n"
    )
    assert InstallConfig.parse_yaml(install_config.yaml()) == install_config


@pytest.mark.parametrize(
    ("field", "match"),
    [
        ("metadata", "missing metadata.name"),
        ("networking", "missing networking"),
        ("baseDomain", "Invalid InstallConfig"),
    ],
)
def test_install_config_missing_field(field: str, match: str) -> None:
    """Test an install config without a required field is rejected."""
    doc = install_config_doc()
    del doc[field]
    with pytest.raises(InputException, match=match):
        InstallConfig.parse_doc(doc)


def test_install_config_wrong_kind() -> None:
    """Test a document of another kind is rejected."""
    doc = install_config_doc()
    doc["kind"] = "NetworkConfig"
    with pytest.raises(InputException, match="expected kind 'InstallConfig'"):
        InstallConfig.parse_doc(doc)


def test_parse_yaml_invalid() -> None:
    """Test invalid yaml documents are rejected."""
    with pytest.raises(InputException, match="Unable to parse"):
        InstallConfig.parse_yaml("metadata: [")
    with pytest.raises(InputException, match="Invalid InstallConfig document"):
        InstallConfig.parse_yaml("- item")


def network_config() -> NetworkConfig:
    return NetworkConfig(
        metadata=ObjectMeta(name="default"),
        spec=NetworkConfigSpec(
            cluster_networks=[
                ClusterNetwork(cidr="10.128.0.0/14", host_subnet_length=9)
            ],
            service_network="172.30.0.0/16",
            default_network=DefaultNetworkDefinition(
                type=NetworkType.OPENSHIFT_SDN,
                openshift_sdn_config=OpenshiftSDNConfig(mode=SDNMode.POLICY),
            ),
        ),
    )


def test_network_config_doc() -> None:
    """Test the network config document uses the operator field names."""
    assert network_config().to_doc() == {
        "apiVersion": "networkoperator.openshift.io/v1",
        "kind": "NetworkConfig",
        "metadata": {"name": "default"},
        "spec": {
            "clusterNetworks": [{"cidr": "10.128.0.0/14", "hostSubnetLength": 9}],
            "serviceNetwork": "172.30.0.0/16",
            "defaultNetwork": {
                "type": "OpenshiftSDN",
                "openshiftSDNConfig": {"mode": "NetworkPolicy"},
            },
        },
    }


def test_parse_network_config() -> None:
    """Test parsing a serialized network config."""
    parsed = NetworkConfig.parse_yaml(network_config().yaml())
    assert parsed == network_config()


def test_network_config_wrong_group() -> None:
    """Test a network config from another api group is rejected."""
    doc = network_config().to_doc()
    doc["apiVersion"] = "operator.example.com/v1"
    with pytest.raises(InputException, match="networkoperator.openshift.io"):
        NetworkConfig.parse_doc(doc)


def test_encode_yaml_preserves_order() -> None:
    """Test keys are written in insertion order."""
    assert encode_yaml({"b": 1, "a": [2, 3]}) == b"b: 1\na:\n- 2\n- 3\n"


def test_encode_yaml_failure() -> None:
    """Test an object without a YAML representation is rejected."""
    with pytest.raises(EncodingError, match="Unable to encode dict"):
        encode_yaml({"a": object()})
