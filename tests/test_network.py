import pulumi
import pytest
from pulumi_azure_native import resources

from modules.network import NetworkSpecs, WebNetwork


def test_network_specs_need_an_address_space():
    with pytest.raises(ValueError, match="address_spaces"):
        NetworkSpecs(
            address_spaces=[],
            private_subnet_prefix="10.0.2.0/24",
            public_subnet_prefix="10.0.1.0/24",
        )


@pulumi.runtime.test
def test_vnet_and_subnets(mocks):
    resource_group = resources.ResourceGroup("net-rg", location="CentralUS")
    network = WebNetwork(
        "net",
        network_spec=NetworkSpecs(
            address_spaces=["10.0.0.0/16", "10.5.0.0/16"],
            private_subnet_prefix="10.0.2.0/24",
            public_subnet_prefix="10.0.1.0/24",
        ),
        resource_group=resource_group,
        tags={"purpose": "test"},
    )

    def check(_):
        vnet = mocks.find("azure-native:network:VirtualNetwork", "net-vnet")
        assert vnet.inputs["resourceGroupName"] == "net-rg"
        assert vnet.inputs["location"] == "CentralUS"
        assert vnet.inputs["addressSpace"]["addressPrefixes"] == [
            "10.0.0.0/16",
            "10.5.0.0/16",
        ]
        assert vnet.inputs["tags"] == {"purpose": "test"}

        private = mocks.find("azure-native:network:Subnet", "net-privateSubnet")
        public = mocks.find("azure-native:network:Subnet", "net-publicSubnet")
        assert private.inputs["addressPrefix"] == "10.0.2.0/24"
        assert public.inputs["addressPrefix"] == "10.0.1.0/24"
        for subnet in (private, public):
            assert subnet.inputs["virtualNetworkName"] == "net-vnet"
            assert subnet.inputs["resourceGroupName"] == "net-rg"

    return pulumi.Output.all(
        network.private_subnet.id, network.public_subnet.id
    ).apply(check)
