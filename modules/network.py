from typing import Optional
from attr import dataclass

from pulumi import ComponentResource, ResourceOptions
from pulumi_azure_native import (
    network as az_network,
    resources as az_resources,
)

from utils.utils import resource_name


@dataclass
class NetworkSpecs:
    address_spaces: list[str]
    private_subnet_prefix: str
    public_subnet_prefix: str

    def __attrs_post_init__(self):
        if not self.address_spaces:
            raise ValueError("address_spaces must contain at least one CIDR")


class WebNetwork(ComponentResource):
    """
    Create the virtual network with a private subnet for the scale set and a
    public subnet for the application gateway.
    """

    def __init__(
        self,
        name: str,
        network_spec: NetworkSpecs,
        resource_group: az_resources.ResourceGroup,
        tags: Optional[dict] = None,
        opts: Optional[ResourceOptions] = None,
    ):
        super().__init__("azurevmss:network:WebNetwork", name, None, opts)

        self.opts = ResourceOptions.merge(opts, ResourceOptions(parent=self))

        self.vnet = az_network.VirtualNetwork(
            resource_name(name, "vnet"),
            resource_group_name=resource_group.name,
            location=resource_group.location,
            address_space=az_network.AddressSpaceArgs(
                address_prefixes=network_spec.address_spaces,
            ),
            tags=tags,
            opts=self.opts,
        )

        subnet_opts = ResourceOptions.merge(
            self.opts, ResourceOptions(parent=self.vnet)
        )

        # Scale set NICs
        self.private_subnet = az_network.Subnet(
            resource_name(name, "privateSubnet"),
            resource_group_name=resource_group.name,
            virtual_network_name=self.vnet.name,
            address_prefix=network_spec.private_subnet_prefix,
            opts=subnet_opts,
        )

        # Application gateway IP configuration. Azure rejects concurrent
        # subnet writes within one virtual network.
        self.public_subnet = az_network.Subnet(
            resource_name(name, "publicSubnet"),
            resource_group_name=resource_group.name,
            virtual_network_name=self.vnet.name,
            address_prefix=network_spec.public_subnet_prefix,
            opts=ResourceOptions.merge(
                subnet_opts, ResourceOptions(depends_on=[self.private_subnet])
            ),
        )

        self.register_outputs(
            {
                "vnet_name": self.vnet.name,
                "private_subnet_id": self.private_subnet.id,
                "public_subnet_id": self.public_subnet.id,
            }
        )
