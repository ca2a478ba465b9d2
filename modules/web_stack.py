"""
Wires the web scale set topology together:

    resource group -> virtual network -> private / public subnets
                   -> public IP -> application gateway (public subnet)
                   -> scale set (private subnet, gateway backend pool)
"""

from typing import Optional
from attr import dataclass

from pulumi import Output, ResourceOptions
from pulumi_azure_native import resources as az_resources

from modules.compute import EnvironmentSpecs, ScaleSetSpecs, WebScaleSet
from modules.gateway import GatewaySpecs, WebGateway
from modules.network import NetworkSpecs, WebNetwork
from utils.module_dataclasses import StackSettings
from utils.utils import resource_name

DEFAULT_STACK_ID = "webScaleSet"


@dataclass
class WebStackOutputs:
    resource_group: az_resources.ResourceGroup
    network: WebNetwork
    gateway: WebGateway
    scale_set: WebScaleSet

    @property
    def public_url(self) -> Output[Optional[str]]:
        return self.gateway.fqdn

    def exports(self) -> dict:
        return {
            "public_url": self.public_url,
            "resource_group_name": self.resource_group.name,
            "scale_set_name": self.scale_set.scale_set.name,
            "admin_username": self.scale_set.admin_username,
            "admin_password": self.scale_set.admin_password,
        }


def provision_web_scale_set(
    settings: StackSettings,
    stack_id: str = DEFAULT_STACK_ID,
    tags: Optional[dict] = None,
    opts: Optional[ResourceOptions] = None,
) -> WebStackOutputs:
    resource_group = az_resources.ResourceGroup(
        resource_name(stack_id, "rg"),
        location=settings.region,
        tags=tags,
        opts=opts,
    )
    child_opts = ResourceOptions.merge(
        opts, ResourceOptions(parent=resource_group)
    )

    network = WebNetwork(
        stack_id,
        network_spec=NetworkSpecs(
            address_spaces=settings.address_spaces,
            private_subnet_prefix=settings.private_subnet_prefix,
            public_subnet_prefix=settings.public_subnet_prefix,
        ),
        resource_group=resource_group,
        tags=tags,
        opts=child_opts,
    )

    gateway = WebGateway(
        stack_id,
        gateway_spec=GatewaySpecs(
            dns_prefix=settings.dns_prefix,
            backend_port=settings.backend_port,
            backend_protocol=settings.backend_protocol,
            frontend_port=settings.frontend_port,
            frontend_protocol=settings.frontend_protocol,
        ),
        resource_group=resource_group,
        public_subnet_id=network.public_subnet.id,
        tags=tags,
        opts=child_opts,
    )

    scale_set = WebScaleSet(
        stack_id,
        scale_set_spec=ScaleSetSpecs(
            admin_username=settings.admin_user,
            admin_password=settings.admin_password,
            admin_password_version=settings.admin_password_version,
            computer_name_prefix=settings.instance_name_prefix,
            capacity=settings.instance_count,
            size=settings.instance_size,
            zones=settings.zones,
        ),
        env_spec=EnvironmentSpecs(
            resource_group=resource_group,
            subnet_id=network.private_subnet.id,
            backend_pool_id=gateway.backend_pool_id,
            tags=tags,
        ),
        opts=child_opts,
    )

    return WebStackOutputs(
        resource_group=resource_group,
        network=network,
        gateway=gateway,
        scale_set=scale_set,
    )
