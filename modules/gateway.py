from typing import Optional
from attr import dataclass
import os
import re

from pulumi import ComponentResource, Input, Output, ResourceOptions, log
from pulumi_azure_native import (
    network as az_network,
    resources as az_resources,
)

from utils.module_dataclasses import normalize_protocol
from utils.utils import gateway_sub_resource_id, resource_name


@dataclass
class GatewaySpecs:
    dns_prefix: str
    backend_port: int
    backend_protocol: str
    frontend_port: int
    frontend_protocol: str
    sku_name: str = "Standard_Small"
    sku_tier: str = "Standard"
    capacity: int = 1

    def __attrs_post_init__(self):
        # Azure DNS label rules for public IPs
        if not re.match(r"^[a-z][a-z0-9\-]{1,61}[a-z0-9]$", self.dns_prefix):
            raise ValueError(
                f"dns_prefix '{self.dns_prefix}' must be 3-63 lowercase letters, numbers, or hyphens and start with a letter."  # noqa: E501
            )
        normalize_protocol(self.backend_protocol)
        normalize_protocol(self.frontend_protocol)

    # Sub-resource names. Routing rules refer to the other sub-resources by
    # these names, so they are only ever built here.
    def frontend_ip_config_name(self, prefix: str) -> str:
        return resource_name(prefix, "appgw-ipconfig-0")

    def backend_pool_name(self, prefix: str) -> str:
        return resource_name(prefix, "bepool-0")

    @property
    def frontend_port_name(self) -> str:
        return f"Port{self.frontend_port}"

    @property
    def backend_settings_name(self) -> str:
        return f"{self.backend_protocol}Settings"

    @property
    def listener_name(self) -> str:
        return f"{self.frontend_protocol}Listener"


class WebGateway(ComponentResource):
    """
    Create a public IP and an application gateway that routes
    `frontend_protocol` traffic on `frontend_port` to a single backend pool.
    Members join the pool from their own IP configurations through
    `backend_pool_id`.
    """

    gateway_ip_config_name = "IPConfiguration"
    routing_rule_name = "Default"

    def __init__(
        self,
        name: str,
        gateway_spec: GatewaySpecs,
        resource_group: az_resources.ResourceGroup,
        public_subnet_id: Input[str],
        tags: Optional[dict] = None,
        opts: Optional[ResourceOptions] = None,
    ):
        super().__init__("azurevmss:network:WebGateway", name, None, opts)

        self.opts = ResourceOptions.merge(opts, ResourceOptions(parent=self))

        self.public_ip = az_network.PublicIPAddress(
            resource_name(name, "pip"),
            resource_group_name=resource_group.name,
            location=resource_group.location,
            sku=az_network.PublicIPAddressSkuArgs(
                name=az_network.PublicIPAddressSkuName.BASIC,
            ),
            public_ip_allocation_method=az_network.IPAllocationMethod.DYNAMIC,
            dns_settings=az_network.PublicIPAddressDnsSettingsArgs(
                domain_name_label=gateway_spec.dns_prefix,
            ),
            tags=tags,
            # The DNS label is unique per region, the old address has to
            # release it first.
            opts=ResourceOptions.merge(
                self.opts, ResourceOptions(delete_before_replace=True)
            ),
        )

        self.gateway_name = resource_name(name, "appgw")
        frontend_ip_config_name = gateway_spec.frontend_ip_config_name(name)
        backend_pool_name = gateway_spec.backend_pool_name(name)

        def sub_resource(collection: str, sub_name: str):
            return az_network.SubResourceArgs(
                id=gateway_sub_resource_id(
                    resource_group.id,
                    self.gateway_name,
                    collection,
                    sub_name,
                )
            )

        backend_protocol = normalize_protocol(gateway_spec.backend_protocol)
        frontend_protocol = normalize_protocol(gateway_spec.frontend_protocol)

        if os.getenv("DEBUG"):
            log.info(
                f"Routing {frontend_protocol}:{gateway_spec.frontend_port} to "
                f"{backend_pool_name} on {backend_protocol}:{gateway_spec.backend_port}",  # noqa: E501
                resource=self,
            )

        self.application_gateway = az_network.ApplicationGateway(
            self.gateway_name,
            application_gateway_name=self.gateway_name,
            resource_group_name=resource_group.name,
            location=resource_group.location,
            sku=az_network.ApplicationGatewaySkuArgs(
                name=gateway_spec.sku_name,
                tier=gateway_spec.sku_tier,
                capacity=gateway_spec.capacity,
            ),
            gateway_ip_configurations=[
                az_network.ApplicationGatewayIPConfigurationArgs(
                    name=self.gateway_ip_config_name,
                    subnet=az_network.SubResourceArgs(id=public_subnet_id),
                )
            ],
            frontend_ip_configurations=[
                az_network.ApplicationGatewayFrontendIPConfigurationArgs(
                    name=frontend_ip_config_name,
                    public_ip_address=az_network.SubResourceArgs(
                        id=self.public_ip.id,
                    ),
                )
            ],
            frontend_ports=[
                az_network.ApplicationGatewayFrontendPortArgs(
                    name=gateway_spec.frontend_port_name,
                    port=gateway_spec.frontend_port,
                )
            ],
            backend_address_pools=[
                az_network.ApplicationGatewayBackendAddressPoolArgs(
                    name=backend_pool_name,
                )
            ],
            backend_http_settings_collection=[
                az_network.ApplicationGatewayBackendHttpSettingsArgs(
                    name=gateway_spec.backend_settings_name,
                    protocol=backend_protocol,
                    port=gateway_spec.backend_port,
                    cookie_based_affinity=az_network.ApplicationGatewayCookieBasedAffinity.DISABLED,  # noqa: E501
                )
            ],
            http_listeners=[
                az_network.ApplicationGatewayHttpListenerArgs(
                    name=gateway_spec.listener_name,
                    protocol=frontend_protocol,
                    frontend_ip_configuration=sub_resource(
                        "frontendIPConfigurations", frontend_ip_config_name
                    ),
                    frontend_port=sub_resource(
                        "frontendPorts", gateway_spec.frontend_port_name
                    ),
                )
            ],
            request_routing_rules=[
                az_network.ApplicationGatewayRequestRoutingRuleArgs(
                    name=self.routing_rule_name,
                    rule_type=az_network.ApplicationGatewayRequestRoutingRuleType.BASIC,  # noqa: E501
                    http_listener=sub_resource(
                        "httpListeners", gateway_spec.listener_name
                    ),
                    backend_address_pool=sub_resource(
                        "backendAddressPools", backend_pool_name
                    ),
                    backend_http_settings=sub_resource(
                        "backendHttpSettingsCollection",
                        gateway_spec.backend_settings_name,
                    ),
                )
            ],
            tags=tags,
            opts=self.opts,
        )

        # Derived from the gateway's own id so that members of the pool are
        # declared after the gateway.
        self.backend_pool_id: Output[str] = Output.concat(
            self.application_gateway.id,
            f"/backendAddressPools/{backend_pool_name}",
        )
        self.fqdn: Output[Optional[str]] = self.public_ip.dns_settings.apply(
            lambda settings: settings.fqdn if settings else None
        )

        self.register_outputs(
            {
                "backend_pool_id": self.backend_pool_id,
                "fqdn": self.fqdn,
            }
        )
