from pulumi import Config, Input, Output

from utils.module_dataclasses import StackSettings


def split_list(value: str) -> list[str]:
    """
    Splits a comma separated config value, e.g. "1,2" -> ["1", "2"].
    """
    return [item.strip() for item in value.split(",") if item.strip()]


def resource_name(stack_id: str, suffix: str) -> str:
    return f"{stack_id}-{suffix}"


def gateway_sub_resource_id(
    resource_group_id: Input[str],
    gateway_name: str,
    collection: str,
    name: str,
) -> Output[str]:
    """
    Builds the ARM id of a child of an application gateway, e.g. one of its
    `backendAddressPools`. Sub-resources of a gateway reference each other by
    these ids, so the gateway's own name has to be known before it exists.
    """
    return Output.concat(
        resource_group_id,
        "/providers/Microsoft.Network/applicationGateways/",
        gateway_name,
        f"/{collection}/{name}",
    )


def load_stack_settings(config: Config) -> StackSettings:
    """
    Reads the stack configuration and falls back to the `StackSettings`
    defaults for every key that is not set. The frontend port and protocol
    default to the backend ones.
    """
    defaults = StackSettings()

    backend_port = _get_int(config, "backendPort", defaults.backend_port)
    backend_protocol = config.get("backendProtocol") or defaults.backend_protocol

    address_space = config.get("addressSpace")
    zones = config.get("zones")

    return StackSettings(
        region=config.get("region") or defaults.region,
        address_spaces=(
            split_list(address_space)
            if address_space
            else defaults.address_spaces
        ),
        private_subnet_prefix=config.get("privateSubnet")
        or defaults.private_subnet_prefix,
        public_subnet_prefix=config.get("publicSubnet")
        or defaults.public_subnet_prefix,
        dns_prefix=config.get("dnsPrefix") or defaults.dns_prefix,
        backend_port=backend_port,
        backend_protocol=backend_protocol,
        frontend_port=_get_int(config, "frontendPort", backend_port),
        frontend_protocol=config.get("frontendProtocol") or backend_protocol,
        instance_count=_get_int(config, "instanceCount", defaults.instance_count),
        zones=split_list(zones) if zones else defaults.zones,
        instance_size=config.get("instanceSize") or defaults.instance_size,
        instance_name_prefix=config.get("instanceNamePrefix")
        or defaults.instance_name_prefix,
        admin_user=config.get("adminUser") or defaults.admin_user,
        admin_password=config.get_secret("adminPassword"),
        admin_password_version=config.get("adminPasswordVersion")
        or defaults.admin_password_version,
    )


def _get_int(config: Config, key: str, default: int) -> int:
    # `or` would turn an explicit 0 into the default
    value = config.get_int(key)
    return default if value is None else value
