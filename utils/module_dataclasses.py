from dataclasses import dataclass, field
import ipaddress
import re
from typing import Optional

from pulumi import Input

SUPPORTED_PROTOCOLS = ("Http", "Https")


def normalize_protocol(protocol: str) -> str:
    """
    Map a configured protocol such as "HTTP" or "https" to the casing Azure
    expects ("Http", "Https").
    """
    normalized = protocol.strip().capitalize()
    if normalized not in SUPPORTED_PROTOCOLS:
        raise ValueError(
            f"Unsupported protocol '{protocol}'. Expected one of: {', '.join(SUPPORTED_PROTOCOLS)}"  # noqa: E501
        )
    return normalized


@dataclass
class StackSettings:
    """
    Dataclass to hold every configurable value of the web scale set stack.
    The defaults are the hard-coded topology; `StackSettings()` alone
    describes a complete deployment.

    Args:
        region (str): Azure region of the resource group.
        address_spaces (list[str]): Address spaces of the virtual network.
        private_subnet_prefix (str): CIDR of the scale set subnet.
        public_subnet_prefix (str): CIDR of the application gateway subnet.
        dns_prefix (str): DNS label of the public IP.
        backend_port (int): Port the instances serve on.
        backend_protocol (str): Protocol the instances serve.
        frontend_port (int): Port the gateway listens on.
        frontend_protocol (str): Protocol the gateway listens with.
        instance_count (int): Number of scale set instances.
        zones (list[str]): Availability zones of the scale set.
        instance_size (str): VM size of each instance.
        instance_name_prefix (str): Computer name prefix of the instances.
        admin_user (str): Local administrator user name.
        admin_password (Input[str], optional): Local administrator password.
            A random password is generated when omitted.
        admin_password_version (str): Bump to rotate a generated password.
    """

    region: str = "CentralUS"
    address_spaces: list[str] = field(default_factory=lambda: ["10.0.0.0/16"])
    private_subnet_prefix: str = "10.0.2.0/24"
    public_subnet_prefix: str = "10.0.1.0/24"
    dns_prefix: str = "aspnettodo"
    backend_port: int = 80
    backend_protocol: str = "HTTP"
    frontend_port: int = 80
    frontend_protocol: str = "HTTP"
    instance_count: int = 2
    zones: list[str] = field(default_factory=lambda: ["1", "2"])
    instance_size: str = "Standard_B1s"
    instance_name_prefix: str = "web"
    admin_user: str = "webadmin"
    admin_password: Optional[Input[str]] = None
    admin_password_version: str = "1"

    def __post_init__(self):
        self._validate_network()
        for name in ("backend_port", "frontend_port"):
            port = getattr(self, name)
            if not 1 <= port <= 65535:
                raise ValueError(f"{name} {port} is outside 1-65535")

        normalize_protocol(self.backend_protocol)
        normalize_protocol(self.frontend_protocol)

        if self.instance_count < 0:
            raise ValueError(
                f"instance_count must not be negative, got {self.instance_count}"  # noqa: E501
            )
        if not self.zones or any(not zone.strip() for zone in self.zones):
            raise ValueError(f"zones must be non-empty strings, got {self.zones}")
        # Windows limits the computer name prefix to 9 characters.
        if not re.match(r"^[A-Za-z0-9\-]{1,9}$", self.instance_name_prefix):
            raise ValueError(
                f"instance_name_prefix '{self.instance_name_prefix}' must be 1-9 letters, numbers, or hyphens."  # noqa: E501
            )
        if not self.admin_user:
            raise ValueError("admin_user must not be empty")

    def _validate_network(self):
        if not self.address_spaces:
            raise ValueError("address_spaces must contain at least one CIDR")
        spaces = [_parse_cidr(cidr) for cidr in self.address_spaces]
        private = _parse_cidr(self.private_subnet_prefix)
        public = _parse_cidr(self.public_subnet_prefix)

        for label, subnet in (("private", private), ("public", public)):
            if not any(
                subnet.version == space.version and subnet.subnet_of(space)
                for space in spaces
            ):
                raise ValueError(
                    f"{label} subnet {subnet} is not inside any address space {self.address_spaces}"  # noqa: E501
                )
        if private.version == public.version and private.overlaps(public):
            raise ValueError(
                f"private subnet {private} overlaps public subnet {public}"
            )


def _parse_cidr(cidr: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    try:
        return ipaddress.ip_network(cidr.strip())
    except ValueError as ex:
        raise ValueError(f"Invalid CIDR '{cidr}': {ex}") from ex
