from typing import Optional
from attr import dataclass, field
import os

from pulumi import ComponentResource, Input, Output, ResourceOptions, log
from pulumi_azure_native import (
    compute as az_compute,
    resources as az_resources,
)
from pulumi_random import RandomPassword

from utils.utils import resource_name


@dataclass
class EnvironmentSpecs:
    resource_group: az_resources.ResourceGroup
    subnet_id: Input[str]
    backend_pool_id: Input[str]
    tags: Optional[dict] = None


@dataclass
class ScriptExtensionSpecs:
    name: str = "IIS-Script-Extension"
    publisher: str = "Microsoft.Compute"
    type: str = "CustomScriptExtension"
    type_handler_version: str = "1.4"
    command_to_execute: str = (
        "powershell Add-WindowsFeature Web-Server,Web-Asp-Net45,NET-Framework-Features"  # noqa: E501
    )


@dataclass
class ScaleSetSpecs:
    admin_username: str
    admin_password_version: str
    computer_name_prefix: str
    capacity: int
    size: str
    zones: list[str]
    admin_password: Optional[Input[str]] = None
    tier: str = "Standard"
    offer: str = "WindowsServer"
    publisher: str = "MicrosoftWindowsServer"
    sku: str = "2019-Datacenter-Core"
    version: str = "latest"
    extensions: list[ScriptExtensionSpecs] = field(
        factory=lambda: [ScriptExtensionSpecs()]
    )

    def __attrs_post_init__(self):
        if self.capacity < 0:
            raise ValueError(
                f"capacity must not be negative, got {self.capacity}"
            )


class WebScaleSet(ComponentResource):
    """
    Create a Windows virtual machine scale set in the given subnet, joined to
    an application gateway backend pool. Every instance runs the configured
    script extensions after provisioning.

    When no admin password is given one is generated and can be rotated by
    changing `admin_password_version`.
    """

    def __init__(
        self,
        name: str,
        scale_set_spec: ScaleSetSpecs,
        env_spec: EnvironmentSpecs,
        opts: Optional[ResourceOptions] = None,
    ):
        super().__init__("azurevmss:compute:WebScaleSet", name, None, opts)

        self.opts = ResourceOptions.merge(opts, ResourceOptions(parent=self))

        self.password: Optional[RandomPassword] = None
        if scale_set_spec.admin_password is None:
            log.warn(
                f"No admin password configured for {name}, generating one",
                resource=self,
            )
            self.password = RandomPassword(
                f"{name}-admin-password",
                length=16,
                keepers={"version": scale_set_spec.admin_password_version},
                lower=True,
                upper=True,
                special=True,
                override_special="!#%^*_+=-./?~",
                numeric=True,
                min_lower=1,
                min_upper=1,
                min_numeric=1,
                min_special=1,
                opts=self.opts,
            )
            admin_password = self.password.result
        else:
            admin_password = scale_set_spec.admin_password
        self.admin_username = scale_set_spec.admin_username
        self.admin_password: Output[str] = Output.secret(admin_password)

        if os.getenv("DEBUG"):
            log.info(
                f"Scale set {name}: {scale_set_spec.capacity} x {scale_set_spec.size} in zones {scale_set_spec.zones}",  # noqa: E501
                resource=self,
            )

        self.scale_set = az_compute.VirtualMachineScaleSet(
            resource_name(name, "vmss"),
            resource_group_name=env_spec.resource_group.name,
            location=env_spec.resource_group.location,
            zones=scale_set_spec.zones,
            sku=az_compute.SkuArgs(
                capacity=scale_set_spec.capacity,
                name=scale_set_spec.size,
                tier=scale_set_spec.tier,
            ),
            upgrade_policy=az_compute.UpgradePolicyArgs(
                mode=az_compute.UpgradeMode.AUTOMATIC,
            ),
            virtual_machine_profile=az_compute.VirtualMachineScaleSetVMProfileArgs(  # noqa: E501
                network_profile=az_compute.VirtualMachineScaleSetNetworkProfileArgs(  # noqa: E501
                    network_interface_configurations=[
                        az_compute.VirtualMachineScaleSetNetworkConfigurationArgs(  # noqa: E501
                            name="networkprofile",
                            primary=True,
                            enable_accelerated_networking=False,
                            ip_configurations=[
                                az_compute.VirtualMachineScaleSetIPConfigurationArgs(  # noqa: E501
                                    name="IPConfiguration",
                                    primary=True,
                                    subnet=az_compute.ApiEntityReferenceArgs(
                                        id=env_spec.subnet_id,
                                    ),
                                    application_gateway_backend_address_pools=[
                                        az_compute.SubResourceArgs(
                                            id=env_spec.backend_pool_id,
                                        )
                                    ],
                                )
                            ],
                        )
                    ]
                ),
                os_profile=az_compute.VirtualMachineScaleSetOSProfileArgs(
                    admin_username=scale_set_spec.admin_username,
                    admin_password=self.admin_password,
                    computer_name_prefix=scale_set_spec.computer_name_prefix,
                    windows_configuration=az_compute.WindowsConfigurationArgs(
                        provision_vm_agent=True,
                    ),
                ),
                storage_profile=az_compute.VirtualMachineScaleSetStorageProfileArgs(  # noqa: E501
                    image_reference=az_compute.ImageReferenceArgs(
                        publisher=scale_set_spec.publisher,
                        offer=scale_set_spec.offer,
                        sku=scale_set_spec.sku,
                        version=scale_set_spec.version,
                    ),
                    os_disk=az_compute.VirtualMachineScaleSetOSDiskArgs(
                        caching=az_compute.CachingTypes.READ_WRITE,
                        create_option=az_compute.DiskCreateOptionTypes.FROM_IMAGE,  # noqa: E501
                        managed_disk=az_compute.VirtualMachineScaleSetManagedDiskParametersArgs(  # noqa: E501
                            storage_account_type=az_compute.StorageAccountTypes.STANDARD_LRS,  # noqa: E501
                        ),
                    ),
                ),
                extension_profile=az_compute.VirtualMachineScaleSetExtensionProfileArgs(  # noqa: E501
                    extensions=[
                        az_compute.VirtualMachineScaleSetExtensionArgs(
                            name=extension.name,
                            publisher=extension.publisher,
                            type=extension.type,
                            type_handler_version=extension.type_handler_version,  # noqa: E501
                            settings={
                                "commandToExecute": extension.command_to_execute,  # noqa: E501
                            },
                        )
                        for extension in scale_set_spec.extensions
                    ]
                ),
            ),
            tags=env_spec.tags,
            opts=self.opts,
        )

        self.register_outputs(
            {
                "scale_set_name": self.scale_set.name,
            }
        )
