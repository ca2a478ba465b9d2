from typing import Optional

import pulumi
import pytest

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"
MOCK_PASSWORD = "Mock-Passw0rd!"
# Marks a secret value in the property dicts the engine hands to mocks
SECRET_SIG_KEY = "4dabf18193072939515e22adb298388d"
SECRET_SIG_VALUE = "1b47061264138c4ac30d75fd1eb44270"


def unwrap_secrets(value):
    """Replace every `{sig: secret, value: v}` wrapper by `v`, recursively."""
    if isinstance(value, dict):
        if value.get(SECRET_SIG_KEY) == SECRET_SIG_VALUE:
            return unwrap_secrets(value.get("value"))
        return {key: unwrap_secrets(item) for key, item in value.items()}
    if isinstance(value, list):
        return [unwrap_secrets(item) for item in value]
    return value


class AzureMocks(pulumi.runtime.Mocks):
    """
    Records every registered resource and fills in the outputs Azure would
    compute (names, ARM ids, the public IP FQDN, generated passwords).
    """

    subscription_id = SUBSCRIPTION_ID

    def __init__(self):
        self.registered: list[pulumi.runtime.MockResourceArgs] = []

    def find(self, typ: str, name: str) -> Optional[pulumi.runtime.MockResourceArgs]:
        for args in self.registered:
            if args.typ == typ and args.name == name:
                return args
        return None

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        # A secret nested anywhere in an input marks the whole top-level
        # property, e.g. the admin password hides `virtualMachineProfile`.
        args.inputs = unwrap_secrets(args.inputs)
        self.registered.append(args)
        outputs = dict(args.inputs)
        outputs.setdefault("name", args.name)
        resource_group = args.inputs.get("resourceGroupName", args.name)
        group_id = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{resource_group}"

        if args.typ == "azure-native:resources:ResourceGroup":
            resource_id = group_id
        elif args.typ == "azure-native:network:ApplicationGateway":
            resource_id = (
                f"{group_id}/providers/Microsoft.Network/applicationGateways/"
                f"{args.inputs['applicationGatewayName']}"
            )
        elif args.typ == "azure-native:network:PublicIPAddress":
            resource_id = f"{group_id}/providers/Microsoft.Network/publicIPAddresses/{args.name}"  # noqa: E501
            label = args.inputs["dnsSettings"]["domainNameLabel"]
            outputs["dnsSettings"] = {
                "domainNameLabel": label,
                "fqdn": f"{label}.centralus.cloudapp.azure.com",
            }
        elif args.typ == "random:index/randomPassword:RandomPassword":
            resource_id = args.name
            outputs["result"] = MOCK_PASSWORD
        else:
            resource_id = f"{args.name}_id"
        return [resource_id, outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


_mocks = AzureMocks()
pulumi.runtime.set_mocks(
    _mocks, project="azure-py-vmss", stack="test", preview=False
)


@pytest.fixture
def mocks() -> AzureMocks:
    return _mocks


class StubConfig:
    """Stands in for `pulumi.Config` with plain string values."""

    def __init__(self, values: Optional[dict] = None):
        self.values = values or {}

    def get(self, key):
        return self.values.get(key)

    def get_int(self, key):
        value = self.values.get(key)
        return None if value is None else int(value)

    def get_secret(self, key):
        return self.values.get(key)


@pytest.fixture
def stub_config():
    return StubConfig
