# __main__.py
"""
Pulumi program for a Windows VM scale set running IIS behind an Azure
Application Gateway, configured from the stack settings.
"""

import modulepath_fixer  # noqa: F401

from pulumi import export

from modules.web_stack import DEFAULT_STACK_ID, provision_web_scale_set
from config import custom_tags, stack_settings

default_tags = {
    "environment": "dev",
    "created_by": "pulumi",
    "purpose": "web-scale-set",
}

web_stack = provision_web_scale_set(
    stack_settings,
    stack_id=DEFAULT_STACK_ID,
    tags={**default_tags, **custom_tags},
)

for output_name, value in web_stack.exports().items():
    export(output_name, value)
