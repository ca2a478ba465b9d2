# __main__.py
"""
Pulumi program for the same web scale set topology with every value fixed:
CentralUS, 10.0.0.0/16, two Standard_B1s instances in zones 1 and 2, HTTP on
port 80.
"""

import modulepath_fixer  # noqa: F401

from pulumi import export

from modules.web_stack import DEFAULT_STACK_ID, provision_web_scale_set
from utils.module_dataclasses import StackSettings

web_stack = provision_web_scale_set(
    StackSettings(),
    stack_id=DEFAULT_STACK_ID,
    tags={"created_by": "pulumi", "purpose": "web-scale-set"},
)

export("public_url", web_stack.public_url)
export("admin_password", web_stack.scale_set.admin_password)
