import pulumi

from utils.module_dataclasses import StackSettings
from utils.utils import load_stack_settings

config = pulumi.Config()

# Every key falls back to the StackSettings default when unset
stack_settings: StackSettings = load_stack_settings(config)

# Merged over the default tags in __main__.py
custom_tags: dict = config.get_object("tags") or {}
