"""
Configuration for the image recognition application.
"""
from .settings import RuntimeSettings, runtime_settings
from .stack_settings import StackSettings, stack_settings

__all__ = [
    "RuntimeSettings",
    "runtime_settings",
    "StackSettings",
    "stack_settings",
]
