"""cmdframe library modules.

Configuration loading for the command shell.
"""

__all__ = [
    "config_parser",
]
