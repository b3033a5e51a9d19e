# viewkit/cli/__init__.py
"""Command line interface: `viewkit render` and `viewkit list`."""
from .interface import main_cli_group

__all__ = ["main_cli_group"]
