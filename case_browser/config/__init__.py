"""
Config package for case_browser.

Responsible for:
- config models (GlobalConfig, TableDefinition)
- config I/O helpers (load_global_config / load_table_registry)
"""

from .model import GlobalConfig, TableDefinition
from .loader import load_global_config, load_table_definitions, load_table_registry

__all__ = [
    "GlobalConfig",
    "TableDefinition",
    "load_global_config",
    "load_table_definitions",
    "load_table_registry",
]
