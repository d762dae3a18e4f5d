from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from case_browser.config.model import GlobalConfig, TableDefinition
from case_browser.core.configs import TableConfig


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    tables: Dict[str, TableDefinition] = field(default_factory=dict)
    table_configs: Dict[str, TableConfig] = field(default_factory=dict)
    records: Dict[str, List[Any]] = field(default_factory=dict)
    default_table: Optional[str] = None

    def validate(self) -> None:
        """Ensure every table has a config and records before the app starts."""
        if not self.tables:
            raise RuntimeError("AppConfig.tables must not be empty.")
        for key in self.tables:
            if key not in self.table_configs:
                raise RuntimeError(f"AppConfig.table_configs is missing '{key}'.")
            if key not in self.records:
                raise RuntimeError(f"AppConfig.records is missing '{key}'.")
        if self.default_table not in self.tables:
            raise RuntimeError(f"Unknown default table '{self.default_table}'.")
