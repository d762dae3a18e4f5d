from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from case_browser.config.model import GlobalConfig, TableDefinition
from case_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def load_table_definitions(root: Path) -> List[TableDefinition]:
    """
    Parse every table definition under root/tables/.

    Files are read in name order. Unreadable or invalid files are logged and
    skipped so one broken page does not take the dashboard down.
    """
    tables_dir = root / "tables"
    definitions: List[TableDefinition] = []

    if not tables_dir.is_dir():
        logger.warning("Tables directory not found at: %s", tables_dir)
        return definitions

    for idx, config_file in enumerate(sorted(tables_dir.glob("*.json"))):
        # macOS 'Apple Double' files
        if config_file.name.startswith("._"):
            continue

        logger.info("Loading table definition: %s", config_file.name)
        try:
            with config_file.open(encoding="utf-8") as f:
                raw = json.load(f)
            definition = TableDefinition.from_raw(raw, source_path=config_file, index=idx)
            definition.to_table_config()
        except (OSError, json.JSONDecodeError, ConfigError) as e:
            logger.error("Failed to load %s: %s", config_file.name, e)
            continue
        definitions.append(definition)

    return definitions


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout.

    Expected structure:

        root/
            global.json
            tables/
                clients.json
                transactions.json
                ...

    - ui_title: title for UI, defaults to 'Case Browser'
    - default_table: key of the table shown first, defaults to the first table
    - tables: parsed TableDefinitions

    A missing global.json falls back to defaults.
    """
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raw_global = {}
    else:
        with global_path.open(encoding="utf-8") as f:
            raw_global = json.load(f)

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Case Browser"),
        default_table=raw_global.get("default_table"),
        tables=load_table_definitions(root),
    )


def load_table_registry(root: Path) -> Tuple[GlobalConfig, Dict[str, TableDefinition]]:
    """
    Load global config + table definitions keyed by table key.
    Duplicate keys keep the first definition.
    """
    global_config = load_global_config(root)

    by_key: Dict[str, TableDefinition] = {}
    for definition in global_config.tables:
        if definition.key in by_key:
            logger.warning("Duplicate table key ignored: %s", definition.key)
            continue
        by_key[definition.key] = definition

    return global_config, by_key
