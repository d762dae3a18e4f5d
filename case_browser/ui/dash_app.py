from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from case_browser.config.loader import load_table_registry
from case_browser.config.model import TableDefinition
from case_browser.core.configs import TableConfig
from case_browser.core.exceptions import CaseBrowserError
from case_browser.services.record_source import load_records
from case_browser.ui.callbacks.callbacks_table import register_table_callbacks
from case_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def build_app_config(config_root: Path | str = Path("config")) -> AppConfig:
    """Load table definitions and their records into a validated AppConfig."""
    config_root = Path(config_root)

    # 1) Load Config
    global_config, definitions = load_table_registry(config_root)
    if not definitions:
        raise RuntimeError("No table configs were loaded from config")

    # 2) Records + engine configs; a table whose data cannot be read is dropped
    tables: Dict[str, TableDefinition] = {}
    table_configs: Dict[str, TableConfig] = {}
    records: Dict[str, List[Any]] = {}
    for key, definition in definitions.items():
        if definition.data_path is None:
            logger.error("Table '%s' has no data file configured, skipping", key)
            continue
        try:
            records[key] = load_records(definition.data_path)
        except (OSError, ValueError, CaseBrowserError) as e:
            logger.error("Failed to load records for table '%s': %s", key, e)
            continue
        tables[key] = definition
        table_configs[key] = definition.to_table_config()

    # 3) Choose Default Table
    default_table = global_config.default_table
    if default_table not in tables:
        if default_table:
            logger.warning("Default table '%s' not available, using first table", default_table)
        default_table = next(iter(tables), None)

    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        tables=tables,
        table_configs=table_configs,
        records=records,
        default_table=default_table,
    )
    ctx.validate()
    return ctx


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    ctx = build_app_config(config_root)

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        suppress_callback_exceptions=True,
    )
    app.title = getattr(ctx.global_config, "ui_title", "Case Browser")
    app.layout = build_layout(ctx)

    register_table_callbacks(app, ctx)

    logger.info("Dash app created", extra={"tables": list(ctx.tables), "default_table": ctx.default_table})
    return app
