from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from case_browser.ui.ids import IDs
from case_browser.ui.layout.build_filter_panel import build_filter_panel
from case_browser.ui.layout.build_navbar import build_navbar
from case_browser.ui.layout.build_table_panel import build_table_panel

if TYPE_CHECKING:
    from case_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    default_config = ctx.table_configs[ctx.default_table]

    return dbc.Container(
        fluid=True,
        className="cb-root",
        children=[
            build_navbar(ctx.tables, ctx.global_config, ctx.default_table),

            # Table state lives for the browser tab only; the engine keeps no persistence
            dcc.Store(id=IDs.Store.TABLE_STATE, storage_type="memory"),

            dbc.Row(
                [
                    dbc.Col(build_filter_panel(default_config.filters), md=3, className="mt-3"),
                    dbc.Col(build_table_panel(), md=9, className="mt-3"),
                ],
                className="gx-3",
            ),
        ],
    )
