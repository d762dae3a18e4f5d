from __future__ import annotations

from typing import Dict, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from case_browser.config.model import GlobalConfig, TableDefinition
from case_browser.ui.ids import IDs


def build_navbar(
    tables: Dict[str, TableDefinition],
    global_config: GlobalConfig,
    default_table: Optional[str],
) -> dbc.Navbar:
    title = getattr(global_config, "ui_title", "Case Browser")
    table_options = [{"label": t.title, "value": key} for key, t in tables.items()]

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(title, className="mb-0"),
                        html.Small("Clients, transactions and alerts", className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                html.Div(
                    [
                        html.Div("Active table", className="navbar-table-title"),
                        dcc.Dropdown(
                            id=IDs.Control.TABLE_SELECT,
                            options=table_options,
                            value=default_table,
                            clearable=False,
                            placeholder="Select table",
                            className="mt-1",
                        ),
                    ],
                    className="ms-auto",
                    style={"minWidth": "280px", "maxWidth": "380px", "marginRight": "24px"},
                ),
            ],
        ),
        dark=False,
        className="shadow-sm cb-navbar",
    )
