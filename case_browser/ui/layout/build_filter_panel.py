from __future__ import annotations

from typing import List, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from case_browser.core.filters import FilterDef, drawer_filters
from case_browser.ui.ids import IDs, filter_select_id


def build_filter_controls(filters: Sequence[FilterDef]) -> List[html.Div]:
    """One multi-select dropdown per filter group; groups without options are skipped."""
    return [
        html.Div(
            [
                html.Label(fdef.label, className="form-label"),
                dcc.Dropdown(
                    id=filter_select_id(fdef.id),
                    options=[{"label": o.label, "value": o.value} for o in fdef.options],
                    multi=True,
                    placeholder=f"All {fdef.label.lower()}",
                    className="mb-3",
                ),
            ]
        )
        for fdef in drawer_filters(filters)
    ]


def build_filter_panel(filters: Sequence[FilterDef]) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("Search", className="form-label"),
                    dbc.InputGroup(
                        [
                            dbc.Input(
                                id=IDs.Control.SEARCH_INPUT,
                                type="text",
                                placeholder="Search...",
                                debounce=True,
                            ),
                            dbc.Button(
                                "×",
                                id=IDs.Control.CLEAR_SEARCH_BTN,
                                color="light",
                                title="Clear search",
                            ),
                        ],
                        className="mb-3",
                    ),
                    html.Div(id=IDs.Control.FILTER_CONTAINER, children=build_filter_controls(filters)),
                    html.Div(id=IDs.Control.FILTER_SUMMARY, className="mb-2"),
                    dbc.Button(
                        "Clear all",
                        id=IDs.Control.CLEAR_ALL_BTN,
                        color="link",
                        size="sm",
                        className="p-0",
                    ),
                    html.Hr(),
                    dbc.Switch(
                        id=IDs.Control.COMPACT_SWITCH,
                        label="Compact columns",
                        value=False,
                    ),
                ]
            ),
        ],
        className="cb-sidebar",
    )
