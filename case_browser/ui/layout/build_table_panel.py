from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dash_table, html

from case_browser.ui.ids import IDs

_FONT = 'system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", sans-serif'


def build_table_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Span(id=IDs.Control.TABLE_TITLE, className="fw-semibold"),
                        dbc.Button(
                            "Select all",
                            id=IDs.Control.SELECT_ALL_BTN,
                            color="secondary",
                            outline=True,
                            size="sm",
                            className="ms-auto",
                        ),
                    ],
                    className="d-flex align-items-center",
                )
            ),
            dbc.CardBody(
                [
                    dash_table.DataTable(
                        id=IDs.Control.DATA_TABLE,
                        data=[],
                        columns=[],
                        row_selectable="multi",
                        selected_rows=[],
                        selected_row_ids=[],
                        sort_action="custom",
                        sort_mode="single",
                        sort_by=[],
                        page_action="none",
                        style_table={"overflowX": "auto"},
                        style_as_list_view=True,
                        style_cell={
                            "fontFamily": _FONT,
                            "fontSize": "12px",
                            "padding": "6px 8px",
                            "border": "none",
                            "textAlign": "left",
                            "minWidth": "80px",
                            "maxWidth": "260px",
                            "whiteSpace": "nowrap",
                            "textOverflow": "ellipsis",
                        },
                        style_header={
                            "fontFamily": _FONT,
                            "fontSize": "12px",
                            "fontWeight": "600",
                            "backgroundColor": "#f3f4f6",
                            "borderBottom": "1px solid #e5e7eb",
                        },
                        style_data={"borderBottom": "1px solid #e5e7eb"},
                    ),
                ]
            ),
            dbc.CardFooter(
                html.Div(
                    [
                        html.Span(id=IDs.Control.RESULT_LABEL, className="text-muted small"),
                        html.Div(
                            id=IDs.Control.PAGER_CONTAINER,
                            className="ms-auto d-flex align-items-center gap-1",
                            children=[
                                dbc.Button("‹", id=IDs.Control.PREV_PAGE_BTN, color="light", size="sm"),
                                html.Span(id=IDs.Control.PAGE_LABEL, className="px-2 small"),
                                dbc.Button("›", id=IDs.Control.NEXT_PAGE_BTN, color="light", size="sm"),
                            ],
                        ),
                        html.Div(
                            id=IDs.Control.LOAD_MORE_CONTAINER,
                            className="ms-auto",
                            style={"display": "none"},
                            children=[
                                dbc.Button("Load more", id=IDs.Control.LOAD_MORE_BTN, color="primary", size="sm"),
                            ],
                        ),
                    ],
                    className="d-flex align-items-center",
                )
            ),
        ],
        className="cb-table-card",
    )
