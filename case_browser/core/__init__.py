"""
Core domain layer: the table engine (search, filters, sorting, pagination,
selection, change notification) and its configuration types
"""

from .columns import ColumnDef
from .configs import TableConfig
from .engine import TableEngine, TableView, derive_view
from .filters import FilterDef, FilterOption
from .sorting import SortState
from .table_state import TableState

__all__ = [
    "ColumnDef",
    "FilterDef",
    "FilterOption",
    "SortState",
    "TableConfig",
    "TableEngine",
    "TableState",
    "TableView",
    "derive_view",
]
