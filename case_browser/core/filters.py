from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Tuple

from case_browser.core.paths import resolve, stringify

# filter id (dotted path) -> selected option values
ActiveFilters = Dict[str, FrozenSet[str]]


@dataclass(frozen=True)
class FilterOption:
    value: str
    label: str


@dataclass(frozen=True)
class FilterDef:
    """
    A multi-select categorical filter ("facet").

    Fields:

    - id: dotted path of the record field the filter applies to
    - label: human-readable group name ("Status")
    - options: selectable values with their display labels
    """
    id: str
    label: str
    options: Tuple[FilterOption, ...] = field(default_factory=tuple)

    def option_label(self, value: str) -> str:
        for option in self.options:
            if option.value == value:
                return option.label
        return value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterDef:
        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            options=tuple(
                FilterOption(value=str(o["value"]), label=str(o.get("label", o["value"])))
                for o in data.get("options", [])
            ),
        )


@dataclass(frozen=True)
class ActiveFilterSummary:
    """One filter group with its selected values, ready for chips / pills."""
    filter_id: str
    filter_label: str
    values: Tuple[Tuple[str, str], ...]  # (value, label)


def normalise_filters(raw: Mapping[str, Iterable[Any]] | None) -> ActiveFilters:
    """Accept any mapping of id -> iterable of values and freeze it."""
    if not raw:
        return {}
    return {str(k): frozenset(str(v) for v in values) for k, values in raw.items()}


def matches_filters(record: Any, active_filters: Mapping[str, FrozenSet[str]]) -> bool:
    """
    AND across filter groups, OR within a group's selected values.

    Groups with no selected values impose no constraint.
    """
    for filter_id, values in active_filters.items():
        if not values:
            continue
        if stringify(resolve(record, filter_id)) not in values:
            return False
    return True


# ---------------------------------------------------------------------------
# Pure state transitions
# ---------------------------------------------------------------------------
def toggle_filter_value(filters: ActiveFilters, filter_id: str, value: str) -> ActiveFilters:
    current = filters.get(filter_id, frozenset())
    updated = current - {value} if value in current else current | {value}
    return {**filters, filter_id: updated}


def remove_filter_value(filters: ActiveFilters, filter_id: str, value: str) -> ActiveFilters:
    current = filters.get(filter_id, frozenset())
    return {**filters, filter_id: current - {value}}


def clear_filter_group(filters: ActiveFilters, filter_id: str) -> ActiveFilters:
    return {**filters, filter_id: frozenset()}


def clean_filters(filters: ActiveFilters) -> ActiveFilters:
    """Only non-empty groups; this is what change listeners receive."""
    return {k: v for k, v in filters.items() if v}


# ---------------------------------------------------------------------------
# Derived helpers for filter widgets
# ---------------------------------------------------------------------------
def active_filter_count(filters: ActiveFilters) -> int:
    return sum(len(values) for values in filters.values())


def active_filter_summary(
    filter_defs: Iterable[FilterDef],
    filters: ActiveFilters,
) -> List[ActiveFilterSummary]:
    """
    Resolve selected values to their option labels, in definition order.
    Values missing from the definition keep the raw value as label.
    """
    summary: List[ActiveFilterSummary] = []
    for fdef in filter_defs:
        selected = filters.get(fdef.id)
        if not selected:
            continue
        # definition order first, unknown values after (sorted for stability)
        known = [o.value for o in fdef.options if o.value in selected]
        unknown = sorted(selected - set(known))
        summary.append(
            ActiveFilterSummary(
                filter_id=fdef.id,
                filter_label=fdef.label,
                values=tuple((v, fdef.option_label(v)) for v in known + unknown),
            )
        )
    return summary


def drawer_filters(filter_defs: Iterable[FilterDef]) -> List[FilterDef]:
    """Filters worth showing in a filter panel: those with at least one option."""
    return [f for f in filter_defs if f.options]
