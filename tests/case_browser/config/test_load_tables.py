import json
from pathlib import Path

import pytest

from case_browser.config.loader import load_global_config, load_table_definitions, load_table_registry
from case_browser.config.model import TableDefinition
from case_browser.core.exceptions import ConfigError
from case_browser.core.pagination import FIXED, INFINITE


def _table_entry(**overrides):
    entry = {
        "key": "clients",
        "title": "Clients",
        "id_field": "id",
        "data": "data/clients.json",
        "search_keys": ["name"],
        "columns": [
            {"id": "name", "header": "Name", "sortable": True},
            {"id": "balance", "header": "Balance", "format": "currency"},
        ],
        "filters": [
            {"id": "risk", "label": "Risk", "options": [{"value": "high", "label": "High"}]},
        ],
        "pagination": {"mode": "fixed", "page_size": 5},
    }
    entry.update(overrides)
    return entry


def _make_config_root(tmp_path: Path, tables: dict, global_json=None) -> Path:
    # root/
    #   global.json
    #   tables/
    #     <name>.json
    config_root = tmp_path / "config"
    tables_dir = config_root / "tables"
    tables_dir.mkdir(parents=True)
    if global_json is not None:
        (config_root / "global.json").write_text(json.dumps(global_json))
    for name, entry in tables.items():
        content = entry if isinstance(entry, str) else json.dumps(entry)
        (tables_dir / name).write_text(content)
    return config_root


def test_load_tables_from_config_dir(tmp_path):
    config_root = _make_config_root(
        tmp_path,
        {"clients.json": _table_entry()},
        global_json={"ui_title": "Test Browser", "default_table": "clients"},
    )

    global_config, tables = load_table_registry(config_root)

    assert global_config.ui_title == "Test Browser"
    assert global_config.default_table == "clients"
    assert list(tables) == ["clients"]

    definition = tables["clients"]
    assert definition.title == "Clients"
    assert definition.data_path == (config_root / "data" / "clients.json").resolve()

    cfg = definition.to_table_config()
    assert cfg.pagination_mode == FIXED
    assert cfg.page_size == 5
    assert cfg.sortable_fields() == ["name"]
    assert cfg.get_id({"id": 7.0}) == "7"
    assert cfg.columns[1].cell({"balance": 1234}) == "$1,234.00"
    assert cfg.columns[1].cell({"balance": None}) == ""


def test_missing_global_json_uses_defaults(tmp_path):
    config_root = _make_config_root(tmp_path, {"clients.json": _table_entry()})

    global_config = load_global_config(config_root)

    assert global_config.ui_title == "Case Browser"
    assert global_config.default_table is None
    assert len(global_config.tables) == 1


def test_invalid_and_hidden_files_are_skipped(tmp_path, caplog):
    config_root = _make_config_root(
        tmp_path,
        {
            "a_broken.json": "{not json",
            "b_bad_format.json": _table_entry(key="bad", columns=[{"id": "x", "format": "emoji"}]),
            "c_ok.json": _table_entry(key="ok"),
            "._c_ok.json": "garbage",
        },
    )

    definitions = load_table_definitions(config_root)

    assert [d.key for d in definitions] == ["ok"]
    assert "Failed to load a_broken.json" in caplog.text
    assert "unknown format 'emoji'" in caplog.text


def test_duplicate_keys_keep_the_first_definition(tmp_path):
    config_root = _make_config_root(
        tmp_path,
        {
            "a.json": _table_entry(title="First"),
            "b.json": _table_entry(title="Second"),
        },
    )

    _global, tables = load_table_registry(config_root)

    assert tables["clients"].title == "First"


def test_key_defaults_to_file_stem_and_infinite_pagination(tmp_path):
    entry = _table_entry(pagination={"mode": "infinite", "batch_size": 8})
    del entry["key"]
    config_root = _make_config_root(tmp_path, {"transactions.json": entry})

    (definition,) = load_table_definitions(config_root)

    assert definition.key == "transactions"
    assert definition.pagination_mode == INFINITE
    assert definition.batch_size == 8


def test_to_table_config_rejects_bad_pagination(tmp_path):
    source = tmp_path / "tables" / "x.json"

    bad_mode = TableDefinition.from_raw(_table_entry(pagination={"mode": "pages"}), source, 0)
    with pytest.raises(ConfigError, match="Unknown pagination mode"):
        bad_mode.to_table_config()

    bad_batch = TableDefinition.from_raw(_table_entry(pagination={"mode": "infinite", "batch_size": 0}), source, 0)
    with pytest.raises(ConfigError, match="batch_size"):
        bad_batch.to_table_config()


def test_missing_tables_dir_yields_no_definitions(tmp_path):
    assert load_table_definitions(tmp_path) == []
