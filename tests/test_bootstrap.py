from __future__ import annotations

from pathlib import Path

from config import get_settings_module
from src.event_checkin.event_checkin.database.bootstrap import iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_schema_file_yields_only_the_table_statement():
    statements = list(iter_sql_statements(SCHEMA.read_text(encoding="utf-8")))

    assert len(statements) == 1
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS attendees")
    assert "checked_in_at   DATETIME(6)  NULL" in statements[0]


def test_semicolons_inside_quotes_do_not_split():
    sql = """
    -- comment; with a semicolon
    INSERT INTO t VALUES ('a;b', "c;d");
    INSERT INTO t VALUES ('it\\'s');
    """

    assert list(iter_sql_statements(sql)) == [
        """INSERT INTO t VALUES ('a;b', "c;d")""",
        "INSERT INTO t VALUES ('it\\'s')",
    ]


def test_settings_module_selection(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")
    assert get_settings_module() == "config.production"
    monkeypatch.setenv("APP_ENV", "test")
    assert get_settings_module() == "config.testing"
    monkeypatch.delenv("APP_ENV")
    assert get_settings_module() == "config.development"
