from unittest.mock import MagicMock, patch

from sqlalchemy import inspect

import obrador.db as db_module
from obrador.settings import settings


class TestGetEngine:
    def test_creates_engine(self, monkeypatch):
        monkeypatch.setattr(db_module, "_engine", None)
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = "sqlite:///:memory:"
            engine = db_module.get_engine()
            assert engine is not None
            assert db_module._engine is engine

    def test_sqlite_enforces_foreign_keys(self, monkeypatch):
        monkeypatch.setattr(db_module, "_engine", None)
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = "sqlite:///:memory:"
            engine = db_module.get_engine()
        with engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1

    def test_returns_cached_engine(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_engine", sentinel)
        assert db_module.get_engine() is sentinel


class TestGetConnection:
    def test_creates_connection(self, monkeypatch):
        monkeypatch.setattr(db_module, "_connection", None)
        mock_engine = MagicMock()
        mock_conn = MagicMock()
        mock_engine.connect.return_value = mock_conn
        with patch.object(db_module, "get_engine", return_value=mock_engine):
            assert db_module.get_connection() is mock_conn

    def test_returns_cached_connection(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_connection", sentinel)
        assert db_module.get_connection() is sentinel


class TestAlembicConfig:
    def test_points_at_project_scripts(self):
        cfg = db_module._get_alembic_config()
        assert cfg.get_main_option("script_location").endswith("alembic")


class TestInitializeDb:
    @patch("obrador.db.reconfigure")
    @patch("obrador.db.command")
    @patch("obrador.db._get_alembic_config")
    def test_calls_alembic_upgrade(self, mock_config, mock_command, mock_reconfigure):
        mock_cfg = MagicMock()
        mock_config.return_value = mock_cfg
        db_module.initialize_db()
        mock_command.upgrade.assert_called_once_with(mock_cfg, "head")
        mock_reconfigure.assert_called_once()

    @patch("obrador.db.reconfigure")
    def test_migrations_create_schema(self, mock_reconfigure, monkeypatch, tmp_path):
        from sqlalchemy import create_engine

        url = f"sqlite:///{tmp_path / 'obrador.db'}"
        monkeypatch.setattr(settings, "db_url", url)

        db_module.initialize_db()

        tables = set(inspect(create_engine(url)).get_table_names())
        assert {
            "services",
            "clients",
            "budgets",
            "budget_items",
            "invoices",
            "invoice_items",
            "email_history",
        } <= tables
