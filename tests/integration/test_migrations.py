"""Integration tests for the Alembic migration scripts."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from billing.models import Base

PROJECT_ROOT = Path(__file__).parent.parent.parent


def alembic_config(url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "billing" / "migrations"))
    config.set_main_option("sqlalchemy.url", url)
    return config


class TestMigrations:
    def test_upgrade_creates_model_tables(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'migrated.db'}"

        command.upgrade(alembic_config(url), "head")

        engine = create_engine(url)
        try:
            inspector = inspect(engine)
            tables = set(inspector.get_table_names())
            assert set(Base.metadata.tables) <= tables
            assert "alembic_version" in tables

            invoice_uniques = {
                tuple(c["column_names"]) for c in inspector.get_unique_constraints("invoices")
            }
            assert ("rental_id", "month", "year") in invoice_uniques

            for table_name, table in Base.metadata.tables.items():
                columns = {c["name"] for c in inspector.get_columns(table_name)}
                assert set(table.columns.keys()) == columns, table_name
        finally:
            engine.dispose()

    def test_downgrade_to_base(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'migrated.db'}"
        config = alembic_config(url)

        command.upgrade(config, "head")
        command.downgrade(config, "base")

        engine = create_engine(url)
        try:
            assert set(inspect(engine).get_table_names()) == {"alembic_version"}
        finally:
            engine.dispose()
