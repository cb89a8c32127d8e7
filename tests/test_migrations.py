"""The Alembic revision builds the same schema as the ORM models."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from farmer_social.db.session import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(db_url: str) -> Config:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", db_url)
    config.attributes["configure_logger"] = False
    return config


def _table_names(db_url: str) -> set[str]:
    engine = create_engine(db_url)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_upgrade_and_downgrade(tmp_path) -> None:
    db_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = _alembic_config(db_url)

    command.upgrade(config, "head")
    assert _table_names(db_url) == set(Base.metadata.tables) | {"alembic_version"}

    command.downgrade(config, "base")
    assert _table_names(db_url) == {"alembic_version"}
