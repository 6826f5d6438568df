"""Schema migrations for the catalog, applied on adapter startup."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def upgrade_head(*, engine: Engine) -> None:
    """Upgrade the database behind ``engine`` to the latest revision.

    The bundled scripts are used whether or not the project runs from a checkout;
    ``[tool.alembic]`` in pyproject.toml only serves the ``alembic`` command line.
    """

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
