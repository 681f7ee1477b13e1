from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from siwes_logbook.common.logging_config import setup_logging
from siwes_logbook.config import get_settings_module
from siwes_logbook.database.bootstrap import SCHEMA_PATH, apply_schema, list_tables

logger = logging.getLogger("siwes_logbook.init_db")


def main() -> None:
    load_dotenv(override=False)
    setup_logging(logging.INFO)

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    logger.info(
        "Applied %s -> %s@%s:%s/%s (tables=%d)",
        SCHEMA_PATH.name,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
