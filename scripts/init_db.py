# scripts/init_db.py
"""
Reset the configured database to an empty schema.

    python -m scripts.init_db

Every table, its rows included, is dropped and created again.
"""

import logging

from invoice_api.db.engine import get_engine
from invoice_api.db.schema import metadata

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)


def reset_schema() -> None:
    engine = get_engine()
    logger.info("Resetting schema on %s", engine.url)
    metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info("Created tables: %s", ", ".join(t.name for t in metadata.sorted_tables))


if __name__ == "__main__":
    reset_schema()
