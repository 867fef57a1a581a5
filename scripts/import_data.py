import logging
import sys

from recipe_catalog.config import get_settings
from recipe_catalog.db import Database
from recipe_catalog.ingest import ingest_file


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = get_settings()
    path = sys.argv[1] if len(sys.argv) > 1 else settings.data_file

    database = Database.from_settings(settings)
    try:
        database.create_schema()
        added = ingest_file(database, path)
    finally:
        database.dispose()
    print(f'Imported {added} recipes')


if __name__ == '__main__':
    main()
