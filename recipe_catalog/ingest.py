"""One-shot import of the recipe dataset into the database."""

import json
import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, models
from .db import Database
from .normalize import (
    clean_nutrients,
    clean_text,
    first_number,
    to_float,
    to_int,
)

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100


def load_recipes(path):
    """Load recipes from a JSON file and return a list of dicts.

    The dataset maps arbitrary keys to recipe objects; only the values are
    kept. A plain JSON array of recipes is accepted too.

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        list: list of recipe dictionaries.

    Raises:
        OSError: If the file can't be read.
        ValueError: If the file isn't valid JSON or has another shape.
    """
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        return list(data.values())
    if isinstance(data, list):
        return data
    raise ValueError(
        f"Expected a JSON object or array in {p}, got {type(data).__name__}"
    )


def sanitize_recipe(raw) -> dict:
    """Map a raw dataset record to Recipe column values."""
    if not isinstance(raw, dict):
        raise TypeError(f"Recipe record must be an object, got {type(raw).__name__}")

    nutrients = clean_nutrients(raw.get("nutrients"))
    return {
        "cuisine": clean_text(raw.get("cuisine")),
        "title": clean_text(raw.get("title")),
        "rating": to_float(raw.get("rating")),
        "prep_time": to_int(raw.get("prep_time")),
        "cook_time": to_int(raw.get("cook_time")),
        "total_time": to_int(raw.get("total_time")),
        "description": clean_text(raw.get("description")),
        "nutrients": nutrients,
        "serves": clean_text(raw.get("serves")),
        "calories": first_number(nutrients.get("calories")) if nutrients else None,
    }


def insert_recipes(db: Session, records) -> int:
    """Insert records one by one; a bad record is logged and skipped."""
    inserted = 0
    for record in records:
        title = record.get("title") if isinstance(record, dict) else None
        try:
            values = sanitize_recipe(record)
            with db.begin_nested():
                db.add(models.Recipe(**values))
        # driver bind errors (e.g. OverflowError) aren't wrapped by SQLAlchemy
        except (SQLAlchemyError, TypeError, ValueError, OverflowError) as e:
            logger.error("Error inserting recipe: %s (%s)", title, e)
            continue

        inserted += 1
        if inserted % PROGRESS_EVERY == 0:
            logger.info("Inserted %d recipes...", inserted)
    return inserted


def ingest_file(database: Database, path) -> int:
    """Populate an empty recipes table from the JSON file at path.

    Does nothing when the table already has rows. File and database errors
    are logged, never raised, so the server can start regardless.

    Returns:
        int: number of recipes inserted.
    """
    p = Path(path)
    if not p.exists():
        logger.warning("%s not found. Add the JSON file to load recipe data.", p)
        return 0

    try:
        with database.session() as db:
            if crud.count_recipes(db) > 0:
                logger.info("Recipes already exist in database")
                return 0

            try:
                records = load_recipes(p)
            except (OSError, ValueError):
                logger.exception("Error reading recipes from %s", p)
                return 0

            logger.info("Inserting recipes into database...")
            inserted = insert_recipes(db, records)
    except SQLAlchemyError:
        logger.exception("Error inserting recipes from %s", p)
        return 0
    except Exception:
        # startup must not depend on the dataset
        logger.exception("Unexpected error ingesting recipes from %s", p)
        return 0

    logger.info("Successfully inserted %d recipes", inserted)
    return inserted
