from sqlalchemy import func
from sqlalchemy.orm import Session

from . import models
from .filters import Pagination, SearchFilters, build_predicate

# Highest rated first; id breaks ties so pages never overlap
ORDERING = (
    models.Recipe.rating.desc().nulls_last(),
    models.Recipe.id.asc(),
)


def count_recipes(db: Session, clauses=()):
    return db.query(func.count(models.Recipe.id)).filter(*clauses).scalar()


def get_recipes(db: Session, skip: int = 0, limit: int = 10, clauses=()):
    return (
        db.query(models.Recipe)
        .filter(*clauses)
        .order_by(*ORDERING)
        .offset(skip)
        .limit(limit)
        .all()
    )


def _page(db: Session, pagination: Pagination, clauses) -> dict:
    return {
        "page": pagination.page,
        "limit": pagination.limit,
        "total": count_recipes(db, clauses),
        "data": get_recipes(
            db, skip=pagination.offset, limit=pagination.limit, clauses=clauses
        ),
    }


def list_recipes(db: Session, pagination: Pagination) -> dict:
    return _page(db, pagination, ())


def search_recipes(db: Session, filters: SearchFilters,
                   pagination: Pagination) -> dict:
    # count and data share the same clauses
    return _page(db, pagination, build_predicate(filters))
