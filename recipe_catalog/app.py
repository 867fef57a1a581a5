import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, schemas
from .config import Settings, get_settings
from .db import Database
from .filters import SearchFilters, paginate
from .ingest import ingest_file

logger = logging.getLogger(__name__)

router = APIRouter()


def internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _pagination(request: Request, page, limit):
    settings = request.app.state.settings
    return paginate(page, limit, settings.default_limit, settings.max_limit)


@router.get("/health", response_model=schemas.Health)
def health():
    return {"status": "OK", "message": "Server is running"}


# page/limit and filters are taken as raw strings: malformed values fall
# back to defaults or are ignored instead of producing a 422
@router.get("/api/recipes", response_model=schemas.RecipePage)
def list_recipes(
    request: Request,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
):
    pagination = _pagination(request, page, limit)
    try:
        return crud.list_recipes(db, pagination)
    except SQLAlchemyError:
        logger.exception("Error fetching recipes")
        return internal_error()


@router.get("/api/recipes/search", response_model=schemas.RecipePage)
def search_recipes(
    request: Request,
    title: Optional[str] = None,
    cuisine: Optional[str] = None,
    rating: Optional[str] = None,
    total_time: Optional[str] = None,
    calories: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
):
    filters = SearchFilters(
        title=title,
        cuisine=cuisine,
        rating=rating,
        total_time=total_time,
        calories=calories,
    )
    pagination = _pagination(request, page, limit)
    try:
        return crud.search_recipes(db, filters, pagination)
    except SQLAlchemyError:
        logger.exception("Error searching recipes")
        return internal_error()


async def unhandled_exception(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return internal_error()


def create_app(settings: Optional[Settings] = None,
               database: Optional[Database] = None) -> FastAPI:
    """Build the application.

    When ``database`` is given the caller owns it and it is not disposed on
    shutdown; otherwise a pooled database is created from settings at
    startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database.from_settings(settings)
        try:
            db.check_connection()
        except SQLAlchemyError:
            logger.exception("Could not connect to the database")
            if database is None:
                db.dispose()
            raise

        try:
            db.create_schema()
        except SQLAlchemyError:
            logger.exception("Error initializing database")

        ingest_file(db, settings.data_file)

        app.state.database = db
        logger.info("Server is ready")
        yield

        if database is None:
            db.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Recipe Catalog",
        description="Paginated listing and filtered search over a recipe dataset",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Allow CORS for the browser client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unhandled_exception)
    app.include_router(router)
    return app
