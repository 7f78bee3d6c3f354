"""
This module  is the main entry point for the FastAPI application.
It builds the FastAPI app and defines the API endpoints for movie management:
listing, fetching, creating, updating and deleting movies, and searching
movies by exact name. The Mongo client is opened once at startup and closed
at shutdown; handlers get the store through dependency injection.
Errors are returned as JSON bodies carrying a `message` field.
movie_api.main.py
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_api.db import HOST, LOG_LEVEL, PORT, create_client, get_movie_collection
from movie_api.errors import BadRequest, MovieAPIError, StoreError
from movie_api.movie_service import Movie, MovieFields, MovieStore

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logging.getLogger("pymongo").setLevel(logging.WARNING)

router = APIRouter()


def get_movie_store(request: Request) -> MovieStore:
    return request.app.state.movie_store

@router.get("/", response_class=PlainTextResponse)
def home():
    return "Movies Home Page"

@router.get("/movies", response_model=List[Movie])
def list_movies(store: MovieStore = Depends(get_movie_store)):
    logger.info("list_movies endpoint")
    return store.list_all()

@router.get("/movie/{movie_id}", response_model=Movie)
def get_movie(movie_id: str, store: MovieStore = Depends(get_movie_store)):
    logger.info("get_movie endpoint")
    return store.get_by_id(movie_id)

@router.post("/movie")
def create_movie(movie: MovieFields, store: MovieStore = Depends(get_movie_store)):
    logger.info("create_movie endpoint")
    return store.create(movie)

@router.delete("/movie/{movie_id}")
def delete_movie(movie_id: str, store: MovieStore = Depends(get_movie_store)):
    logger.info("delete_movie endpoint")
    deleted = store.delete_by_id(movie_id)
    return {"message": "Movie deleted", "deleted_count": deleted}

@router.patch("/movie/{movie_id}")
def update_movie(movie_id: str, movie: MovieFields, store: MovieStore = Depends(get_movie_store)):
    logger.info("update_movie endpoint")
    return store.update_fields(movie_id, movie)

@router.get("/search/movie-name/{name:path}", response_model=List[Movie])
def search_movie_name(name: str, store: MovieStore = Depends(get_movie_store)):
    logger.info("search_movie_name endpoint")
    return store.find_by_name(name)


def error_body(message: str, kind: str) -> dict:
    return {"message": message, "error": kind}

async def handle_movie_error(request: Request, exc: MovieAPIError):
    level = logging.ERROR if isinstance(exc, StoreError) else logging.WARNING
    logger.log(level, "%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.kind))

async def handle_validation_error(request: Request, exc: RequestValidationError):
    message = "; ".join(err.get("msg", "") for err in exc.errors()) or "Malformed request body"
    return await handle_movie_error(request, BadRequest(message))

async def handle_http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), "HTTPError"),
        headers=getattr(exc, "headers", None),
    )

async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(str(exc), "InternalError"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = None
    if getattr(app.state, "movie_store", None) is None:
        client = create_client()
        app.state.movie_store = MovieStore(get_movie_collection(client))
    logger.info("Application started successfully")
    try:
        yield
    finally:
        if client is not None:
            client.close()
            # A later startup on the same app must open a fresh client.
            app.state.movie_store = None
        logger.info("Application shut down")


def create_app(store: Optional[MovieStore] = None) -> FastAPI:
    app = FastAPI(title="Movies API", lifespan=lifespan)
    if store is not None:
        app.state.movie_store = store
    app.include_router(router)
    app.add_exception_handler(MovieAPIError, handle_movie_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    return app

app = create_app()

def run():
    import uvicorn
    uvicorn.run("movie_api.main:app", host=HOST, port=PORT)

if __name__ == "__main__":
    run()
