"""This module serves as a service layer for the movie database, providing
a store that can create, read, update and delete movie documents
in the movies collection. It also supports exact-match search on the name.
The store wraps a single pymongo collection handle which is built once at
startup and passed in, so it can be swapped out in tests.
movie_api.movie_service.py
"""
import functools
import logging
from bson import ObjectId
from bson.errors import InvalidId as BsonInvalidId
from pydantic import BaseModel, ValidationError
from pymongo.errors import PyMongoError
from typing import List, Optional

from movie_api.db import LOOKUP_TIMEOUT_MS
from movie_api.errors import InvalidId, NotFound, StoreError

logger = logging.getLogger(__name__)

SETTABLE_FIELDS = ("name", "description", "cover_image")


class Movie(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    cover_image: str = ""

    @classmethod
    def from_document(cls, doc: dict) -> "Movie":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name") or "",
            description=doc.get("description") or "",
            cover_image=doc.get("cover_image") or "",
        )

class MovieFields(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None

    def settable(self) -> dict:
        # Omitted fields are written as empty strings, never left unchanged.
        return {field: getattr(self, field) or "" for field in SETTABLE_FIELDS}


def parse_id(value) -> ObjectId:
    # ObjectId(None) would mint a fresh id instead of failing.
    if not isinstance(value, str):
        raise InvalidId(value)
    try:
        return ObjectId(value)
    except (BsonInvalidId, TypeError):
        raise InvalidId(value) from None

def translate_store_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
    return wrapper


class MovieStore:
    def __init__(self, collection, lookup_timeout_ms: int = LOOKUP_TIMEOUT_MS):
        self.collection = collection
        self.lookup_timeout_ms = lookup_timeout_ms

    @translate_store_errors
    def list_all(self) -> List[Movie]:
        return self._decode_all(self.collection.find({}))

    @translate_store_errors
    def get_by_id(self, movie_id: str) -> Movie:
        oid = parse_id(movie_id)
        doc = self.collection.find_one({"_id": oid}, max_time_ms=self.lookup_timeout_ms)
        if not doc:
            raise NotFound(movie_id)
        try:
            return Movie.from_document(doc)
        except ValidationError as e:
            raise StoreError(f"Movie {movie_id} could not be decoded: {e}") from e

    @translate_store_errors
    def create(self, fields: MovieFields) -> dict:
        doc = {"_id": parse_id(fields.id) if fields.id else ObjectId()}
        doc.update(fields.settable())
        result = self.collection.insert_one(doc)
        logger.debug("Inserted movie %s", result.inserted_id)
        return {"inserted_id": str(result.inserted_id), "acknowledged": result.acknowledged}

    @translate_store_errors
    def delete_by_id(self, movie_id: str) -> int:
        result = self.collection.delete_one({"_id": parse_id(movie_id)})
        return result.deleted_count

    @translate_store_errors
    def update_fields(self, movie_id: str, fields: MovieFields) -> dict:
        # Any id in the body is ignored; only the three settable fields are written.
        result = self.collection.update_one(
            {"_id": parse_id(movie_id)}, {"$set": fields.settable()}
        )
        return {"matched_count": result.matched_count, "modified_count": result.modified_count}

    @translate_store_errors
    def find_by_name(self, name: str) -> List[Movie]:
        return self._decode_all(self.collection.find({"name": {"$eq": name}}))

    def _decode_all(self, cursor) -> List[Movie]:
        # Undecodable documents are logged and left out of the listing.
        movies = []
        for doc in cursor:
            try:
                movies.append(Movie.from_document(doc))
            except ValidationError as e:
                logger.warning("Skipping movie %s: %s", doc.get("_id"), e)
        return movies
