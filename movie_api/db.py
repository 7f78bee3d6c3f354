"""
This module handles the connection to the MongoDB database.
It reads the connection settings from the environment (or a .env file),
builds the shared MongoClient and resolves the movies collection.
movie_api.db.py
"""
import os
from dotenv import load_dotenv
from pymongo import MongoClient

load_dotenv()

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/")
DB_NAME = os.getenv("DB_NAME", "moviesdb")
MOVIE_COLLECTION = os.getenv("MOVIE_COLLECTION_NAME", "movies")

SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "30000"))
LOOKUP_TIMEOUT_MS = int(os.getenv("MOVIE_LOOKUP_TIMEOUT_MS", "30000"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def create_client(uri: str = MONGO_URI) -> MongoClient:
    # Connects lazily; the first operation performs server selection.
    return MongoClient(uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)

def get_movie_collection(client: MongoClient):
    return client[DB_NAME][MOVIE_COLLECTION]
