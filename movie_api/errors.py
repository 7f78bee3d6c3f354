"""
This module defines the errors raised by the movie store and handlers.
Every error is reported to the caller as a JSON body carrying a
`message` field; none of them terminates the server.
movie_api.errors.py
"""


class MovieAPIError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class BadRequest(MovieAPIError):
    """Request body could not be parsed as movie fields."""


class InvalidId(MovieAPIError):
    """Identifier is not a well-formed ObjectId."""

    def __init__(self, value):
        super().__init__(f"'{value}' is not a valid movie id")


class NotFound(MovieAPIError):
    """No movie matches the id. Raised only by single-movie reads."""

    def __init__(self, movie_id: str):
        super().__init__(f"Movie {movie_id} not found")


class StoreError(MovieAPIError):
    """The database failed to run the query or write."""
