"""Document fetching for Mainstay."""

from .http_client import FetchResponse, HttpClient

__all__ = ["FetchResponse", "HttpClient"]
