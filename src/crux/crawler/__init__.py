"""
HTTP fetching of source documents.
"""

from .document_source import DocumentSource
from .http_client import FetchResponse, HttpClient

__all__ = ["DocumentSource", "FetchResponse", "HttpClient"]
