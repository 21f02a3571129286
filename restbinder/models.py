"""
Core data models for restbinder.

Request and Response are transport-neutral: whatever serves HTTP converts its
own objects to a Request and writes a Response back out.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

QueryValue = Union[str, List[str]]


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class Request:
    """Represents an HTTP request."""

    method: HTTPMethod
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Union[str, bytes]] = None
    query_params: Dict[str, QueryValue] = field(default_factory=dict)
    form_params: Dict[str, QueryValue] = field(default_factory=dict)
    scheme: str = "http"
    host: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.method, HTTPMethod):
            self.method = HTTPMethod(str(self.method).upper())

    def get_header(self, name: str) -> Optional[str]:
        """Get a header value, matching the name case-insensitively."""
        if name in self.headers:
            return self.headers[name]
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def has_header(self, name: str) -> bool:
        return self.get_header(name) is not None

    def get_content_type(self) -> Optional[str]:
        """Get the Content-Type header."""
        return self.get_header("Content-Type")

    def get_text_body(self) -> Optional[str]:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def get_json_body(self) -> Any:
        """Parse the body as JSON.

        Returns:
            The decoded document, or None if the body is empty or not valid JSON
        """
        try:
            text = self.get_text_body()
            if not text:
                return None
            return json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None


@dataclass
class Response:
    """Represents an HTTP response."""

    status_code: int
    body: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    content_type: Optional[str] = None

    def __post_init__(self):
        if self.headers is None:
            self.headers = {}

        # Set content type
        if self.content_type:
            self.headers["Content-Type"] = self.content_type

        # Do not include Content-Length for 204 responses
        if self.status_code != 204:
            body_bytes = self.body.encode("utf-8") if self.body else b""
            self.headers["Content-Length"] = str(len(body_bytes))

    def json(self) -> Any:
        """Decode the body as JSON."""
        if not self.body:
            return None
        return json.loads(self.body)
