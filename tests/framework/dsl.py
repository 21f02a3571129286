"""
Fluent builders for test requests.

Tests describe requests in HTTP terms and turn them into restbinder
Request objects with build().
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from restbinder.models import HTTPMethod, Request


@dataclass
class HttpRequest:
    """Represents an HTTP request in business terms."""
    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, Union[str, List[str]]] = field(default_factory=dict)
    form_params: Dict[str, Union[str, List[str]]] = field(default_factory=dict)
    body: Optional[str] = None
    scheme: str = "http"
    host: Optional[str] = None

    def with_json_body(self, data: Any) -> 'HttpRequest':
        """Add JSON body to the request."""
        self.body = json.dumps(data)
        self.headers["Content-Type"] = "application/json"
        return self

    def with_text_body(self, text: str) -> 'HttpRequest':
        """Add raw text body to the request."""
        self.body = text
        return self

    def with_form(self, **fields: Union[str, List[str]]) -> 'HttpRequest':
        """Add form fields to the request."""
        self.form_params.update(fields)
        self.headers["Content-Type"] = "application/x-www-form-urlencoded"
        return self

    def with_query(self, **params: Union[str, List[str]]) -> 'HttpRequest':
        """Add query parameters to the request."""
        self.query_params.update(params)
        return self

    def with_header(self, name: str, value: str) -> 'HttpRequest':
        """Add a header to the request."""
        self.headers[name] = value
        return self

    def on_host(self, host: str, scheme: str = "http") -> 'HttpRequest':
        """Send the request to a specific host."""
        self.host = host
        self.scheme = scheme
        return self

    def build(self) -> Request:
        return Request(
            method=HTTPMethod(self.method),
            path=self.path,
            headers=dict(self.headers),
            body=self.body,
            query_params=dict(self.query_params),
            form_params=dict(self.form_params),
            scheme=self.scheme,
            host=self.host,
        )


def get(path: str) -> HttpRequest:
    """Create a GET request."""
    return HttpRequest(method="GET", path=path)


def post(path: str) -> HttpRequest:
    """Create a POST request."""
    return HttpRequest(method="POST", path=path)


def put(path: str) -> HttpRequest:
    """Create a PUT request."""
    return HttpRequest(method="PUT", path=path)


def delete(path: str) -> HttpRequest:
    """Create a DELETE request."""
    return HttpRequest(method="DELETE", path=path)
