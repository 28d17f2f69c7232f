"""Proxy-related data models.

This module contains Pydantic models for forwarded requests and
relayed responses.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import Field, field_validator

from .common import BaseModel


class HttpMethod(str, Enum):
    """HTTP method enumeration."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


BODYLESS_METHODS = frozenset({HttpMethod.GET.value, HttpMethod.HEAD.value})


class ProxyRequest(BaseModel):
    """An inbound request, reduced to what the forwarder relays.

    ``headers`` holds exactly one value per key; multi-valued inbound
    headers are collapsed to their first value before reaching this model.
    """

    method: HttpMethod = Field(..., description="HTTP method")
    path: str = Field(default="", description="Path below the /api prefix")
    query: str = Field(default="", description="Raw query string without the leading '?'")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: Optional[bytes] = Field(None, description="Request body")

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        """Accept lowercase method names."""
        return v.upper() if isinstance(v, str) else v

    @property
    def forwards_body(self) -> bool:
        """Whether the body travels with the outbound request."""
        return self.method not in BODYLESS_METHODS and bool(self.body)


class ProxyResponse(BaseModel):
    """A backend response captured for relaying."""

    status_code: int = Field(..., description="HTTP status code")
    headers: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="Response headers in backend order, repeated keys kept"
    )
    body: bytes = Field(default=b"", description="Raw response body")
    elapsed_time: float = Field(..., description="Request duration in seconds")
