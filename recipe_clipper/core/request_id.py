"""Request ID generation and management."""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

# Request ID of the request currently being handled ("" outside a request)
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client-supplied IDs are only honoured when they look like an ID
_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9._-]{8,64}$")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return uuid.uuid4().hex


def resolve_request_id(header_value: Optional[str]) -> str:
    """Reuse a well-formed ``X-Request-ID`` header, else generate a new ID."""
    if header_value and _CLIENT_ID_RE.match(header_value):
        return header_value
    return generate_request_id()


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set request ID in context."""
    request_id_var.set(request_id)
