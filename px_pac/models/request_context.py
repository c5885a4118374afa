"""
Request context passed to the resolver for each outbound request.
"""

import uuid
from dataclasses import dataclass, field


def _new_correlation_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class RequestContext:
    """
    Identifies one request being resolved.

    Attributes:
        url: Absolute URL of the outbound request
        method: HTTP method, only used for the decision trace
        correlation_id: Opaque id tying log lines and events to the request
    """
    url: str
    method: str = "GET"
    correlation_id: str = field(default_factory=_new_correlation_id)

    def __post_init__(self):
        if not self.url:
            raise ValueError("Request URL cannot be empty")
