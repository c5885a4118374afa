"""
Proxy directive model: the parsed decision of a PAC script.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class DirectiveKind(Enum):
    """How a request should leave the machine."""
    DIRECT = "DIRECT"
    PROXY = "PROXY"


@dataclass(frozen=True)
class ProxyDirective:
    """
    Represents the decision taken for one request.

    Attributes:
        kind: DIRECT or PROXY
        host: Upstream proxy host (None for DIRECT), without IPv6 brackets
        port: Upstream proxy port (None for DIRECT)
        warnings: Non-fatal problems noticed while parsing the PAC result
    """
    kind: DirectiveKind
    host: Optional[str] = None
    port: Optional[int] = None
    warnings: Tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self):
        """Validate the directive after initialization."""
        if self.kind is DirectiveKind.DIRECT:
            if self.host is not None or self.port is not None:
                raise ValueError("DIRECT directive cannot carry an upstream address")
        else:
            if not self.host:
                raise ValueError("PROXY directive requires a host")
            if self.port is None or not (1 <= self.port <= 65535):
                raise ValueError(f"Invalid proxy port: {self.port}. Must be between 1 and 65535")

    @classmethod
    def direct(cls, warnings: Tuple[str, ...] = ()) -> 'ProxyDirective':
        """Create a DIRECT directive."""
        return cls(DirectiveKind.DIRECT, warnings=tuple(warnings))

    @classmethod
    def proxy(cls, host: str, port: int, warnings: Tuple[str, ...] = ()) -> 'ProxyDirective':
        """Create a directive to go through the upstream proxy host:port."""
        return cls(DirectiveKind.PROXY, host, port, tuple(warnings))

    @property
    def is_direct(self) -> bool:
        return self.kind is DirectiveKind.DIRECT

    @property
    def address(self) -> Optional[str]:
        """host:port ready to dial, or None for DIRECT."""
        if self.is_direct:
            return None
        host = f"[{self.host}]" if ':' in self.host else self.host
        return f"{host}:{self.port}"

    def __str__(self) -> str:
        if self.is_direct:
            return "DIRECT"
        return f"PROXY {self.address}"
