"""
Resolver state snapshot.

The resolver publishes a new ResolverState by a single reference swap, so
readers always see a status and an engine that belong together.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..pac.script_engine import ScriptEngine


class ResolverStatus(Enum):
    """Lifecycle of a resolver."""
    UNINITIALIZED = "uninitialized"
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass(frozen=True)
class ResolverState:
    """
    Immutable {status, engine} pair.

    An engine is present if and only if the status is ONLINE.
    """
    status: ResolverStatus
    engine: Optional['ScriptEngine'] = None

    def __post_init__(self):
        if self.status is ResolverStatus.ONLINE and self.engine is None:
            raise ValueError("An online resolver state requires a script engine")
        if self.status is not ResolverStatus.ONLINE and self.engine is not None:
            raise ValueError(f"A {self.status.value} resolver state cannot hold a script engine")

    @property
    def online(self) -> bool:
        return self.status is ResolverStatus.ONLINE

    @classmethod
    def uninitialized(cls) -> 'ResolverState':
        return cls(ResolverStatus.UNINITIALIZED)

    @classmethod
    def offline(cls) -> 'ResolverState':
        return cls(ResolverStatus.OFFLINE)

    @classmethod
    def with_engine(cls, engine: 'ScriptEngine') -> 'ResolverState':
        return cls(ResolverStatus.ONLINE, engine)
