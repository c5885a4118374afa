"""
Resolver settings data model.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
import json
import logging
import urllib.parse

VALID_PAC_SCHEMES = ('http', 'https', 'file')
VALID_ENCODINGS = ('utf-8', 'ascii', 'latin-1', 'cp1252')


@dataclass
class ResolverSettings:
    """
    Settings for PAC based proxy resolution.

    Attributes:
        pac_url: URL of the PAC file; empty or None resolves everything DIRECT
        fetch_timeout: Seconds allowed for downloading the PAC file
        max_pac_size: Largest PAC file accepted, in bytes
        pac_encoding: Character encoding of the PAC file
        script_memory_limit: Bytes the script evaluator may allocate (None for no limit)
        log_level: Logging level name
    """
    pac_url: Optional[str] = None
    fetch_timeout: float = 10.0
    max_pac_size: int = 1024 * 1024
    pac_encoding: str = "utf-8"
    script_memory_limit: Optional[int] = 64 * 1024 * 1024
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings after initialization."""
        self._validate()

    def _validate(self):
        """Validate resolver settings."""
        if self.pac_url and not self._is_valid_pac_url(self.pac_url):
            raise ValueError(f"Invalid PAC URL: {self.pac_url}")

        if self.fetch_timeout <= 0:
            raise ValueError("Fetch timeout must be positive")

        if self.max_pac_size <= 0:
            raise ValueError("Maximum PAC size must be positive")

        if self.pac_encoding not in VALID_ENCODINGS:
            raise ValueError(f"Unsupported encoding: {self.pac_encoding}")

        if self.script_memory_limit is not None and self.script_memory_limit <= 0:
            raise ValueError("Script memory limit must be positive")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log level: {self.log_level}")

    @staticmethod
    def _is_valid_pac_url(url: str) -> bool:
        """Check if the PAC URL is usable."""
        result = urllib.parse.urlparse(url)
        if result.scheme not in VALID_PAC_SCHEMES:
            return False
        if result.scheme == 'file':
            return bool(result.path)
        return bool(result.netloc)

    @property
    def has_pac(self) -> bool:
        return bool(self.pac_url)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            'pac_url': self.pac_url,
            'fetch_timeout': self.fetch_timeout,
            'max_pac_size': self.max_pac_size,
            'pac_encoding': self.pac_encoding,
            'script_memory_limit': self.script_memory_limit,
            'log_level': self.log_level
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResolverSettings':
        """Create settings from dictionary, ignoring unknown keys."""
        known_keys = {
            'pac_url', 'fetch_timeout', 'max_pac_size', 'pac_encoding',
            'script_memory_limit', 'log_level'
        }
        filtered_data = {k: v for k, v in data.items() if k in known_keys}

        return cls(**filtered_data)

    def to_json(self) -> str:
        """Convert settings to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'ResolverSettings':
        """Create settings from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)
