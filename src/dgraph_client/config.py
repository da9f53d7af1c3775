"""Configuration management for dgraph_client."""

import os
from dataclasses import dataclass, field

from .exceptions import ConfigurationError


def _optional_float(name: str, default: str) -> float | None:
    value = float(os.getenv(name, default))
    return value if value > 0 else None


@dataclass
class ClientConfig:
    """Configuration for a DgraphClient."""

    # RPC設定
    default_timeout_seconds: float | None = field(
        default_factory=lambda: _optional_float("DGRAPH_TIMEOUT_SECONDS", "30")
    )

    # ログイン設定
    user: str = field(default_factory=lambda: os.getenv("DGRAPH_USER", ""))
    password: str = field(default_factory=lambda: os.getenv("DGRAPH_PASSWORD", ""))
    namespace: int = field(
        default_factory=lambda: int(os.getenv("DGRAPH_NAMESPACE", "0"))
    )

    # トランザクション設定
    discard_on_release: bool = field(
        default_factory=lambda: os.getenv("DGRAPH_DISCARD_ON_RELEASE", "true").lower() == "true"
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if self.default_timeout_seconds is not None and self.default_timeout_seconds <= 0:
            raise ConfigurationError("default_timeout_seconds must be positive or None")

        if self.namespace < 0:
            raise ConfigurationError("namespace must be non-negative")

        if self.password and not self.user:
            raise ConfigurationError("password given without user")

    def mask_sensitive_data(self) -> dict:
        """Return configuration with masked sensitive data."""
        return {
            "default_timeout_seconds": self.default_timeout_seconds,
            "user": self.user,
            "password": "****" if self.password else "",
            "namespace": self.namespace,
            "discard_on_release": self.discard_on_release,
        }
