"""Secret sources for pipeline configuration."""

from .base import SecretSource
from .vault_client import VaultClient, VaultSettings

__all__ = ["SecretSource", "VaultClient", "VaultSettings"]
