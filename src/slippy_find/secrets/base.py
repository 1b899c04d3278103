"""Secret source interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class SecretSource(ABC):
    """Abstract interface for reading key-value secrets."""

    @abstractmethod
    def get_mapping(self, path: str, mount: str) -> Dict[str, Any]:
        """
        Read the key-value mapping stored at path under mount.

        Raises:
            SecretNotFoundError: If the secret does not exist or cannot be read
        """
        pass

    def close(self) -> None:
        """Release the underlying connection, if any."""
        pass
