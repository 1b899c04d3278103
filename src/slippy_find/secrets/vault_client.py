"""HashiCorp Vault client.

Authenticates with AppRole and reads secrets from a KV version 2 engine
over Vault's HTTP API. Requests are made once; nothing is retried.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx
from pydantic import BaseModel, Field

from ..exceptions import SecretNotFoundError, SecretSourceUnavailableError
from .base import SecretSource

logger = logging.getLogger(__name__)

ENV_VAULT_ADDRESS = "VAULT_ADDRESS"
ENV_VAULT_ROLE_ID = "VAULT_ROLE_ID"
ENV_VAULT_SECRET_ID = "VAULT_SECRET_ID"
ENV_VAULT_NAMESPACE = "VAULT_NAMESPACE"


class VaultSettings(BaseModel):
    """Connection settings for Vault AppRole authentication."""

    address: str = Field(description="Vault server address")
    role_id: str = Field(description="AppRole role ID")
    secret_id: str = Field(description="AppRole secret ID")
    namespace: Optional[str] = Field(default=None, description="Enterprise namespace")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "VaultSettings":
        """Load settings from VAULT_* environment variables.

        Raises:
            SecretSourceUnavailableError: If a required variable is unset
        """
        missing = [
            name
            for name in (ENV_VAULT_ADDRESS, ENV_VAULT_ROLE_ID, ENV_VAULT_SECRET_ID)
            if not environ.get(name)
        ]
        if missing:
            raise SecretSourceUnavailableError(
                "failed to create Vault client",
                f"missing environment variables: {', '.join(missing)}",
            )
        return cls(
            address=environ[ENV_VAULT_ADDRESS],
            role_id=environ[ENV_VAULT_ROLE_ID],
            secret_id=environ[ENV_VAULT_SECRET_ID],
            namespace=environ.get(ENV_VAULT_NAMESPACE) or None,
        )


class VaultClient(SecretSource):
    """SecretSource backed by Vault's KV v2 secrets engine."""

    def __init__(
        self,
        settings: VaultSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client without contacting Vault.

        Args:
            settings: Vault address and AppRole credentials
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings
        headers = {}
        if settings.namespace:
            headers["X-Vault-Namespace"] = settings.namespace
        self._client = httpx.Client(
            base_url=settings.address.rstrip("/"),
            timeout=settings.timeout,
            headers=headers,
            transport=transport,
        )
        self._token: Optional[str] = None

    def login(self) -> None:
        """Exchange the AppRole credentials for a client token.

        Raises:
            SecretSourceUnavailableError: If authentication fails
        """
        try:
            response = self._client.post(
                "/v1/auth/approle/login",
                json={
                    "role_id": self.settings.role_id,
                    "secret_id": self.settings.secret_id,
                },
            )
        except httpx.HTTPError as e:
            raise SecretSourceUnavailableError(
                "failed to create Vault client", f"login request failed: {e}"
            ) from e

        if response.status_code != 200:
            raise SecretSourceUnavailableError(
                "failed to create Vault client",
                f"AppRole login returned HTTP {response.status_code}",
            )

        try:
            token = response.json()["auth"]["client_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise SecretSourceUnavailableError(
                "failed to create Vault client", "no client token in login response"
            ) from e

        self._token = token
        self._client.headers["X-Vault-Token"] = token
        logger.debug(f"Authenticated with Vault at {self.settings.address}")

    def get_mapping(self, path: str, mount: str) -> Dict[str, Any]:
        """Read the data of a KV v2 secret.

        Args:
            path: Secret path relative to the mount
            mount: KV v2 mount point

        Returns:
            The secret's key-value data

        Raises:
            SecretNotFoundError: If the secret is missing or the read fails
        """
        if self._token is None:
            self.login()

        endpoint = f"/v1/{mount.strip('/')}/data/{path.strip('/')}"
        try:
            response = self._client.get(endpoint)
        except httpx.HTTPError as e:
            raise SecretNotFoundError(path, f"request failed: {e}") from e

        if response.status_code == 404:
            raise SecretNotFoundError(path, f"no secret at mount {mount!r}")
        if response.status_code != 200:
            raise SecretNotFoundError(path, f"HTTP {response.status_code}")

        try:
            data = response.json()["data"]["data"]
        except (ValueError, KeyError, TypeError) as e:
            raise SecretNotFoundError(path, "response has no secret data") from e

        if not isinstance(data, dict):
            raise SecretNotFoundError(path, "secret data is not a mapping")
        return data

    def close(self) -> None:
        self._client.close()


def create_vault_client(environ: Mapping[str, str]) -> VaultClient:
    """Create and authenticate a VaultClient from VAULT_* environment variables.

    Raises:
        SecretSourceUnavailableError: If settings are missing or login fails
    """
    client = VaultClient(VaultSettings.from_env(environ))
    try:
        client.login()
    except SecretSourceUnavailableError:
        client.close()
        raise
    return client
