"""Signing secret resolution (plain env value or Azure Key Vault reference)."""

import logging
import re
import threading
from collections.abc import Callable
from functools import lru_cache

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

import config
from auth.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

KEY_VAULT_PREFIX = "@Microsoft.KeyVault"
_VAULT_REFERENCE = re.compile(r"VaultName=([^;]+);SecretName=([^;)]+)")


def parse_vault_reference(value: str) -> tuple[str, str] | None:
    """
    Parse a Key Vault reference into (vault_name, secret_name).

    Accepts both ``VaultName=v;SecretName=s`` and the App Service form
    ``@Microsoft.KeyVault(VaultName=v;SecretName=s)``.

    Returns:
        Tuple of vault and secret names, or None if value is a plain secret

    Raises:
        ConfigurationError: If value claims to be a reference but cannot be parsed
    """
    match = _VAULT_REFERENCE.search(value)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    if value.startswith(KEY_VAULT_PREFIX):
        raise ConfigurationError("Invalid NEXTAUTH_SECRET Key Vault reference format")
    return None


def _default_client_factory(vault_url: str) -> SecretClient:
    return SecretClient(vault_url=vault_url, credential=DefaultAzureCredential())


class SecretProvider:
    """
    Resolves a secret at most once per process.

    The first successful resolution is cached; failures are not, so a later
    request can retry after the environment is fixed.
    """

    def __init__(
        self,
        raw_value: str | None,
        client_factory: Callable[[str], SecretClient] = _default_client_factory,
        env_name: str = "NEXTAUTH_SECRET",
    ):
        self._raw_value = raw_value
        self._client_factory = client_factory
        self._env_name = env_name
        self._secret: str | None = None
        self._lock = threading.Lock()

    def resolve(self) -> str:
        if self._secret is not None:
            return self._secret
        with self._lock:
            if self._secret is None:
                self._secret = self._fetch()
        return self._secret

    def _fetch(self) -> str:
        if not self._raw_value:
            raise ConfigurationError(f"{self._env_name} is not set in environment")

        reference = parse_vault_reference(self._raw_value)
        if reference is None:
            return self._raw_value

        vault_name, secret_name = reference
        vault_url = f"https://{vault_name}.vault.azure.net"
        logger.info("Fetching %s from Key Vault %s", self._env_name, vault_name)
        try:
            client = self._client_factory(vault_url)
            secret = client.get_secret(secret_name)
        except AzureError as e:
            logger.error("Key Vault lookup for %s failed: %s", secret_name, e)
            raise UpstreamError(f"Key Vault lookup for {secret_name} failed") from e

        if not secret.value:
            raise ConfigurationError(
                f"Secret {secret_name} in Key Vault {vault_name} is empty"
            )
        return secret.value


@lru_cache(maxsize=1)
def get_secret_provider() -> SecretProvider:
    """Process-wide provider for the token signing secret."""
    return SecretProvider(config.settings.NEXTAUTH_SECRET)


def get_signing_secret() -> str:
    """Return the signing secret, resolving it on first use."""
    return get_secret_provider().resolve()
