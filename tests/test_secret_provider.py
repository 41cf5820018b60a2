"""Unit tests for signing secret resolution."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import AzureError

import config
from auth.errors import ConfigurationError, UpstreamError
from auth.secret_provider import (
    SecretProvider,
    get_secret_provider,
    get_signing_secret,
    parse_vault_reference,
)


def make_factory(value="kv-secret"):
    client = MagicMock()
    client.get_secret.return_value = SimpleNamespace(value=value)
    factory = MagicMock(return_value=client)
    return factory, client


def test_plain_value_is_returned_as_is():
    factory, _ = make_factory()
    provider = SecretProvider("plain-secret", client_factory=factory)

    assert provider.resolve() == "plain-secret"
    factory.assert_not_called()


@pytest.mark.parametrize("raw_value", [None, ""])
def test_unset_secret_is_configuration_error(raw_value):
    provider = SecretProvider(raw_value)

    with pytest.raises(ConfigurationError, match="NEXTAUTH_SECRET is not set"):
        provider.resolve()


@pytest.mark.parametrize(
    "raw_value",
    [
        "@Microsoft.KeyVault(VaultName=chat-kv;SecretName=NEXTAUTH-SECRET)",
        "VaultName=chat-kv;SecretName=NEXTAUTH-SECRET",
    ],
)
def test_vault_reference_is_fetched(raw_value):
    """Test: Both reference forms resolve through Key Vault."""
    factory, client = make_factory("kv-secret")
    provider = SecretProvider(raw_value, client_factory=factory)

    assert provider.resolve() == "kv-secret"
    factory.assert_called_once_with("https://chat-kv.vault.azure.net")
    client.get_secret.assert_called_once_with("NEXTAUTH-SECRET")


def test_secret_is_fetched_once():
    """Test: Resolution happens at most once per provider."""
    factory, client = make_factory("kv-secret")
    provider = SecretProvider("VaultName=chat-kv;SecretName=s", client_factory=factory)

    assert provider.resolve() == "kv-secret"
    assert provider.resolve() == "kv-secret"
    assert provider.resolve() == "kv-secret"
    assert client.get_secret.call_count == 1


def test_malformed_key_vault_reference():
    provider = SecretProvider("@Microsoft.KeyVault(SecretUri=https://kv/secrets/x)")

    with pytest.raises(ConfigurationError, match="Key Vault reference format"):
        provider.resolve()


def test_empty_vault_secret_is_configuration_error():
    factory, _ = make_factory(value=None)
    provider = SecretProvider("VaultName=chat-kv;SecretName=s", client_factory=factory)

    with pytest.raises(ConfigurationError, match="is empty"):
        provider.resolve()


def test_key_vault_failure_is_upstream_error_and_not_cached():
    """Test: A failed lookup raises UpstreamError and the next call retries."""
    factory, client = make_factory()
    client.get_secret.side_effect = AzureError("forbidden")
    provider = SecretProvider("VaultName=chat-kv;SecretName=s", client_factory=factory)

    with pytest.raises(UpstreamError) as exc_info:
        provider.resolve()
    assert exc_info.value.response_message() == "server_error"

    client.get_secret.side_effect = None
    client.get_secret.return_value = SimpleNamespace(value="recovered")
    assert provider.resolve() == "recovered"


def test_parse_vault_reference():
    assert parse_vault_reference("plain") is None
    assert parse_vault_reference("VaultName=v;SecretName=s") == ("v", "s")
    assert parse_vault_reference("@Microsoft.KeyVault(VaultName=v;SecretName=s)") == ("v", "s")


def test_process_wide_provider_reads_settings(monkeypatch):
    monkeypatch.setattr(config.settings, "NEXTAUTH_SECRET", "from-settings")
    get_secret_provider.cache_clear()

    assert get_signing_secret() == "from-settings"
    assert get_secret_provider() is get_secret_provider()
