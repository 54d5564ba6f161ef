"""
Tests for settings, credential provider selection and the store dependency.

Run with: pytest tests/test_config.py -v
"""
import json
import threading
import time

import pytest
from pydantic import ValidationError

import core.credentials as credentials
import dependencies
from core.credentials import (
    InlineJsonCredentialProvider,
    KeyFileCredentialProvider,
    LocalKeyFileCredentialProvider,
    authorize,
    select_credential_provider,
)
from core.errors import ConfigurationError, CredentialsError
from settings import Settings


def make_settings(**overrides):
    base = {
        "service_account_json_string": "",
        "google_application_credentials": "",
        "local_key_file": "config/service-account-key.json",
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)


class TestSettings:
    def test_variant_normalized(self):
        """Variant names are trimmed and lower-cased."""
        assert make_settings(deployment_variant=" Functions ").deployment_variant == "functions"

    def test_unknown_variant_rejected(self):
        """Only known variants validate."""
        with pytest.raises(ValidationError):
            make_settings(deployment_variant="lambda")

    def test_store_config(self):
        """Settings carry through to the store config."""
        cfg = make_settings(
            spreadsheet_id="abc",
            sheet_name="Customers",
            deployment_variant="functions",
            sheet_last_column="ad",
        ).store_config()
        assert cfg.spreadsheet_id == "abc"
        assert cfg.sheet_name == "Customers"
        assert cfg.last_column == "AD"
        assert cfg.variant.lookup_field == "phone"
        assert cfg.variant.mutation_key_field == "id"

    def test_bad_last_column(self):
        """The last column must be letters only."""
        with pytest.raises(ValidationError):
            make_settings(sheet_last_column="Z9")

    def test_origins_list(self):
        """Origins are split on commas and blanks dropped."""
        s = make_settings(allowed_origins="capacitor://localhost, http://localhost:4200,,")
        assert s.get_origins_list() == ["capacitor://localhost", "http://localhost:4200"]


class TestProviderSelection:
    def test_inline_json_wins(self):
        """Inline JSON beats a key file path."""
        s = make_settings(service_account_json_string="{}", google_application_credentials="/k.json")
        assert isinstance(select_credential_provider(s), InlineJsonCredentialProvider)

    def test_key_file_env(self):
        """The key file path is used when no inline JSON is set."""
        provider = select_credential_provider(make_settings(google_application_credentials="/k.json"))
        assert type(provider) is KeyFileCredentialProvider
        assert provider.key_file == "/k.json"

    def test_local_fallback(self):
        """The bundled key file is the last resort."""
        provider = select_credential_provider(make_settings())
        assert isinstance(provider, LocalKeyFileCredentialProvider)
        assert provider.key_file == "config/service-account-key.json"

    def test_nothing_configured(self):
        """No credential source at all is an error."""
        with pytest.raises(CredentialsError):
            select_credential_provider(make_settings(local_key_file=""))


class TestProviders:
    def test_inline_invalid_json(self):
        """Malformed inline JSON is a credentials error."""
        with pytest.raises(CredentialsError, match="Invalid service account JSON string."):
            InlineJsonCredentialProvider("{not json").get_credentials()

    def test_inline_not_an_object(self):
        """Inline JSON must be an object."""
        with pytest.raises(CredentialsError):
            InlineJsonCredentialProvider("[]").get_credentials()

    def test_inline_incomplete_info(self):
        """google-auth rejecting the info is a credentials error."""
        with pytest.raises(CredentialsError):
            InlineJsonCredentialProvider(json.dumps({"type": "service_account"})).get_credentials()

    def test_inline_passes_scopes(self, monkeypatch):
        """The parsed info and Sheets scopes reach google-auth."""
        seen = {}

        def fake_from_info(info, scopes):
            seen.update(info=info, scopes=scopes)
            return "creds"

        monkeypatch.setattr(credentials.Credentials, "from_service_account_info", fake_from_info)
        provider = InlineJsonCredentialProvider(json.dumps({"client_email": "a@b"}))
        assert provider.get_credentials() == "creds"
        assert seen == {"info": {"client_email": "a@b"}, "scopes": credentials.SCOPES}

    def test_missing_key_file(self, tmp_path):
        """An unreadable key file is a credentials error."""
        with pytest.raises(CredentialsError):
            KeyFileCredentialProvider(str(tmp_path / "absent.json")).get_credentials()

    def test_credentials_error_is_configuration_error(self):
        """Credential failures are configuration failures."""
        assert issubclass(CredentialsError, ConfigurationError)

    def test_authorize(self, monkeypatch):
        """The provider's credentials are handed to gspread."""
        monkeypatch.setattr(
            credentials.Credentials, "from_service_account_file", lambda path, scopes: f"creds:{path}"
        )
        monkeypatch.setattr(credentials.gspread, "authorize", lambda creds: ("client", creds))
        assert authorize(KeyFileCredentialProvider("/k.json")) == ("client", "creds:/k.json")


class TestStoreDependency:
    def test_built_once_under_concurrent_first_use(self, monkeypatch):
        """Simultaneous first requests share one connected store."""
        built = []

        class StubProvider:
            source = "stub"

        def slow_connect(provider, config):
            time.sleep(0.05)
            store = object()
            built.append(store)
            return store

        monkeypatch.setattr(dependencies, "_store", None)
        monkeypatch.setattr(dependencies, "get_settings", lambda: make_settings(spreadsheet_id="abc"))
        monkeypatch.setattr(dependencies, "select_credential_provider", lambda s: StubProvider())
        monkeypatch.setattr(dependencies.SheetRecordStore, "connect", slow_connect)

        barrier = threading.Barrier(8)
        results = []

        def first_request():
            barrier.wait()
            results.append(dependencies.get_store())

        threads = [threading.Thread(target=first_request) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(built) == 1
        assert len(results) == 8
        assert all(r is built[0] for r in results)

    def test_reused_after_first_build(self, monkeypatch):
        """Later calls return the cached store without reconnecting."""
        cached = object()
        monkeypatch.setattr(dependencies, "_store", cached)
        monkeypatch.setattr(
            dependencies, "select_credential_provider", lambda s: pytest.fail("reconnected")
        )
        assert dependencies.get_store() is cached
