# services/api/core/credentials.py
"""
Service-account credential providers.

Exactly one provider is chosen at startup (see ``select_credential_provider``):

1. SERVICE_ACCOUNT_JSON_STRING     -> inline key JSON (PaaS secrets)
2. GOOGLE_APPLICATION_CREDENTIALS  -> path to a key file (secret files, GCE)
3. local fallback                  -> config/service-account-key.json
"""
from __future__ import annotations

import json
import logging
from typing import Protocol

import gspread
from google.oauth2.service_account import Credentials

from .errors import CredentialsError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class CredentialProvider(Protocol):
    source: str

    def get_credentials(self) -> Credentials:
        ...


class InlineJsonCredentialProvider:
    source = "SERVICE_ACCOUNT_JSON_STRING"

    def __init__(self, raw_json: str) -> None:
        self.raw_json = raw_json

    def get_credentials(self) -> Credentials:
        try:
            info = json.loads(self.raw_json)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {self.source}: {e}")
            raise CredentialsError("Invalid service account JSON string.") from e
        if not isinstance(info, dict):
            raise CredentialsError("Invalid service account JSON string.")
        try:
            return Credentials.from_service_account_info(info, scopes=SCOPES)
        except ValueError as e:
            raise CredentialsError(f"Service account JSON is incomplete: {e}") from e


class KeyFileCredentialProvider:
    source = "GOOGLE_APPLICATION_CREDENTIALS"

    def __init__(self, key_file: str) -> None:
        self.key_file = key_file

    def get_credentials(self) -> Credentials:
        try:
            return Credentials.from_service_account_file(self.key_file, scopes=SCOPES)
        except (OSError, ValueError) as e:
            raise CredentialsError(
                f"Could not load service account key file {self.key_file!r}: {e}"
            ) from e


class LocalKeyFileCredentialProvider(KeyFileCredentialProvider):
    source = "local key file"


def select_credential_provider(settings) -> CredentialProvider:
    if settings.service_account_json_string:
        return InlineJsonCredentialProvider(settings.service_account_json_string)
    if settings.google_application_credentials:
        return KeyFileCredentialProvider(settings.google_application_credentials)
    if settings.local_key_file:
        return LocalKeyFileCredentialProvider(settings.local_key_file)
    raise CredentialsError("Service account credentials or keyFile must be provided.")


def authorize(provider: CredentialProvider) -> gspread.Client:
    logger.info(f"Authorizing Sheets client using {provider.source}")
    return gspread.authorize(provider.get_credentials())
