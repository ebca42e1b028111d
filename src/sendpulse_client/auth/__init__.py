"""Credential storage and bearer-token management for the SendPulse API."""

from sendpulse_client.auth.credential_store import CredentialStore, TokenEntry, placeholder_token
from sendpulse_client.auth.token_manager import TokenManager

__all__ = ["CredentialStore", "TokenEntry", "TokenManager", "placeholder_token"]
