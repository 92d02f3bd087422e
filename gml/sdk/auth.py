"""Authentication and credential management for gml SDK.

Two strategies are supported, selected once from the configuration:
- oauth: an installed-app OAuth client plus a user token written by `gml auth`
- service_account: a service account key, optionally impersonating a user
"""

import os
import logging
from typing import Any, Optional

from .config import Config, AUTH_TYPE_SERVICE_ACCOUNT
from .exceptions import AuthError, ConfigError

logger = logging.getLogger(__name__)

GMAIL_READONLY_SCOPE = "https://www.googleapis.com/auth/gmail.readonly"
SCOPES = [GMAIL_READONLY_SCOPE]


class Authenticator:
    """Produces Google credentials for building API services."""

    def get_credentials(self) -> Any:
        raise NotImplementedError


class OAuthAuthenticator(Authenticator):
    """Authenticates with an OAuth client secrets file and a saved user token."""

    def __init__(self, credentials_file: str, token_file: str):
        self.credentials_file = credentials_file
        self.token_file = token_file

    def get_credentials(self) -> Any:
        """
        Load the saved user token, refreshing it if it has expired.

        Raises:
            ConfigError: If the client secrets file does not exist
            AuthError: If the token is missing, unreadable, or cannot be refreshed
        """
        from google.oauth2.credentials import Credentials

        self._check_client_secrets()
        if not os.path.exists(self.token_file):
            raise AuthError(
                f"token not found at {self.token_file}, please run 'gml auth' first"
            )

        try:
            creds = Credentials.from_authorized_user_file(self.token_file, SCOPES)
        except (ValueError, OSError) as e:
            raise AuthError(
                f"unable to load token from {self.token_file}, "
                f"please run 'gml auth' first: {e}"
            ) from e

        if not creds.valid:
            self._refresh(creds)
        logger.debug(f"Loaded OAuth credentials from {self.token_file}")
        return creds

    def authenticate(self) -> Any:
        """
        Run the browser OAuth flow with a local callback server and save the token.

        Returns:
            The newly issued credentials

        Raises:
            ConfigError: If the client secrets file does not exist
            AuthError: If the flow fails
        """
        from google_auth_oauthlib.flow import InstalledAppFlow

        self._check_client_secrets()
        logger.info(f"Using client credentials: {self.credentials_file}")

        try:
            flow = InstalledAppFlow.from_client_secrets_file(self.credentials_file, SCOPES)
            creds = flow.run_local_server(
                port=0,
                access_type="offline",
                authorization_prompt_message=(
                    "Opening browser for authentication...\n"
                    "If browser doesn't open, visit this URL:\n{url}"
                ),
            )
        except Exception as e:
            raise AuthError(f"authentication failed: {e}") from e

        self.save_token(creds)
        return creds

    def save_token(self, creds):
        """Write credentials to the token file, creating its directory if needed."""
        token_dir = os.path.dirname(self.token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)
        try:
            with open(self.token_file, "w") as token_file:
                token_file.write(creds.to_json())
        except OSError as e:
            raise AuthError(f"unable to save token to {self.token_file}: {e}") from e
        logger.info(f"Token saved to {self.token_file}")

    def _refresh(self, creds):
        from google.auth.exceptions import RefreshError
        from google.auth.transport.requests import Request

        if not creds.refresh_token:
            raise AuthError(
                "credentials expired and no refresh token available, "
                "please run 'gml auth' first"
            )
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise AuthError(
                f"unable to refresh token, please run 'gml auth' first: {e}"
            ) from e
        logger.debug("Refreshed expired OAuth token")
        self.save_token(creds)

    def _check_client_secrets(self):
        if not os.path.exists(self.credentials_file):
            raise ConfigError(
                f"unable to read client secret file: {self.credentials_file} does not exist"
            )


class ServiceAccountAuthenticator(Authenticator):
    """Authenticates with a service account key file."""

    def __init__(self, credentials_file: str, subject: Optional[str] = None):
        self.credentials_file = credentials_file
        self.subject = subject

    def get_credentials(self) -> Any:
        from google.oauth2 import service_account

        if not os.path.exists(self.credentials_file):
            raise ConfigError(
                f"service account key file not found: {self.credentials_file}"
            )
        try:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_file, scopes=SCOPES
            )
        except (ValueError, OSError) as e:
            raise AuthError(f"unable to load service account key: {e}") from e

        if self.subject:
            creds = creds.with_subject(self.subject)
            logger.debug(f"Service account impersonating {self.subject}")
        return creds


def get_authenticator(config: Config) -> Authenticator:
    """Select the authentication strategy for the configured auth type."""
    if config.auth_type == AUTH_TYPE_SERVICE_ACCOUNT:
        return ServiceAccountAuthenticator(
            config.application_credentials, subject=config.subject
        )
    return OAuthAuthenticator(config.application_credentials, config.user_credentials)
