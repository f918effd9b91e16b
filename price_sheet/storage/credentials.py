# price_sheet/storage/credentials.py

"""OAuth credential provider for the Google Sheets API.

Loads a stored user token when one exists, refreshes it when it has
expired, and otherwise walks the user through the installed-app flow on
the terminal: the authorisation URL is printed, the code is read back from
one line of input and the resulting token is saved for the next run.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from price_sheet.config.settings import Settings

logger = logging.getLogger("price_sheet.auth")


class CredentialError(Exception):
    """Raised when usable credentials cannot be obtained."""


class CredentialProvider:
    """Supplies authorised Google credentials to the sheet writer."""

    def __init__(
        self,
        credentials_path: Path | None = None,
        token_path: Path | None = None,
        scopes: list[str] | None = None,
        prompt: Callable[[str], str] = input,
        echo: Callable[[str], Any] = print,
    ) -> None:
        self.credentials_path = (
            credentials_path or Settings.CREDENTIALS_PATH
        )
        self.token_path = token_path or Settings.TOKEN_PATH
        self.scopes = scopes or Settings.SHEETS_SCOPES
        self._prompt = prompt
        self._echo = echo
        self._credentials: Credentials | None = None

    def get_credentials(self) -> Credentials:
        """Return valid credentials, authorising interactively if needed."""
        if self._credentials is not None and self._credentials.valid:
            return self._credentials

        creds = self._load_token()
        if creds is not None and not creds.valid:
            creds = self._refresh(creds)
        if creds is None:
            creds = self._authorize()
            self._save_token(creds)
            self._echo(f"Token stored to {self.token_path}")

        self._credentials = creds
        return creds

    # ── Internals ────────────────────────────────────────

    def _load_token(self) -> Credentials | None:
        """Read the stored token; a corrupt file is fatal."""
        if not self.token_path.exists():
            logger.info("No stored token at %s", self.token_path)
            return None
        try:
            creds: Credentials = Credentials.from_authorized_user_file(
                str(self.token_path), self.scopes
            )
        except (ValueError, OSError) as exc:
            raise CredentialError(
                f"Stored token {self.token_path} is unreadable: {exc}"
            ) from exc
        logger.debug("Loaded stored token from %s", self.token_path)
        return creds

    def _refresh(self, creds: Credentials) -> Credentials | None:
        """Refresh an expired token; ``None`` means re-authorise."""
        if not (creds.expired and creds.refresh_token):
            return None
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            logger.warning(
                "Token refresh failed, re-authorising: %s", exc
            )
            return None
        logger.info("Refreshed expired token")
        self._save_token(creds)
        return creds

    def _load_client_config(self) -> dict[str, Any]:
        """Read the OAuth client secrets (``installed`` app type)."""
        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                config: dict[str, Any] = json.load(f)
        except (OSError, ValueError) as exc:
            raise CredentialError(
                "Client secrets "
                f"{self.credentials_path} are unreadable: {exc}"
            ) from exc
        installed = config.get("installed")
        if not isinstance(installed, dict) or not installed.get(
            "redirect_uris"
        ):
            raise CredentialError(
                f"{self.credentials_path} is not an installed-app "
                "client secrets file"
            )
        return config

    def _authorize(self) -> Credentials:
        """Run the copy-paste installed-app flow on the terminal."""
        config = self._load_client_config()
        flow = InstalledAppFlow.from_client_config(
            config,
            scopes=self.scopes,
            redirect_uri=config["installed"]["redirect_uris"][0],
        )
        auth_url, _state = flow.authorization_url(
            access_type="offline"
        )
        self._echo(
            f"Authorize this app by visiting this url: {auth_url}"
        )
        code = self._prompt("Enter the code from that page here: ")
        code = code.strip()
        if not code:
            raise CredentialError("No authorisation code entered")
        try:
            flow.fetch_token(code=code)
        except Exception as exc:
            raise CredentialError(
                f"Authorisation code exchange failed: {exc}"
            ) from exc
        creds: Credentials = flow.credentials
        return creds

    def _save_token(self, creds: Credentials) -> None:
        """Persist the token for reuse on later runs."""
        self.token_path.write_text(creds.to_json(), encoding="utf-8")
        logger.info("Token stored to %s", self.token_path)
