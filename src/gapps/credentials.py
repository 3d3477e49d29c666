"""
Setting up Google OAuth2 credentials.

Two ways in: a GoogleCtx, which is the client id/secret pair from the cloud
console together with an auth map (the tokens obtained once through
authorize() and then stored by the caller), or a credential JSON document
(service account or authorized user) as Google hands out and as
GOOGLE_APPLICATION_CREDENTIALS points to.
Everything ends up as a google.auth Credentials object.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Self, TextIO
import datetime
import json
import logging
import os

import google.auth
import google.auth.exceptions
from google.auth.credentials import Credentials as BaseCredentials, Scoped
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .errors import CredentialError
from .resources import GoogleResourceBase

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
# loopback redirect for installed apps, served by a local server
LOOPBACK_REDIRECT_URI = "http://localhost"

GAPP_CRED_VAR = "GOOGLE_APPLICATION_CREDENTIALS"


@dataclass
class GoogleCtx(GoogleResourceBase):
    """
    Client details plus a stored auth map.  Timeouts are in milliseconds and
    may be left out.
    """
    client_id: str = field(default="")
    client_secret: str = field(default="")
    redirect_uris: List[str] = field(default_factory=list)
    auth_map: dict = field(default_factory=dict)
    connect_timeout: int|None = field(default=None)
    read_timeout: int|None = field(default=None)

    @classmethod
    def from_base(cls, base: dict|Self|None) -> Self:
        """Config files tend to use kebab-case keys, accept those too."""
        if isinstance(base, cls):
            return base
        b = {str(k).replace("-", "_"): v for k, v in dict(base or {}).items()}
        if isinstance(b.get("auth_map"), dict):
            b["auth_map"] = {str(k).replace("-", "_"): v for k, v in b["auth_map"].items()}
        return super().from_base(b)

    def fixup(self) -> None:
        self.redirect_uris = [str(u) for u in self.redirect_uris]

    def __bool__(self) -> bool:
        return bool(self.client_id) and bool(self.client_secret)


def client_config(ctx: GoogleCtx|dict) -> dict:
    """
    The client secrets structure for an installed application built from
    the ctx, same shape as the file the cloud console lets you download.
    """
    c = GoogleCtx.from_base(ctx)
    return {
        "installed": {
            "client_id": c.client_id,
            "client_secret": c.client_secret,
            "redirect_uris": list(c.redirect_uris) or [LOOPBACK_REDIRECT_URI],
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
        }
    }


def _auth_map(creds: Credentials) -> dict:
    expires_in = None
    if creds.expiry is not None:
        # google-auth keeps expiry as naive UTC
        now = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
        expires_in = max(int((creds.expiry - now).total_seconds()), 0)
    return {
        "access_token": creds.token,
        "expires_in": expires_in,
        "refresh_token": creds.refresh_token,
        "token_type": "Bearer",
    }


def authorize(ctx: GoogleCtx|dict, scopes: Iterable[str],
              prompt: Callable[[str], str] = input,
              host: str = "localhost", port: int = 0) -> dict:
    """
    Walk the user through the consent screen once.  The returned auth map is
    what goes into GoogleCtx.auth_map and should be stored securely by the
    caller.

    Without redirect_uris in the ctx a local server on host:port receives
    the redirect (port 0 picks a free one).  With a redirect the
    authorization URL is printed and the user types back the code they are
    given, which is then exchanged for tokens.
    """
    c = GoogleCtx.from_base(ctx)
    if not c:
        raise CredentialError("client_id and client_secret are required to authorize")
    if not c.redirect_uris:
        flow = InstalledAppFlow.from_client_config(client_config(c), list(scopes))
        creds = flow.run_local_server(host=host, port=port, access_type="offline", prompt="consent")
        return _auth_map(creds)

    flow = InstalledAppFlow.from_client_config(client_config(c), list(scopes),
                                               redirect_uri=c.redirect_uris[0])
    url, _ = flow.authorization_url(access_type="offline", prompt="consent")
    print(f"Please visit the following url and input the code that appears on the screen: {url}")
    code = prompt("code: ").strip()
    if not code:
        raise CredentialError("no authorization code entered")
    token = flow.fetch_token(code=code)
    return {
        "access_token": token.get("access_token"),
        "expires_in": token.get("expires_in"),
        "refresh_token": token.get("refresh_token"),
        "token_type": token.get("token_type"),
    }


def token_credentials(ctx: GoogleCtx|dict) -> Credentials:
    """
    User credentials from the stored auth map.  With a refresh token present
    the client will renew the access token on its own when it expires.
    """
    c = GoogleCtx.from_base(ctx)
    auth_map = c.auth_map or {}
    if not auth_map.get("access_token") and not auth_map.get("refresh_token"):
        raise CredentialError("auth map has neither an access token nor a refresh token")
    return Credentials(token=auth_map.get("access_token"),
                       refresh_token=auth_map.get("refresh_token"),
                       client_id=c.client_id or None,
                       client_secret=c.client_secret or None,
                       token_uri=TOKEN_URI)


def credential_with_scopes(creds: BaseCredentials, scopes: Iterable[str]) -> BaseCredentials:
    """
    A copy of the credential with the given scopes attached.
    User credentials have their scopes fixed when consent was given, those
    come back unchanged.
    """
    if isinstance(creds, Scoped):
        return creds.with_scopes(sorted(set(scopes)))
    logger.debug("%s is not scopable, scopes left as granted", type(creds).__name__)
    return creds


def credential_from_json_stream(stream: str|Path|TextIO) -> BaseCredentials:
    """
    Read a credential JSON document from a path or an open file object.
    """
    if isinstance(stream, (str, Path)):
        with open(stream, "r", encoding="utf-8") as f:
            info = json.load(f)
    else:
        info = json.load(stream)
    return _credential_from_info(info)


def credential_from_json(cred_json: str) -> BaseCredentials:
    """Credential from a raw JSON string."""
    return _credential_from_info(json.loads(cred_json))


def _credential_from_info(info: dict) -> BaseCredentials:
    try:
        creds, _ = google.auth.load_credentials_from_dict(info)
    except google.auth.exceptions.DefaultCredentialsError as e:
        raise CredentialError(str(e)) from e
    return creds


def default_credential(scopes: Iterable[str]|None = None) -> BaseCredentials:
    """
    The credential GOOGLE_APPLICATION_CREDENTIALS points at, falling back to
    whatever application default credentials the environment provides.
    See https://developers.google.com/identity/protocols/application-default-credentials
    """
    path = os.environ.get(GAPP_CRED_VAR)
    if path:
        creds = credential_from_json_stream(path)
    else:
        creds, _ = google.auth.default()
    if scopes:
        creds = credential_with_scopes(creds, scopes)
    return creds


def build_credential(auth: BaseCredentials|GoogleCtx|dict) -> BaseCredentials:
    """
    Credentials pass through unmodified, a ctx (or its dict form) is built
    from its auth map.
    """
    if isinstance(auth, BaseCredentials):
        return auth
    if isinstance(auth, (GoogleCtx, dict)):
        return token_credentials(auth)
    raise CredentialError(f"cannot build credentials from {type(auth).__name__}")


def timeout_seconds(ctx: GoogleCtx|dict) -> float|None:
    """
    httplib2 only has a single socket timeout, so use the larger of the two.
    """
    c = GoogleCtx.from_base(ctx)
    t = [v for v in (c.connect_timeout, c.read_timeout) if v]
    return max(t) / 1000.0 if t else None
