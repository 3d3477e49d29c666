from collections.abc import Iterable
from pathlib import Path
import json
import copy
import logging
import os
from functools import wraps

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build, Resource
import googleapiclient.discovery_cache as discovery_cache
import httplib2

from .credentials import GoogleCtx, build_credential, timeout_seconds
from .errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


class _GoogleSession():
    """
    Authenticated access to the Drive and Sheets APIs.
    See https://developers.google.com/workspace/guides/create-credentials for an
    overview of the credentials you'll need.  Either point the session at a
    client secrets file, in which case the OAuth consent flow runs once and the
    tokens are cached for later runs, or hand it credentials directly with
    authenticate().

    One authenticated session per application is all that makes sense so this
    is a module singleton, and services are handed to the API wrappers through
    the service() decorator.
    """

    _SCOPES = {
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
        "drive": "https://www.googleapis.com/auth/drive",
        "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
        "drive-metadata-ro": "https://www.googleapis.com/auth/drive.metadata.readonly",
        "openid": "openid",
        "email": "email",
        "profile": "profile",
        "userinfo-email": "https://www.googleapis.com/auth/userinfo.email",
        "userinfo-profile": "https://www.googleapis.com/auth/userinfo.profile"
    }
    _SCOPE_URL_PREFIX = "https://www.googleapis.com/"

    _DEFAULT_AUTH_PROMPT_MSG = "Please visit this URL to authorize this application: {url}"
    _DEFAULT_AUTH_FLOW_SUCCESS_MSG = "Authorization complete, you may close this window."
    _DEFAULT_SECRETS = Path.home() / "gapps_client_secrets.json"
    _DEFAULT_CACHE = Path.home() / "gapps_tokens.json"

    SECRETS_ENV = "GAPPS_CLIENT_SECRETS"
    CACHE_ENV = "GAPPS_TOKEN_CACHE"
    SCOPES_ENV = "GAPPS_SCOPES"

    def __init__(self) -> None:
        self.reset()

    def __bool__(self) -> bool:
        """True if we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return f"Disconnected:{str(self._scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be accepted.
        """
        s = str(scope)
        sc = cls._SCOPES.get(s, "")
        if not sc and s.startswith(cls._SCOPE_URL_PREFIX):
            sc = s
        return sc

    @classmethod
    def _scope_list(cls, value) -> list[str]:
        vals = [value] if isinstance(value, str) or not isinstance(value, Iterable) else value
        slist = []
        for v in vals:
            s = cls.get_scope(str(v).strip())
            if s and s not in slist:
                slist.append(s)
        return slist

    @property
    def client_secrets(self) -> Path:
        """
        Path to client secrets file as provided by Google when generating access credentials.
        """
        return self._secrets

    @client_secrets.setter
    def client_secrets(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self._secrets:
            self._secrets = val
            if self.connected and not self._explicit:
                self.connect()

    @property
    def cred_cache(self) -> Path:
        """
        Path to local token cache so the consent flow doesn't run every time.
        """
        return self._cache

    @cred_cache.setter
    def cred_cache(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self._cache:
            self._cache = val
            if self.connected and not self._explicit:
                self.connect()

    @property
    def connected(self) -> bool:
        """
        Are we authenticated with Google?
        Explicitly supplied credentials count as connected even before their
        first token, the client refreshes them on the first request.
        """
        if self._creds is None:
            return False
        return self._explicit or bool(self._creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        """
        Scopes authenticated by Google for this session, which can differ
        from what was requested in self.scopes.
        """
        if self.connected:
            return list(getattr(self._creds, "scopes", None) or [])
        return []

    @property
    def scopes(self) -> list[str]:
        """
        The scopes requested or to be requested on next authentication sequence.
        """
        return self._scopes

    @scopes.setter
    def scopes(self, value: None|list[str]|str) -> None:
        """
        Override the list of session scopes.  A reconnect happens if the
        new list has scopes the current session doesn't.
        """
        self._scopes = [] if value is None else self._scope_list(value)
        if self._scopes and self.connected:
            self.refresh()
        else:
            self.clear()

    def append_scopes(self, *args) -> bool:
        """
        Add to the current scope list, typically done by modules for the
        scopes they need.
        """
        for a in args:
            for s in self._scope_list(a):
                if s not in self._scopes:
                    self._scopes.append(s)
        return self.refresh()

    def scope_in_session(self, scope: str) -> bool:
        """
        Is the specified scope in the currently authenicated session?
        """
        s = self.get_scope(scope)
        return bool(s) and self.connected and (s in self.session_scopes)

    @property
    def creds(self):
        """
        Current active access credentials or None
        """
        return self._creds

    @property
    def services(self) -> dict[str, Resource]:
        """
        Current active services.  Can be empty.
        """
        return self._services

    @property
    def timeout(self) -> float|None:
        """Socket timeout in seconds for API requests, None for the httplib2 default."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: float|None) -> None:
        v = None if value is None else float(value)
        if v != self._timeout:
            self._timeout = v
            self._services = {}

    @property
    def config(self) -> dict:
        """
        Get all configuration state as a dict.
        Convenience for pushing it all into a json, toml, ini, etc, file.
        """
        return {
            'secrets': str(self._secrets),
            'cache': str(self._cache),
            'scopes': list(self._scopes),
            'server': self.auth_server,
            'port': self.auth_port,
            'timeout': self._timeout
        }

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict, as pulled from a config file or equivalent.
        """
        reconnect = False
        v = config.get('port', None)
        if v is not None:
            self.auth_port = int(v)
        v = config.get('server', None)
        if v is not None:
            self.auth_server = str(v)
        v = config.get('timeout', None)
        if v is not None:
            self.timeout = v
        v = config.get('scopes', [])
        if v:
            self._scopes = self._scope_list(v)
            reconnect = True
        v = config.get('cache', None)
        if v is not None:
            self._cache = Path(v)
            reconnect = True
        v = config.get('secrets', None)
        if v is not None:
            self._secrets = Path(v)
            reconnect = True
        v = config.get('auth_prompt_msg', None)
        if v is not None:
            self.auth_prompt_msg = str(v)
        v = config.get('flow_success_msg', None)
        if v is not None:
            self.auth_flow_success_msg = str(v)
        if reconnect and self.connected and not self._explicit:
            self.connect()

    def load_config(self, path: Path|str) -> dict:
        """Read a JSON config file into the session, returning what was read."""
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
        self.config = config
        return config

    def clear(self) -> None:
        """Drop credentials and services, keeping configuration."""
        self._creds = None
        self._explicit = False
        self._services = {}

    def reset(self) -> None:
        """
        Reset all connection state to defaults, environment overrides included.
        """
        self._secrets = Path(os.environ.get(self.SECRETS_ENV) or self._DEFAULT_SECRETS)
        self._cache = Path(os.environ.get(self.CACHE_ENV) or self._DEFAULT_CACHE)
        self._discovery_cache = discovery_cache.autodetect()
        self._scopes = self._scope_list(os.environ.get(self.SCOPES_ENV, "").split(","))
        self._timeout = None
        self.clear()
        self.auth_server = 'localhost'
        self.auth_port = 0
        self.auth_prompt_msg = self._DEFAULT_AUTH_PROMPT_MSG
        self.auth_flow_success_msg = self._DEFAULT_AUTH_FLOW_SUCCESS_MSG

    def authenticate(self, auth) -> bool:
        """
        Use the given credentials instead of the secrets/cache flow.
        auth can be google.auth credentials, a GoogleCtx or its dict form,
        for a ctx its timeouts are applied to the session.
        """
        self.clear()
        if isinstance(auth, (GoogleCtx, dict)):
            t = timeout_seconds(auth)
            if t is not None:
                self.timeout = t
        self._creds = build_credential(auth)
        self._explicit = True
        logger.info("using supplied %s credentials", type(self._creds).__name__)
        return self.connected

    def refresh(self) -> bool:
        """
        If requested scopes are not all in the current session, reconnect.
        """
        if self._explicit:
            return self.connected
        scopes_accounted = all(s in self.session_scopes for s in self._scopes)
        if self.connected and not scopes_accounted:
            return self.connect()
        return True

    def _load_cache(self, requested_scopes: list[str]) -> None:
        cf = self._cache.resolve()
        with open(cf, 'r', encoding='utf-8') as f:
            scopes = json.load(f).get('scopes', [])
        if not all(s in scopes for s in requested_scopes):
            # the cache doesn't record its scopes anywhere Google checks on
            # refresh so the comparison has to happen here
            logger.info("token cache %s lacks requested scopes, discarding", cf)
            self._cache.unlink()
        else:
            self._creds = Credentials.from_authorized_user_file(str(cf), requested_scopes)

    def _save_cache(self, requested_scopes: list[str]) -> None:
        refresh_token = getattr(self._creds, 'refresh_token', None)
        if not refresh_token:
            return
        user_info = {'refresh_token': refresh_token,
                     'client_id': self._creds.client_id,
                     'client_secret': self._creds.client_secret,
                     'scopes': requested_scopes}
        with open(self._cache.resolve(), 'w', encoding='utf-8') as f:
            json.dump(user_info, f, ensure_ascii=False, indent=2)

    def connect(self) -> bool:
        """
        Establish a new authentication session: token cache, then refresh,
        then the consent flow from the client secrets, then application
        default credentials.  User tokens are written to the cache for reuse.
        """
        self.clear()
        if not self._scopes:
            logger.debug("no scopes requested, not connecting")
            return False
        requested_scopes = copy.copy(self._scopes)
        if self._cache.exists() and self._cache.is_file():
            self._load_cache(requested_scopes)
        if not self.connected:
            if self._creds and self._creds.refresh_token:
                try:
                    self._creds.refresh(Request())
                except google.auth.exceptions.RefreshError as e:
                    logger.warning("failed to refresh stored creds: %s, deleting token cache and re-authorizing", e)
                finally:
                    if not self.connected:
                        self._cache.unlink(missing_ok=True)

            if not self.connected:
                if self._secrets.exists() and self._secrets.is_file():
                    flow = InstalledAppFlow.from_client_secrets_file(str(self._secrets), requested_scopes)
                    self._creds = flow.run_local_server(host=self.auth_server, port=self.auth_port,
                                                        authorization_prompt_message=self.auth_prompt_msg,
                                                        success_message=self.auth_flow_success_msg)
                else:
                    try:
                        # GOOGLE_APPLICATION_CREDENTIALS and the other cloud default locations
                        self._creds, _ = google.auth.default(requested_scopes)
                        self._explicit = True
                    except google.auth.exceptions.DefaultCredentialsError as e:
                        logger.warning("no credentials available: %s", e)

            if self.connected and not self._explicit:
                self._save_cache(requested_scopes)
        if self.connected:
            logger.info("connected with scopes %s", requested_scopes)
        return self.connected

    def _http(self):
        if self._timeout is None:
            return None
        return AuthorizedHttp(self._creds, http=httplib2.Http(timeout=self._timeout))

    def get_service(self, name: str, version: str) -> Resource|None:
        """
        Build the requested service if not already available, connecting if required.
        Returns None if no connection can be made.
        """
        if not self.connected:
            self.connect()
        if not self.connected:
            return None
        id = f'{name}:{version}'
        s = self._services.get(id, None)
        if s is None:
            http = self._http()
            if http is not None:
                s = build(name, version, http=http, cache=self._discovery_cache)
            else:
                s = build(name, version, credentials=self._creds, cache=self._discovery_cache)
            logger.debug("built service %s", id)
            self._services[id] = s
        return s


session = _GoogleSession()


def service(name: str, version: str):
    """
    Decorator delivering the named service to a function building requests
    against it, as the 'service' keyword.  A service passed in explicitly by
    the caller is left alone.
    param: name: service name
    param: version: service version
    """
    def _inner_decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            if kwargs.get('service') is None:
                s = session.get_service(name, version)
                if s is None:
                    raise NotAuthenticatedError(f"no credentials available for {name} {version}")
                kwargs['service'] = s
            return f(*args, **kwargs)
        return wrapped
    return _inner_decorator
