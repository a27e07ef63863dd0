"""Authentication mode selection."""

from typing import Any

from github import Auth

from ..config import Credentials, HttpAuthType


class AuthenticationSelector:
    """Chooses password or token authentication and remembers the choice.

    The selected mode also decides which endpoint proves the credentials
    work: password logins can list their authorizations, tokens can read the
    current user.
    """

    PASSWORD_PROBE = "/authorizations"
    TOKEN_PROBE = "/user"

    def __init__(self) -> None:
        self.mode = HttpAuthType.PASSWORD

    def select(self, credentials: Credentials) -> Auth.Auth:
        """Build the PyGithub auth object for ``credentials`` and record the mode."""
        if credentials.http_auth_type is HttpAuthType.PASSWORD:
            if not credentials.username:
                raise ValueError("Password authentication requires a username")
            self.mode = HttpAuthType.PASSWORD
            return Auth.Login(credentials.username, credentials.password_or_token)

        self.mode = HttpAuthType.TOKEN
        return Auth.Token(credentials.password_or_token)

    @property
    def check_path(self) -> str:
        if self.mode is HttpAuthType.PASSWORD:
            return self.PASSWORD_PROBE
        return self.TOKEN_PROBE

    @staticmethod
    def accepts(response: Any) -> bool:
        """A check succeeds when it returns a JSON array or object."""
        return isinstance(response, (list, dict))
