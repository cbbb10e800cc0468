"""
Authentication against Supabase GoTrue.

`SupabaseAuth` is a thin `requests` client for the auth endpoints.
`SessionProvider` wraps it together with the current `AuthSession` and is
what the rest of the app reads the signed-in user and profile from.

GoTrue API: https://github.com/supabase/auth#endpoints
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from loguru import logger

from ideahub.config import SUPABASE_URL, SUPABASE_ANON_KEY, REQUEST_TIMEOUT
from ideahub.models.user import User, Profile
from ideahub.storage.base import Storage, StorageError


MIN_PASSWORD_LENGTH = 6


class AuthError(Exception):
    """Raised for rejected credentials, invalid sign-up input or auth transport failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class AuthSession:
    """
    Who is signed in, and with which tokens.

    A session without an access token is signed out, even if `user` is set
    (that happens right after sign-up while email confirmation is pending).
    """
    user: Optional[User] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    profile: Optional[Profile] = None

    @property
    def signed_in(self) -> bool:
        return bool(self.user and self.access_token)

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.signed_in else None

    @property
    def confirmation_required(self) -> bool:
        return bool(self.user and not self.access_token)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form kept in the browser-session cookie."""
        return {
            "user": self.user.to_dict() if self.user else None,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "profile": self.profile.to_dict() if self.profile else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AuthSession":
        if not data:
            return cls()
        user = User.from_dict(data["user"]) if data.get("user") else None
        profile = Profile.from_dict(data["profile"]) if data.get("profile") else None
        return cls(
            user=user,
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            profile=profile,
        )


class SupabaseAuth:
    """
    Client for the GoTrue endpoints used by the app.

    Input validation happens before any network call so bad sign-ups
    never leave the process.
    """

    def __init__(self, url: str = None, anon_key: str = None):
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else SUPABASE_ANON_KEY

    def is_available(self) -> bool:
        """Check if the auth service is configured."""
        return bool(self.url and self.anon_key)

    def _headers(self, access_token: str = None) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Content-Type": "application/json",
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """GoTrue reports errors under several keys depending on the endpoint."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        for key in ("error_description", "msg", "message", "error"):
            if isinstance(body, dict) and body.get(key):
                return str(body[key])
        return response.text

    def _call(
        self,
        method: str,
        path: str,
        payload: Dict[str, Any] = None,
        params: Dict[str, str] = None,
        access_token: str = None,
    ) -> Dict[str, Any]:
        if not self.is_available():
            raise AuthError("Supabase auth is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")

        try:
            response = requests.request(
                method,
                f"{self.url}/auth/v1/{path}",
                headers=self._headers(access_token),
                params=params,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise AuthError(f"Auth request failed: {e}") from e

        if not response.ok:
            raise AuthError(self._error_message(response), status_code=response.status_code)

        return response.json() if response.content else {}

    @staticmethod
    def _session_from(data: Dict[str, Any]) -> AuthSession:
        user_data = data.get("user") or (data if data.get("id") else None)
        return AuthSession(
            user=User.from_dict(user_data) if user_data else None,
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    @staticmethod
    def validate_sign_up(
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
    ) -> None:
        """
        Raises:
            AuthError: If the email is blank, the passwords differ or the
                password is shorter than MIN_PASSWORD_LENGTH.
        """
        if not isinstance(email, str) or not email.strip():
            raise AuthError("Email is required", status_code=400)
        if not isinstance(password, str):
            raise AuthError("Password must be text", status_code=400)
        if confirm_password is not None and password != confirm_password:
            raise AuthError("Passwords don't match", status_code=400)
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                status_code=400,
            )

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: str = "",
        confirm_password: Optional[str] = None,
    ) -> AuthSession:
        """
        Register a new account.

        Returns:
            A signed-in session when the project auto-confirms emails,
            otherwise a session with `confirmation_required` set.
        """
        self.validate_sign_up(email, password, confirm_password)
        if display_name is not None and not isinstance(display_name, str):
            raise AuthError("Display name must be text", status_code=400)

        payload = {
            "email": email.strip(),
            "password": password,
            "data": {"display_name": display_name.strip() if display_name else ""},
        }
        data = self._call("POST", "signup", payload=payload)
        session = self._session_from(data)
        logger.info(f"Signed up {payload['email']} (confirmation pending: {session.confirmation_required})")
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Password sign-in."""
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise AuthError("Email and password are required", status_code=400)

        data = self._call(
            "POST",
            "token",
            payload={"email": email.strip(), "password": password},
            params={"grant_type": "password"},
        )
        session = self._session_from(data)
        if not session.signed_in:
            raise AuthError("Sign-in did not return a session")
        logger.info(f"Signed in user {session.user.id}")
        return session

    def sign_out(self, access_token: str) -> None:
        """Revoke the session's refresh tokens on the server."""
        self._call("POST", "logout", access_token=access_token)

    def get_user(self, access_token: str) -> User:
        return User.from_dict(self._call("GET", "user", access_token=access_token))


class SessionProvider:
    """
    Current session plus the operations that change it.

    Components never talk to the auth client directly; they read
    `user`/`profile` from here and call `sign_in`/`sign_up`/`sign_out`.
    """

    def __init__(self, auth: SupabaseAuth, session: AuthSession = None):
        self.auth = auth
        self.session = session or AuthSession()

    @property
    def user(self) -> Optional[User]:
        return self.session.user if self.session.signed_in else None

    @property
    def profile(self) -> Optional[Profile]:
        return self.session.profile if self.session.signed_in else None

    @property
    def signed_in(self) -> bool:
        return self.session.signed_in

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: str = "",
        confirm_password: Optional[str] = None,
    ) -> AuthSession:
        self.session = self.auth.sign_up(email, password, display_name, confirm_password)
        return self.session

    def sign_in(self, email: str, password: str) -> AuthSession:
        self.session = self.auth.sign_in(email, password)
        return self.session

    def sign_out(self) -> None:
        """
        End the session locally; a failed server-side logout is logged
        but never keeps the user signed in.
        """
        token = self.session.access_token
        self.session = AuthSession()
        if not token:
            return
        try:
            self.auth.sign_out(token)
        except AuthError as e:
            logger.warning(f"Server-side sign-out failed: {e}")

    def load_profile(self, storage: Storage) -> Optional[Profile]:
        """Fetch the profile row for the signed-in user and keep it on the session."""
        if not self.signed_in:
            return None
        try:
            profile = storage.get_profile(self.session.user.id)
        except StorageError as e:
            logger.error(f"Error loading profile: {e}")
            return self.session.profile
        self.session.profile = profile
        return profile
