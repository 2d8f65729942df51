"""Sign up, sign in and profile bootstrap against the auth service"""
from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from pharmabook.config import SETTINGS
from pharmabook.errors import AuthError, GatewayQueryError

from .client import SupabaseGateway
from .schemas import AuthUser, Profile, Session

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
DEFAULT_DISPLAY_NAME = "Usuário"
DEFAULT_AUTH_ERROR = "Could not authenticate. Check your details and try again."

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """'Ana Paula Araújo' -> 'ana-paula-araujo'"""
    decomposed = unicodedata.normalize("NFD", str(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_SLUG_RE.sub("-", stripped.lower().strip()).strip("-")


@dataclass
class LoginForm:
    email: str
    password: str

    def validate(self) -> str:
        """Return the normalized email or raise AuthError."""
        email = self.email.strip().lower()
        if not email or not self.password:
            raise AuthError("Fill in the email and password.")
        return email


@dataclass
class SignupForm(LoginForm):
    display_name: str = ""
    confirm_password: str = ""
    slug: str = ""

    def validate(self) -> str:
        email = super().validate()
        if not self.display_name.strip():
            raise AuthError("Enter your name to create the account.")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"The password must have at least {MIN_PASSWORD_LENGTH} characters.")
        if self.password != self.confirm_password:
            raise AuthError("The passwords do not match.")
        return email

    def resolved_slug(self) -> str:
        return self.slug.strip() or slugify(self.display_name.strip())


@dataclass
class SignupResult:
    user: Optional[AuthUser]
    session: Optional[Session]

    @property
    def needs_confirmation(self) -> bool:
        return self.session is None

    @property
    def message(self) -> str:
        if self.needs_confirmation:
            return "Account created! Check your email to confirm and sign in."
        return "Account created."


def _auth_error(response: httpx.Response) -> AuthError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    message = None
    if isinstance(body, dict):
        message = (
            body.get("error_description")
            or body.get("msg")
            or body.get("message")
            or body.get("error")
        )
    return AuthError(str(message or DEFAULT_AUTH_ERROR), response.status_code)


def profile_defaults(user: AuthUser) -> Profile:
    """Profile row derived from sign-up metadata, used when none exists yet."""
    metadata = user.user_metadata or {}
    email_name = user.email.split("@")[0] if user.email else ""
    display_name = (
        metadata.get("display_name")
        or metadata.get("full_name")
        or email_name
        or DEFAULT_DISPLAY_NAME
    )
    slug = metadata.get("slug") or slugify(display_name) or f"user-{user.id[:8]}"
    return Profile(id=user.id, slug=slug, display_name=display_name, plan="free")


def ensure_profile(gateway: SupabaseGateway, user: AuthUser) -> Profile:
    profile = gateway.fetch_profile(user.id)
    if profile is not None:
        return profile
    logger.info(f"Creating profile for user {user.id}")
    return gateway.insert_profile(profile_defaults(user))


def load_profile(gateway: SupabaseGateway, user: AuthUser) -> Optional[Profile]:
    """ensure_profile for the sign-in path: a profiles failure is logged, not raised."""
    try:
        return ensure_profile(gateway, user)
    except GatewayQueryError as e:
        logger.error(f"Could not load profile for {user.id}: {e}")
        return None


class AuthClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        redirect_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or SETTINGS.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else SETTINGS.supabase_anon_key
        self.redirect_url = redirect_url or SETTINGS.auth_redirect_url
        self.timeout = timeout or SETTINGS.http_timeout
        self._transport = transport

    def _post(
        self,
        path: str,
        payload: Dict[str, Any] | None = None,
        params: Dict[str, str] | None = None,
        token: str | None = None,
    ) -> httpx.Response:
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {token or self.api_key}"}
        try:
            with httpx.Client(
                base_url=f"{self.base_url}/auth/v1",
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                r = client.post(path, json=payload, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Auth request {path} failed: {e}")
            raise AuthError(DEFAULT_AUTH_ERROR) from e
        if r.is_error:
            raise _auth_error(r)
        return r

    def sign_in(self, form: LoginForm) -> Session:
        email = form.validate()
        r = self._post(
            "/token",
            {"email": email, "password": form.password},
            params={"grant_type": "password"},
        )
        session = Session.model_validate(r.json())
        logger.info(f"Signed in {session.user.email}")
        return session

    def sign_up(self, form: SignupForm, gateway: SupabaseGateway | None = None) -> SignupResult:
        """
        Register a user. When the service returns a session right away the
        profile row is created too; otherwise the user must confirm by email.
        """
        email = form.validate()
        display_name = form.display_name.strip()
        slug = form.resolved_slug()
        r = self._post(
            "/signup",
            {
                "email": email,
                "password": form.password,
                "data": {"display_name": display_name, "slug": slug},
            },
            params={"redirect_to": self.redirect_url},
        )
        body = r.json()

        if "access_token" in body:
            session = Session.model_validate(body)
            if gateway is not None:
                try:
                    gateway.with_token(session.access_token).insert_profile(
                        Profile(id=session.user.id, slug=slug, display_name=display_name, plan="free")
                    )
                except GatewayQueryError as e:
                    logger.error(f"Profile insert after sign-up failed: {e}")
                    raise AuthError(e.message, e.status_code) from e
            return SignupResult(user=session.user, session=session)

        user = AuthUser.model_validate(body["user"] if "user" in body else body)
        logger.info(f"Sign-up for {email} awaits email confirmation")
        return SignupResult(user=user, session=None)

    def sign_out(self, session: Session) -> None:
        self._post("/logout", token=session.access_token)
        logger.info(f"Signed out {session.user.email}")
