"""Identity provider adapter.

The rest of the app only talks to an ``IdentityProvider``: verify a bearer
token into its claims (or just the uid), and produce a password-reset link
for an email. The Firebase implementation is built once at startup by
``resolve_identity_provider`` and handed to the app; tests hand in a fake.
"""
import logging

import firebase_admin
from firebase_admin import auth, credentials, exceptions
from google.auth import jwt as google_jwt

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Raised when the identity provider rejects a token or a request."""


class IdentityProvider:
    def verify_claims(self, token: str) -> dict:
        """Verified token claims; always carries ``uid``."""
        raise NotImplementedError

    def verify_token(self, token: str) -> str:
        return self.verify_claims(token)["uid"]

    def generate_password_reset_link(self, email: str) -> str:
        raise NotImplementedError


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(self, app):
        self.app = app

    def verify_claims(self, token: str) -> dict:
        try:
            return auth.verify_id_token(token, app=self.app)
        except (ValueError, exceptions.FirebaseError) as e:
            raise IdentityError(str(e)) from e

    def generate_password_reset_link(self, email: str) -> str:
        try:
            return auth.generate_password_reset_link(email, app=self.app)
        except (ValueError, exceptions.FirebaseError) as e:
            raise IdentityError(str(e)) from e


class DevelopmentFallbackProvider(IdentityProvider):
    """Accepts tokens the wrapped provider rejects, reading the uid from the
    unverified payload. Only ever built in development."""

    def __init__(self, inner: IdentityProvider):
        self.inner = inner

    def verify_claims(self, token: str) -> dict:
        try:
            return self.inner.verify_claims(token)
        except IdentityError:
            pass

        try:
            payload = google_jwt.decode(token, verify=False)
        except ValueError as e:
            raise IdentityError(f"Could not decode token: {e}") from e

        uid = payload.get("user_id") or payload.get("sub")
        if not uid:
            raise IdentityError("Token payload has no user id")
        logger.warning("Accepted UNVERIFIED token for uid=%s (development fallback)", uid)
        return dict(payload, uid=uid)

    def generate_password_reset_link(self, email: str) -> str:
        return self.inner.generate_password_reset_link(email)


def resolve_identity_provider(settings) -> IdentityProvider:
    """Resolve credentials once and build the provider the app will use."""
    if settings.AUTH_DEV_FALLBACK and not settings.is_development:
        raise RuntimeError(
            f"AUTH_DEV_FALLBACK is only allowed when ENVIRONMENT=development (got {settings.ENVIRONMENT!r})"
        )

    if settings.FIREBASE_CREDENTIALS:
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    try:
        app = firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app(cred, options)

    provider = FirebaseIdentityProvider(app)
    if settings.AUTH_DEV_FALLBACK:
        logger.warning("Development auth fallback is ON: unverified tokens will be accepted")
        return DevelopmentFallbackProvider(provider)
    return provider
