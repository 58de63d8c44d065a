"""Google ID token verification for federated sign-in."""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from starlette.concurrency import run_in_threadpool

from linktrend.core.config import settings
from linktrend.core.exceptions import ExternalServiceFailure, Unauthenticated, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class IdentityClaims:
    email: str
    name: str
    picture: Optional[str] = None


class GoogleIdentityVerifier:

    def __init__(self, client_id: Optional[str]):
        self.client_id = client_id
        self._request = google_requests.Request()

    def _verify(self, credential: str) -> dict:
        # Fetches Google's signing certs over the network; blocking
        return id_token.verify_oauth2_token(credential, self._request, self.client_id)

    async def verify(self, credential: str) -> IdentityClaims:
        if not self.client_id:
            raise ExternalServiceFailure("Google sign-in is not configured")

        try:
            payload = await run_in_threadpool(self._verify, credential)
        except google_exceptions.TransportError as e:
            logger.error("Could not reach Google to verify token: %s", e)
            raise ExternalServiceFailure("Could not reach the identity provider")
        except ValueError as e:
            logger.info("Rejected Google credential: %s", e)
            raise Unauthenticated("Failed to verify Google credentials")

        if payload.get("email_verified") is False:
            raise Unauthenticated("Google account email is not verified")

        email = payload.get("email")
        name = payload.get("name")
        if not email or not name:
            raise ValidationError("Invalid Google token")

        return IdentityClaims(email=email, name=name, picture=payload.get("picture"))


@lru_cache()
def get_identity_verifier() -> GoogleIdentityVerifier:
    return GoogleIdentityVerifier(settings.GOOGLE_CLIENT_ID)
