"""Confirmation token generation.

Raw codes are random "friendly" strings: URL-safe base64 with the easily
confused characters ``l``, ``I``, ``O`` and ``0`` replaced. What gets stored
is an HMAC-SHA256 digest of the raw code, keyed with a per-purpose key
derived from ``SECRET_KEY``. A database leak therefore exposes no usable
codes, and lookups by code stay possible because the digest is deterministic.
"""

import hashlib
import hmac
import secrets
from typing import Dict, Optional

import structlog

from sms_confirmable.core.config.settings import settings
from sms_confirmable.domain.interfaces.services import ITokenGenerator
from sms_confirmable.domain.value_objects.confirmation_token import ConfirmationToken

logger = structlog.get_logger(__name__)

CONFIRMATION_PURPOSE = "confirmation_token"

_AMBIGUOUS_CHARACTERS = str.maketrans("lIO0", "sxyz")


class TokenGenerator(ITokenGenerator):
    """Mints confirmation codes and recomputes their digests.

    The generator holds no state besides its derived keys; it is safe to
    share one instance across requests.
    """

    KEY_ITERATIONS = 2 ** 16
    KEY_LENGTH = 64

    def __init__(self, secret_key: Optional[str] = None, token_length: int = 20):
        secret = secret_key if secret_key is not None else settings.SECRET_KEY
        if not secret:
            raise ValueError("A secret key is required to digest confirmation tokens")
        self._secret = secret.encode("utf-8")
        self._token_length = token_length
        self._keys: Dict[str, bytes] = {}

    def generate(self, purpose: str = CONFIRMATION_PURPOSE) -> ConfirmationToken:
        raw = self.friendly_token(self._token_length)
        token = ConfirmationToken(raw=raw, digest=self._hexdigest(raw, purpose))
        logger.debug("Confirmation token generated", purpose=purpose, digest_prefix=token.digest[:8])
        return token

    def digest(self, raw_token: Optional[str], purpose: str = CONFIRMATION_PURPOSE) -> Optional[str]:
        if not raw_token:
            return None
        return self._hexdigest(raw_token, purpose)

    def verify(
        self,
        raw_token: Optional[str],
        stored_digest: Optional[str],
        purpose: str = CONFIRMATION_PURPOSE,
    ) -> bool:
        presented = self.digest(raw_token, purpose)
        if presented is None or not stored_digest:
            return False
        # Constant-time comparison to prevent timing attacks
        return secrets.compare_digest(presented, stored_digest)

    @staticmethod
    def friendly_token(length: int = 20) -> str:
        """A random URL-safe string of ``length`` unambiguous characters."""
        nbytes = -(-length * 3 // 4)
        return secrets.token_urlsafe(nbytes)[:length].translate(_AMBIGUOUS_CHARACTERS)

    def _hexdigest(self, raw_token: str, purpose: str) -> str:
        return hmac.new(self._key_for(purpose), raw_token.encode("utf-8"), hashlib.sha256).hexdigest()

    def _key_for(self, purpose: str) -> bytes:
        key = self._keys.get(purpose)
        if key is None:
            key = hashlib.pbkdf2_hmac(
                "sha256",
                self._secret,
                f"sms_confirmable {purpose}".encode("utf-8"),
                self.KEY_ITERATIONS,
                self.KEY_LENGTH,
            )
            self._keys[purpose] = key
        return key
