"""Request signing for the SwitchBot API v1.1.

Every request carries the static token plus an HMAC-SHA256 signature over
``token + timestamp + nonce`` keyed with the secret. The signature does not
cover the path or body; that is the provider's published scheme.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
import uuid
from collections.abc import Callable

from ..models import Credentials, SignedHeaders
from .errors import SwitchBotConfigError

_LOGGER = logging.getLogger(__name__)


def credentials_configured(credentials: Credentials | None) -> bool:
    """Check whether both halves of the credential pair are present."""
    return bool(credentials and credentials.token and credentials.secret)


def sign(credentials: Credentials, timestamp: str, nonce: str) -> str:
    """Compute the request signature.

    Pure function: identical inputs yield identical signatures.

    Args:
        credentials: Token/secret pair.
        timestamp: Epoch milliseconds as a decimal string.
        nonce: Per-request random token.

    Returns:
        Base64 encoded HMAC-SHA256 digest.
    """
    data = f"{credentials.token}{timestamp}{nonce}".encode()
    digest = hmac.new(credentials.secret.encode(), data, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def _epoch_millis() -> str:
    return str(int(time.time() * 1000))


def _random_nonce() -> str:
    return str(uuid.uuid4())


class RequestSigner:
    """Produces fresh authentication headers for each outbound call.

    Attributes:
        credentials: The credential pair used for every signature.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        clock: Callable[[], str] | None = None,
        nonce_factory: Callable[[], str] | None = None,
    ):
        """Initialize the signer.

        Args:
            credentials: Token/secret pair.
            clock: Returns the current epoch-millisecond timestamp string.
            nonce_factory: Returns a new nonce string.

        Raises:
            SwitchBotConfigError: If token or secret is missing.
        """
        if not credentials_configured(credentials):
            raise SwitchBotConfigError("SwitchBot API credentials not configured")
        self.credentials = credentials
        self._clock = clock or _epoch_millis
        self._nonce_factory = nonce_factory or _random_nonce

    def build_headers(self) -> SignedHeaders:
        """Sign a new request with a fresh timestamp and nonce."""
        timestamp = self._clock()
        nonce = self._nonce_factory()
        _LOGGER.debug("Signing request t=%s nonce=%s", timestamp, nonce)
        return SignedHeaders(
            authorization=self.credentials.token,
            signature=sign(self.credentials, timestamp, nonce),
            timestamp=timestamp,
            nonce=nonce,
        )
