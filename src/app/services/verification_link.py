"""
Signed, time-limited email verification links.

A link carries the account id, a proof derived from the account's current
email, an absolute expiry (unix seconds) and an HMAC-SHA256 signature over
all three. The signature is the trust anchor; the proof only ties the link
to the email it was issued for, so changing the email invalidates it.
"""

import hashlib
import hmac
import time
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional
from urllib.parse import urlencode

from src.domain.entities import RoleName, User


class LinkStatus(str, Enum):
    valid = "valid"
    expired = "expired"
    bad_signature = "bad_signature"


@dataclass(frozen=True)
class VerificationLink:
    user_id: str
    proof: str
    expires: int
    signature: str
    url: str


def email_proof(email: str) -> str:
    return hashlib.sha256(email.encode()).hexdigest()


def proof_matches(user: User, proof: str) -> bool:
    """Constant-time check of a presented proof against the user's current email"""
    return hmac.compare_digest(email_proof(user.email), str(proof))


class VerificationLinkSigner:
    def __init__(
        self,
        secret_key: str,
        base_url: str,
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("Verification links require a secret key")
        self._key = secret_key.encode()
        self.base_url = base_url.rstrip("/")
        self.ttl = ttl
        self._clock = clock

    def sign(self, user_id: str, proof: str, expires: int) -> str:
        message = f"{user_id}|{proof}|{expires}".encode()
        return hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def create(self, user: User, ttl: Optional[timedelta] = None) -> VerificationLink:
        ttl = ttl or self.ttl
        user_id = str(user.id)
        proof = email_proof(user.email)
        expires = int(self._clock() + ttl.total_seconds())
        signature = self.sign(user_id, proof, expires)

        # Admins and owners verify through the admin panel
        panel = "user" if user.role == RoleName.user else "admin"
        query = urlencode({"expires": expires, "signature": signature})
        url = f"{self.base_url}/{panel}/v1/auth/email/verify/{user_id}/{proof}?{query}"

        return VerificationLink(
            user_id=user_id, proof=proof, expires=expires, signature=signature, url=url
        )

    def validate(self, user_id: str, proof: str, expires: int, signature: str) -> LinkStatus:
        """
        Check signature first, then expiry. Nothing embedded in the link is
        trusted until the signature matches.
        """
        expected = self.sign(str(user_id), str(proof), int(expires))
        if not hmac.compare_digest(expected, str(signature)):
            return LinkStatus.bad_signature
        if self._clock() > int(expires):
            return LinkStatus.expired
        return LinkStatus.valid
