from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest

from src.app.services.verification_link import (
    LinkStatus,
    VerificationLinkSigner,
    email_proof,
    proof_matches,
)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def signer(clock):
    return VerificationLinkSigner(
        "unit-secret", "http://app.test/api/", ttl=timedelta(minutes=60), clock=clock
    )


def test_created_link_validates(signer, make_user):
    link = signer.create(make_user())

    assert signer.validate(link.user_id, link.proof, link.expires, link.signature) == LinkStatus.valid


def test_url_carries_all_parts(signer, make_user):
    user = make_user()
    link = signer.create(user)

    url = urlparse(link.url)
    query = parse_qs(url.query)
    assert url.path == f"/api/user/v1/auth/email/verify/{user.id}/{email_proof(user.email)}"
    assert query["expires"] == [str(link.expires)]
    assert query["signature"] == [link.signature]


def test_expiry_is_now_plus_ttl(signer, clock, make_user):
    link = signer.create(make_user(), ttl=timedelta(minutes=5))

    assert link.expires == int(clock.now) + 300


def test_link_expires(signer, clock, make_user):
    link = signer.create(make_user())
    clock.now += 3601

    assert signer.validate(link.user_id, link.proof, link.expires, link.signature) == LinkStatus.expired


@pytest.mark.parametrize("field", ["user_id", "proof", "expires"])
def test_tampering_breaks_signature(signer, make_user, field):
    link = signer.create(make_user())
    parts = {
        "user_id": link.user_id,
        "proof": link.proof,
        "expires": link.expires,
        "signature": link.signature,
    }
    parts[field] = parts[field] + 1 if field == "expires" else "x" + parts[field][1:]

    assert signer.validate(**parts) == LinkStatus.bad_signature


def test_signature_is_checked_before_expiry(signer, clock, make_user):
    link = signer.create(make_user())
    clock.now += 10_000

    status = signer.validate(link.user_id, link.proof, link.expires, "0" * 64)

    assert status == LinkStatus.bad_signature


def test_links_from_another_key_are_rejected(clock, make_user):
    link = VerificationLinkSigner("other", "http://app.test", clock=clock).create(make_user())
    signer = VerificationLinkSigner("unit-secret", "http://app.test", clock=clock)

    assert signer.validate(link.user_id, link.proof, link.expires, link.signature) == LinkStatus.bad_signature


def test_proof_follows_current_email(make_user):
    user = make_user(email="old@example.com")
    proof = email_proof(user.email)

    assert proof_matches(user, proof)
    user.email = "new@example.com"
    assert not proof_matches(user, proof)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        VerificationLinkSigner("", "http://app.test")
