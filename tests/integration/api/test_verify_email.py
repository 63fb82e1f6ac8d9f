from urllib.parse import urlsplit

import pytest

from src.domain.entities import RoleName


def path_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}"


@pytest.mark.asyncio
async def test_valid_link_verifies_once(client, create_user, link_signer, fetch_user):
    # Arrange
    user = await create_user(verified=False)
    url = path_of(link_signer.create(user).url)

    # Act
    first = await client.get(url)
    second = await client.get(url)

    # Assert
    assert first.status_code == 200
    assert first.json() == {"code": 200, "message": "Email verified successfully"}
    assert second.status_code == 400
    assert second.json()["message"] == "Email already verified."
    assert (await fetch_user("jane@example.com")).email_verified_at is not None


@pytest.mark.asyncio
async def test_link_from_registration_email(client, notifier):
    await client.post(
        "/api/user/v1/auth/register",
        json={
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "fresh@example.com",
            "password": "SecurePass123!",
            "password_confirmation": "SecurePass123!",
        },
    )
    _, url = notifier.verification_links[-1]

    response = await client.get(path_of(url))

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_tampered_signature_is_forbidden(client, create_user, link_signer):
    user = await create_user(verified=False)
    link = link_signer.create(user)

    response = await client.get(
        f"/api/user/v1/auth/email/verify/{link.user_id}/{link.proof}"
        f"?expires={link.expires}&signature={'0' * 64}"
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Invalid signature."


@pytest.mark.asyncio
async def test_missing_signature_is_forbidden(client, create_user, link_signer):
    user = await create_user(verified=False)
    link = link_signer.create(user)

    response = await client.get(f"/api/user/v1/auth/email/verify/{link.user_id}/{link.proof}")

    assert response.status_code == 403
    assert response.json()["message"] == "Invalid signature."


@pytest.mark.asyncio
async def test_expired_link_is_forbidden(client, create_user, link_signer):
    user = await create_user(verified=False)
    expires = 1_000_000_000
    link = link_signer.create(user)
    signature = link_signer.sign(link.user_id, link.proof, expires)

    response = await client.get(
        f"/api/user/v1/auth/email/verify/{link.user_id}/{link.proof}"
        f"?expires={expires}&signature={signature}"
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Verification link has expired."


@pytest.mark.asyncio
async def test_validly_signed_link_for_missing_user(client, link_signer, make_unsaved_user):
    url = path_of(link_signer.create(make_unsaved_user()).url)

    response = await client.get(url)

    assert response.status_code == 404
    assert response.json()["message"] == "User not found."


@pytest.mark.asyncio
async def test_link_for_previous_email_is_invalid(client, create_user, link_signer, db_session):
    # Arrange
    user = await create_user(verified=False, email="old@example.com")
    url = path_of(link_signer.create(user).url)
    user.email = "new@example.com"
    db_session.add(user)
    await db_session.commit()

    # Act
    response = await client.get(url)

    # Assert
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid verification link."


@pytest.mark.asyncio
async def test_admin_links_use_admin_panel(client, create_user, link_signer):
    user = await create_user(email="boss@example.com", role=RoleName.admin, verified=False)
    url = path_of(link_signer.create(user).url)

    assert url.startswith("/api/admin/v1/auth/email/verify/")
    response = await client.get(url)
    assert response.status_code == 200
