"""API tests for moderator and admin review actions."""

import pytest

from minicast.repositories.app_repo import AppRepository
from minicast.repositories.developer_repo import DeveloperRepository

CONTRACT = "0x" + "ab" * 20


async def make_staff(session_factory, identity, role):
    async with session_factory() as session:
        await DeveloperRepository(session).get_or_create(identity, admin_role=role)
        await session.commit()


async def submit(client, wallet, **overrides):
    data = {"url": "https://x.example", "name": "N", "description": "D", "category": "games"}
    data.update(overrides)
    response = await client.post("/api/v1/apps/submit", json=data, headers=wallet.headers())
    return response.json()["app"]


@pytest.fixture
async def moderator(session_factory, admin_wallet):
    await make_staff(session_factory, admin_wallet.address, "MODERATOR")
    return admin_wallet


@pytest.fixture
async def admin(session_factory, admin_wallet):
    await make_staff(session_factory, admin_wallet.address, "ADMIN")
    return admin_wallet


@pytest.mark.asyncio
async def test_review_queue(client, moderator, wallet):
    pending = await submit(client, wallet, url="https://a.example")
    contract = await submit(client, wallet, url="https://b.example", contract_address=CONTRACT)
    review = await submit(client, wallet, url="https://c.example", review_message="look")
    await submit(client, moderator, url="https://approved.example")

    response = await client.get("/api/v1/admin/apps/pending", headers=moderator.headers())
    assert response.status_code == 200
    ids = [a["app_id"] for a in response.json()]
    assert ids == [pending["app_id"], contract["app_id"], review["app_id"]]


@pytest.mark.asyncio
async def test_review_queue_requires_role(client, wallet):
    await client.get("/api/v1/developers/me", headers=wallet.headers())
    response = await client.get("/api/v1/admin/apps/pending", headers=wallet.headers())
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"


@pytest.mark.asyncio
async def test_unknown_actor_is_forbidden(client, other_wallet):
    response = await client.get("/api/v1/admin/apps/pending", headers=other_wallet.headers())
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_approve_contract_moves_to_approved(client, moderator, wallet):
    app = await submit(client, wallet, contract_address=CONTRACT)
    assert app["status"] == "pending_contract"

    response = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/approve-contract", headers=moderator.headers()
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "approved"
    assert body["contract_verified"] is True
    assert body["verified"] is True


@pytest.mark.asyncio
async def test_approve_contract_without_contract(client, moderator, wallet):
    app = await submit(client, wallet)
    response = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/approve-contract", headers=moderator.headers()
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_approve_unknown_app(client, moderator):
    response = await client.post("/api/v1/admin/apps/app_missing/approve-contract", headers=moderator.headers())
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_set_status_reject_and_requeue(client, moderator, wallet):
    app = await submit(client, wallet)
    rejected = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/status", json={"status": "rejected"}, headers=moderator.headers()
    )
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["verified"] is False

    # The owner resubmits and the listing goes back into the queue
    resubmitted = await submit(client, wallet, review_message="fixed it")
    assert resubmitted["status"] == "pending_review"


@pytest.mark.asyncio
async def test_set_status_pending_contract_needs_contract(client, moderator, wallet):
    app = await submit(client, wallet)
    response = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/status",
        json={"status": "pending_contract"},
        headers=moderator.headers(),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_set_status_cannot_skip_contract_review(client, moderator, wallet, session_factory):
    app = await submit(client, wallet, contract_address=CONTRACT)
    assert app["status"] == "pending_contract"

    response = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/status", json={"status": "approved"}, headers=moderator.headers()
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"]["status"] == "pending_contract"

    async with session_factory() as session:
        row = await AppRepository(session).get(app["app_id"])
        assert row.status == "pending_contract"
        assert row.verified is False
        assert row.contract_verified is False


@pytest.mark.asyncio
async def test_set_status_approves_after_contract_review(client, moderator, wallet):
    app = await submit(client, wallet, contract_address=CONTRACT)
    await client.post(f"/api/v1/admin/apps/{app['app_id']}/approve-contract", headers=moderator.headers())
    await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/status", json={"status": "pending_contract"}, headers=moderator.headers()
    )

    response = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/status", json={"status": "approved"}, headers=moderator.headers()
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["contract_verified"] is True


@pytest.mark.asyncio
async def test_set_status_rejects_unknown_status(client, moderator, wallet):
    app = await submit(client, wallet)
    response = await client.post(
        f"/api/v1/admin/apps/{app['app_id']}/status", json={"status": "live"}, headers=moderator.headers()
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_grant_verification(client, moderator, wallet):
    response = await client.post(
        "/api/v1/admin/developers/grant-verification",
        json={"identity": wallet.address},
        headers=moderator.headers(),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["verified"] is True
    assert body["verification_status"] == "verified"
    assert body["verified_via"] == "admin_grant"
    assert body["wallet_proven"] is False

    app = await submit(client, wallet)
    assert app["status"] == "approved"


@pytest.mark.asyncio
async def test_revoke_grant_requires_admin(client, moderator, wallet):
    await client.post(
        "/api/v1/admin/developers/grant-verification",
        json={"identity": wallet.address},
        headers=moderator.headers(),
    )
    response = await client.post(
        "/api/v1/admin/developers/revoke-grant", json={"identity": wallet.address}, headers=moderator.headers()
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_revoke_grant(client, admin, wallet):
    await client.post(
        "/api/v1/admin/developers/grant-verification", json={"identity": wallet.address}, headers=admin.headers()
    )
    response = await client.post(
        "/api/v1/admin/developers/revoke-grant", json={"identity": wallet.address}, headers=admin.headers()
    )
    assert response.status_code == 200
    assert response.json()["verified"] is False
    assert response.json()["verification_status"] == "unverified"


@pytest.mark.asyncio
async def test_revoke_unknown_developer(client, admin):
    response = await client.post(
        "/api/v1/admin/developers/revoke-grant", json={"identity": "farcaster:404"}, headers=admin.headers()
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_set_admin_role(client, admin, wallet):
    response = await client.post(
        "/api/v1/admin/developers/role",
        json={"identity": wallet.address, "role": "MODERATOR"},
        headers=admin.headers(),
    )
    assert response.status_code == 200
    assert response.json()["admin_role"] == "MODERATOR"

    # New moderator can now see the queue
    queue = await client.get("/api/v1/admin/apps/pending", headers=wallet.headers())
    assert queue.status_code == 200

    cleared = await client.post(
        "/api/v1/admin/developers/role", json={"identity": wallet.address, "role": None}, headers=admin.headers()
    )
    assert cleared.json()["admin_role"] is None


@pytest.mark.asyncio
async def test_moderator_cannot_assign_roles(client, moderator, wallet):
    response = await client.post(
        "/api/v1/admin/developers/role",
        json={"identity": wallet.address, "role": "ADMIN"},
        headers=moderator.headers(),
    )
    assert response.status_code == 403
