import pytest


@pytest.fixture
def admin_data():
    """The first registered account becomes admin."""
    return {
        "email": "admin@example.com",
        "password": "AdminPass123!",
        "full_name": "Admin User",
    }


@pytest.fixture
def member_data():
    return {
        "email": "user@example.com",
        "password": "UserPass123!",
        "full_name": "Regular User",
    }


async def register(test_client, data):
    response = await test_client.post("/auth/register", json=data)
    return response.json()


@pytest.mark.asyncio
async def test_get_all_users_requires_admin(test_client, login, admin_data, member_data):
    """Test that GET /admin/users is refused to regular users."""
    await register(test_client, admin_data)
    headers = await login(member_data)

    response = await test_client.get("/admin/users", headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_all_users_as_admin(test_client, login, admin_data, member_data):
    """Test GET /admin/users returns all users with their profile."""
    admin_headers = await login(admin_data)
    await register(test_client, member_data)

    response = await test_client.get("/admin/users", headers=admin_headers)

    assert response.status_code == 200
    users = response.json()
    assert {u["email"] for u in users} == {admin_data["email"], member_data["email"]}
    assert all(u["profile"]["plan"] == "free" for u in users)


@pytest.mark.asyncio
async def test_update_plan_resets_credit_allotment(test_client, login, admin_data, member_data):
    """Test PATCH /admin/users/{id}/plan grants the plan's credits."""
    admin_headers = await login(admin_data)
    member = await register(test_client, member_data)

    response = await test_client.patch(
        f"/admin/users/{member['id']}/plan",
        json={"plan": "premium_basic"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["profile"] == {"plan": "premium_basic", "credits_remaining": 20}


@pytest.mark.asyncio
async def test_update_plan_rejects_unknown_plan(test_client, login, admin_data, member_data):
    admin_headers = await login(admin_data)
    member = await register(test_client, member_data)

    response = await test_client.patch(
        f"/admin/users/{member['id']}/plan",
        json={"plan": "platinum"},
        headers=admin_headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_credits(test_client, login, admin_data, member_data):
    """Test PATCH /admin/users/{id}/credits overwrites the balance."""
    admin_headers = await login(admin_data)
    member = await register(test_client, member_data)

    response = await test_client.patch(
        f"/admin/users/{member['id']}/credits",
        json={"credits_remaining": 0},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["profile"]["credits_remaining"] == 0


@pytest.mark.asyncio
async def test_update_credits_rejects_negative_balance(test_client, login, admin_data, member_data):
    admin_headers = await login(admin_data)
    member = await register(test_client, member_data)

    response = await test_client.patch(
        f"/admin/users/{member['id']}/credits",
        json={"credits_remaining": -1},
        headers=admin_headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_credits_returns_404_for_unknown_user(test_client, login, admin_data):
    admin_headers = await login(admin_data)

    response = await test_client.patch(
        "/admin/users/507f1f77bcf86cd799439011/credits",
        json={"credits_remaining": 5},
        headers=admin_headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_user_active(test_client, login, admin_data, member_data):
    """Test POST /admin/users/{id}/toggle-active flips the flag and blocks login."""
    admin_headers = await login(admin_data)
    member = await register(test_client, member_data)

    response = await test_client.post(
        f"/admin/users/{member['id']}/toggle-active",
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False

    login_response = await test_client.post(
        "/auth/login",
        json={"email": member_data["email"], "password": member_data["password"]},
    )
    assert login_response.status_code == 403
