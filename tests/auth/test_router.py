import pytest


@pytest.mark.asyncio
async def test_register_endpoint_creates_user_with_free_profile(test_client, user_data):
    """Test POST /auth/register creates a free account with 3 credits."""
    response = await test_client.post("/auth/register", json=user_data)

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == user_data["email"]
    assert data["full_name"] == user_data["full_name"]
    assert data["profile"] == {"plan": "free", "credits_remaining": 3}
    assert "id" in data
    assert "password" not in data
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_endpoint_returns_422_for_invalid_data(test_client):
    """Test POST /auth/register returns 422 for invalid data."""
    response = await test_client.post(
        "/auth/register",
        json={"email": "invalid-email", "password": "pass"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_endpoint_returns_409_for_existing_email(test_client, user_data):
    """Test POST /auth/register returns 409 for duplicate email."""
    await test_client.post("/auth/register", json=user_data)

    response = await test_client.post("/auth/register", json=user_data)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_login_endpoint_returns_tokens(test_client, user_data):
    """Test POST /auth/login returns tokens for valid credentials."""
    await test_client.post("/auth/register", json=user_data)

    response = await test_client.post(
        "/auth/login",
        json={"email": user_data["email"], "password": user_data["password"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_endpoint_returns_401_for_bad_credentials(test_client, user_data):
    """Test POST /auth/login returns 401 for invalid credentials."""
    await test_client.post("/auth/register", json=user_data)

    response = await test_client.post(
        "/auth/login",
        json={"email": user_data["email"], "password": "wrongpassword"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_endpoint_returns_403_for_deactivated_user(test_client, mock_db, user_data):
    """Test POST /auth/login returns 403 for a deactivated account."""
    await test_client.post("/auth/register", json=user_data)
    await mock_db["users"].update_one(
        {"email": user_data["email"]},
        {"$set": {"is_active": False}},
    )

    response = await test_client.post(
        "/auth/login",
        json={"email": user_data["email"], "password": user_data["password"]},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_me_endpoint_returns_user(test_client, login, user_data):
    """Test GET /auth/me returns current user with its credit profile."""
    headers = await login(user_data)

    response = await test_client.get("/auth/me", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == user_data["email"]
    assert data["profile"]["credits_remaining"] == 3


@pytest.mark.asyncio
async def test_me_endpoint_rejects_missing_token(test_client):
    """Test GET /auth/me is refused without token."""
    response = await test_client.get("/auth/me")

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_me_endpoint_returns_401_with_invalid_token(test_client):
    """Test GET /auth/me returns 401 with invalid token."""
    response = await test_client.get(
        "/auth/me",
        headers={"Authorization": "Bearer invalidtoken"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_endpoint_returns_new_access_token(test_client, user_data):
    """Test POST /auth/refresh returns new access token."""
    await test_client.post("/auth/register", json=user_data)
    login_response = await test_client.post(
        "/auth/login",
        json={"email": user_data["email"], "password": user_data["password"]},
    )
    refresh_token = login_response.json()["refresh_token"]

    response = await test_client.post("/auth/refresh", json={"refresh_token": refresh_token})

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_refresh_endpoint_returns_401_for_invalid_token(test_client):
    """Test POST /auth/refresh returns 401 for invalid token."""
    response = await test_client.post("/auth/refresh", json={"refresh_token": "invalidtoken"})

    assert response.status_code == 401
