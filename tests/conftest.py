import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient
from httpx import AsyncClient, ASGITransport

from headhunter_trace.main import app
from headhunter_trace.database import get_database
from headhunter_trace.searches.schemas import (
    ExposureLevel,
    ProfileResult,
    ResultType,
    SearchData,
    SearchSummary,
)


@pytest_asyncio.fixture
async def mock_db():
    """Provide a mock MongoDB database for testing."""
    client = AsyncMongoMockClient()
    db = client["test_db"]
    yield db
    client.close()


@pytest_asyncio.fixture
async def test_client(mock_db):
    """Provide an async test client with mocked database."""
    app.dependency_overrides[get_database] = lambda: mock_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def user_data():
    """Sample user data for testing."""
    return {
        "email": "test@example.com",
        "password": "SecurePass123!",
        "full_name": "Test User",
    }


@pytest.fixture
def login(test_client):
    """Register (if needed) and login, returning auth headers."""

    async def _login(data: dict) -> dict[str, str]:
        await test_client.post("/auth/register", json=data)
        response = await test_client.post(
            "/auth/login",
            json={"email": data["email"], "password": data["password"]},
        )
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
def make_search_data():
    """Build SearchData with ``count`` fictional results."""

    def _make(count: int = 3, **overrides) -> SearchData:
        results = [
            ProfileResult(
                result_type=ResultType.SOCIAL_MEDIA,
                platform=f"Platform{i}",
                profile_url=f"https://example.com/janedoe{i}",
                username=f"janedoe{i}",
                display_name="Jane Doe",
                bio="Coffee enthusiast and weekend hiker.",
                location="Lisbon, Portugal",
                followers_count=1200 + i,
                posts_count=34,
                confidence_score=0.8,
            )
            for i in range(count)
        ]
        summary = {
            "total_found": count,
            "exposure_level": ExposureLevel.MEDIUM,
            "platforms_found": [r.platform for r in results],
            "key_insights": ["Consistent username across platforms"],
        }
        summary.update(overrides)
        return SearchData(results=results, summary=SearchSummary(**summary))

    return _make


class StubAnalysis:
    """In-memory analysis function recording every invocation."""

    def __init__(self, data: SearchData | None = None, error: Exception | None = None):
        self.data = data
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    async def invoke(self, query: str, search_id: str, user_id: str) -> SearchData:
        self.calls.append((query, search_id, user_id))
        if self.error is not None:
            raise self.error
        return self.data

    async def close(self) -> None:
        pass


@pytest.fixture
def stub_analysis(make_search_data):
    """Analysis stub returning three results by default."""
    return StubAnalysis(data=make_search_data(3))
