from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from headhunter_trace.config import get_settings

settings = get_settings()

client: AsyncIOMotorClient | None = None
db: AsyncIOMotorDatabase | None = None


async def connect_to_mongo() -> None:
    global client, db
    client = AsyncIOMotorClient(settings.mongodb_url)
    db = client[settings.mongodb_db_name]


async def close_mongo_connection() -> None:
    global client
    if client:
        client.close()


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create the indexes the search history and result lookups rely on."""
    await database["users"].create_index("email", unique=True)
    await database["searches"].create_index([("user_id", 1), ("created_at", -1)])
    await database["search_results"].create_index("search_id")


def get_database() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo first.")
    return db
