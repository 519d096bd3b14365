import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from headhunter_trace.core.interfaces import IUserRepository
from headhunter_trace.users.model import Plan

logger = logging.getLogger(__name__)


def _object_id(user_id: str) -> ObjectId | None:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class UserRepository(IUserRepository):
    """MongoDB repository for accounts and their credit balance."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db["users"]

    async def create(self, user_data: dict[str, Any]) -> dict[str, Any]:
        result = await self._collection.insert_one(user_data)
        user_data["_id"] = result.inserted_id
        return user_data

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        return await self._collection.find_one({"email": email})

    async def get_by_id(self, user_id: str) -> dict[str, Any] | None:
        oid = _object_id(user_id)
        if oid is None:
            return None
        return await self._collection.find_one({"_id": oid})

    async def count(self) -> int:
        return await self._collection.count_documents({})

    async def get_all_users(self) -> list[dict[str, Any]]:
        """Get all users."""
        cursor = self._collection.find({})
        return await cursor.to_list(length=None)

    async def decrement_credits(self, user_id: str) -> dict[str, Any] | None:
        """Spend one credit in a single atomic update.

        The ``credits_remaining > 0`` filter makes the decrement fail instead of
        going negative when two searches race for the last credit.
        """
        oid = _object_id(user_id)
        if oid is None:
            return None
        user = await self._collection.find_one_and_update(
            {"_id": oid, "credits_remaining": {"$gt": 0}},
            {
                "$inc": {"credits_remaining": -1},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER,
        )
        if user is None:
            logger.info(f"Credit decrement refused for user {user_id}")
        return user

    async def update(self, user_id: str, update_data: dict[str, Any]) -> dict[str, Any] | None:
        """Update a user by ID."""
        oid = _object_id(user_id)
        if oid is None:
            return None
        update_data["updated_at"] = datetime.now(timezone.utc)
        return await self._collection.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )

    async def set_credits(self, user_id: str, credits: int) -> dict[str, Any] | None:
        """Overwrite the credit balance."""
        return await self.update(user_id, {"credits_remaining": max(0, credits)})

    async def set_plan(self, user_id: str, plan: Plan, credits: int) -> dict[str, Any] | None:
        """Move a user to another plan and reset the balance to its allotment."""
        return await self.update(
            user_id,
            {"plan": plan.value, "credits_remaining": max(0, credits)},
        )
