from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from .config import Settings

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None

def get_db(settings: Settings) -> AsyncIOMotorDatabase:
    global _client, _db
    if _db is None:
        _client = AsyncIOMotorClient(settings.mongodb_uri)
        _db = _client[settings.db_name]
    return _db

async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    await db.users.create_index("username", unique=True)
    await db.pets.create_index([("tags", 1)])
    await db.pets.create_index([("status", 1)])
    await db.pets.create_index([("name", 1)])
    # contadores creados de antemano: el primer $inc nunca compite por el upsert
    for name in ("pets", "users"):
        await db.counters.update_one({"_id": name}, {"$setOnInsert": {"seq": 0}}, upsert=True)
