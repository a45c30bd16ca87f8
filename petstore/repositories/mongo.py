"""
Repositorios sobre MongoDB (motor).

Los ids numéricos salen de la colección ``counters`` con ``$inc``; un id
fijado por el llamante sube el contador con ``$max`` para que nunca se
reasigne. Cada escritura es una única operación atómica de documento.
"""
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..errors import AlreadyExists
from ..schemas.pet import Pet, PetStatus
from ..schemas.user import User
from .base import PetRepository, UserRepository


async def _next_sequence(db: AsyncIOMotorDatabase, name: str) -> int:
    doc = await db.counters.find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(doc["seq"])


def _pet_doc(pet: Pet) -> Dict[str, Any]:
    doc = pet.model_dump(mode="json", exclude={"id"})
    doc["_id"] = pet.id
    return doc


def _pet_out(doc: Dict[str, Any]) -> Pet:
    doc = dict(doc)
    doc["id"] = doc.pop("_id")
    return Pet.model_validate(doc)


class MongoPetRepository(PetRepository):

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def get(self, pet_id: int) -> Optional[Pet]:
        doc = await self.db.pets.find_one({"_id": pet_id})
        return _pet_out(doc) if doc else None

    async def create(self, pet: Pet) -> Pet:
        if pet.id is None:
            pet = pet.model_copy(update={"id": await _next_sequence(self.db, "pets")})
        else:
            await self.db.counters.update_one(
                {"_id": "pets"}, {"$max": {"seq": pet.id}}, upsert=True
            )
        await self.db.pets.replace_one({"_id": pet.id}, _pet_doc(pet), upsert=True)
        return pet

    async def update(self, pet: Pet) -> Optional[Pet]:
        if pet.id is None:
            return None
        res = await self.db.pets.replace_one({"_id": pet.id}, _pet_doc(pet))
        if res.matched_count == 0:
            return None
        return pet

    async def delete(self, pet_id: int) -> None:
        await self.db.pets.delete_one({"_id": pet_id})

    async def list(self, page_size: Optional[int] = None, offset: int = 0) -> List[Pet]:
        cursor = self.db.pets.find().sort("_id", 1).skip(offset)
        if page_size is not None:
            cursor = cursor.limit(page_size)
        return [_pet_out(d) for d in await cursor.to_list(None)]

    async def find_by_tag(self, tags: Iterable[str]) -> List[Pet]:
        docs = await self.db.pets.find({"tags": {"$in": list(tags)}}).sort("_id", 1).to_list(None)
        return [_pet_out(d) for d in docs]

    async def find_by_status(self, statuses: Iterable[PetStatus]) -> List[Pet]:
        values = [PetStatus(s).value for s in statuses]
        docs = await self.db.pets.find({"status": {"$in": values}}).sort("_id", 1).to_list(None)
        return [_pet_out(d) for d in docs]

    async def find_by_name(self, name: str) -> List[Pet]:
        docs = await self.db.pets.find({"name": name}).to_list(None)
        return [_pet_out(d) for d in docs]


def _user_out(doc: Dict[str, Any]) -> User:
    doc = dict(doc)
    doc["id"] = doc.pop("_id")
    return User.model_validate(doc)


class MongoUserRepository(UserRepository):

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def create(self, user: User) -> User:
        user = user.model_copy(update={"id": await _next_sequence(self.db, "users")})
        doc = user.model_dump(mode="json", exclude={"id"})
        doc["_id"] = user.id
        try:
            await self.db.users.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExists(f"El usuario {user.username} ya existe")
        return user

    async def get(self, user_id: int) -> Optional[User]:
        doc = await self.db.users.find_one({"_id": user_id})
        return _user_out(doc) if doc else None

    async def find_by_username(self, username: str) -> Optional[User]:
        doc = await self.db.users.find_one({"username": username})
        return _user_out(doc) if doc else None

    async def list(self) -> List[User]:
        docs = await self.db.users.find().sort("_id", 1).to_list(None)
        return [_user_out(d) for d in docs]
