"""
Repositorios en memoria (implementación de referencia).

Un único lock protege el mapa y el contador de ids: las escrituras son
atómicas frente a otros hilos o tareas y las lecturas nunca ven un registro
a medio escribir. Se guardan y devuelven copias, así que nadie fuera del
repositorio puede mutar lo almacenado.
"""
import threading
from typing import Dict, Iterable, List, Optional

from ..errors import AlreadyExists
from ..schemas.pet import Pet, PetStatus
from ..schemas.user import User
from .base import PetRepository, UserRepository


class InMemoryPetRepository(PetRepository):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pets: Dict[int, Pet] = {}
        self._next_id = 1

    def _snapshot(self) -> List[Pet]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._pets.values()]

    async def get(self, pet_id: int) -> Optional[Pet]:
        with self._lock:
            pet = self._pets.get(pet_id)
            return pet.model_copy(deep=True) if pet else None

    async def create(self, pet: Pet) -> Pet:
        with self._lock:
            if pet.id is None:
                pet = pet.model_copy(update={"id": self._next_id}, deep=True)
            else:
                pet = pet.model_copy(deep=True)
            # un id fijado por el llamante nunca se vuelve a asignar
            self._next_id = max(self._next_id, pet.id + 1)
            self._pets[pet.id] = pet
            return pet.model_copy(deep=True)

    async def update(self, pet: Pet) -> Optional[Pet]:
        if pet.id is None:
            return None
        with self._lock:
            if pet.id not in self._pets:
                return None
            self._pets[pet.id] = pet.model_copy(deep=True)
            return pet.model_copy(deep=True)

    async def delete(self, pet_id: int) -> None:
        with self._lock:
            self._pets.pop(pet_id, None)

    async def list(self, page_size: Optional[int] = None, offset: int = 0) -> List[Pet]:
        pets = self._snapshot()[offset:]
        return pets if page_size is None else pets[:page_size]

    async def find_by_tag(self, tags: Iterable[str]) -> List[Pet]:
        wanted = set(tags)
        return [p for p in self._snapshot() if p.tags & wanted]

    async def find_by_status(self, statuses: Iterable[PetStatus]) -> List[Pet]:
        wanted = set(statuses)
        return [p for p in self._snapshot() if p.status in wanted]

    async def find_by_name(self, name: str) -> List[Pet]:
        return [p for p in self._snapshot() if p.name == name]


class InMemoryUserRepository(UserRepository):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._next_id = 1

    async def create(self, user: User) -> User:
        with self._lock:
            if any(u.username == user.username for u in self._users.values()):
                raise AlreadyExists(f"El usuario {user.username} ya existe")
            user = user.model_copy(update={"id": self._next_id}, deep=True)
            self._next_id += 1
            self._users[user.id] = user
            return user.model_copy(deep=True)

    async def get(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    async def find_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy(deep=True)
        return None

    async def list(self) -> List[User]:
        with self._lock:
            return [u.model_copy(deep=True) for u in self._users.values()]
