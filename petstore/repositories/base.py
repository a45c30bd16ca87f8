"""
Contratos de los repositorios.

Ninguna operación lanza por "no encontrado": la ausencia se devuelve como
``None`` (o lista vacía). Borrar un id inexistente no es un error.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..schemas.pet import Pet, PetStatus
from ..schemas.user import User


class PetRepository(ABC):

    @abstractmethod
    async def get(self, pet_id: int) -> Optional[Pet]:
        ...

    @abstractmethod
    async def create(self, pet: Pet) -> Pet:
        """
        Sin id: asigna uno nuevo (monótono, nunca reutilizado).
        Con id: upsert por id, misma ruta que update pero sin exigir que exista.
        """

    @abstractmethod
    async def update(self, pet: Pet) -> Optional[Pet]:
        """Reemplaza el registro; devuelve None (sin mutar nada) si el id no existe."""

    @abstractmethod
    async def delete(self, pet_id: int) -> None:
        ...

    @abstractmethod
    async def list(self, page_size: Optional[int] = None, offset: int = 0) -> List[Pet]:
        """Orden de inserción. ``page_size=None`` devuelve todo desde ``offset``."""

    @abstractmethod
    async def find_by_tag(self, tags: Iterable[str]) -> List[Pet]:
        """Mascotas con al menos uno de los tags (unión), cada una una sola vez."""

    @abstractmethod
    async def find_by_status(self, statuses: Iterable[PetStatus]) -> List[Pet]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> List[Pet]:
        ...


class UserRepository(ABC):

    @abstractmethod
    async def create(self, user: User) -> User:
        """Asigna id; lanza AlreadyExists si el userName ya está en uso."""

    @abstractmethod
    async def get(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def list(self) -> List[User]:
        ...
