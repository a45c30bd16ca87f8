from typing import Iterable, List, Optional

from ..errors import InvalidRequest, NotFound
from ..repositories.base import PetRepository
from ..schemas.pet import Pet, PetStatus
from ..validation import PetValidation


class PetService:
    """Único punto de entrada de los endpoints: validación + repositorio."""

    def __init__(self, repository: PetRepository, validation: PetValidation):
        self.repository = repository
        self.validation = validation

    async def create(self, pet: Pet) -> Pet:
        await self.validation.validate_new(pet)
        return await self.repository.create(pet)

    async def update(self, pet: Pet) -> Pet:
        await self.validation.validate_update(pet)
        updated = await self.repository.update(pet)
        if updated is None:
            raise NotFound(f"Mascota {pet.id} no encontrada")
        return updated

    async def get(self, pet_id: int) -> Pet:
        pet = await self.repository.get(pet_id)
        if pet is None:
            raise NotFound(f"Mascota {pet_id} no encontrada")
        return pet

    async def delete(self, pet_id: int) -> None:
        await self.repository.delete(pet_id)

    async def list(self, page_size: Optional[int] = None, offset: int = 0) -> List[Pet]:
        if (page_size is not None and page_size < 0) or offset < 0:
            raise InvalidRequest("pageSize y offset no pueden ser negativos")
        return await self.repository.list(page_size, offset)

    async def find_by_tag(self, tags: Iterable[str]) -> List[Pet]:
        tags = {t for t in tags if t}
        if not tags:
            raise InvalidRequest("Hay que indicar al menos un tag")
        return await self.repository.find_by_tag(tags)

    async def find_by_status(self, statuses: Iterable[PetStatus]) -> List[Pet]:
        statuses = set(statuses)
        if not statuses:
            raise InvalidRequest("Hay que indicar al menos un estado")
        return await self.repository.find_by_status(statuses)
