"""
Reglas de negocio que deciden si un alta o una modificación puede seguir.

Solo lee del repositorio; nunca escribe. El chequeo y la escritura posterior
no son atómicos: dos altas concurrentes con el mismo nombre pueden pasar
ambas la validación.
"""
import logging

from .errors import AlreadyExists, InvalidRequest
from .repositories.base import PetRepository
from .schemas.pet import Pet

logger = logging.getLogger(__name__)


class PetValidation:

    def __init__(self, repository: PetRepository):
        self.repository = repository

    async def validate_new(self, pet: Pet) -> None:
        # con id fijado por el llamante el alta es un upsert: no se mira el nombre
        if pet.id is not None:
            return
        if await self.repository.find_by_name(pet.name):
            logger.warning(f"Alta rechazada: ya existe una mascota llamada {pet.name!r}")
            raise AlreadyExists(f"Ya existe una mascota llamada {pet.name}")

    async def validate_update(self, pet: Pet) -> None:
        """La existencia la confirma luego el propio update del repositorio."""
        if pet.id is None:
            raise InvalidRequest("La mascota no tiene id")
        clash = [p for p in await self.repository.find_by_name(pet.name) if p.id != pet.id]
        if clash:
            logger.warning(f"Modificación rechazada: el nombre {pet.name!r} ya lo usa la mascota {clash[0].id}")
            raise AlreadyExists(f"Ya existe una mascota llamada {pet.name}")
