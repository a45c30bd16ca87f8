from pydantic import BaseModel, ConfigDict, Field, field_serializer
from enum import Enum
from typing import Optional, Set

class PetStatus(str, Enum):
    available = "Available"
    pending = "Pending"
    adopted = "Adopted"

class Pet(BaseModel):
    """
    Mascota del catálogo.

    El mapeo campo -> clave JSON es fijo y se define aquí una sola vez
    (``photo_urls`` viaja como ``photoUrls``). ``id`` lo asigna el
    repositorio en el alta y no cambia después.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=80)
    category: str = Field("", max_length=80)
    bio: str = ""
    status: PetStatus = PetStatus.available
    tags: Set[str] = Field(default_factory=set)
    photo_urls: Set[str] = Field(default_factory=set, alias="photoUrls")

    @field_serializer("tags", "photo_urls")
    def _sorted(self, values: Set[str]) -> list[str]:
        # orden estable en las respuestas
        return sorted(values)
