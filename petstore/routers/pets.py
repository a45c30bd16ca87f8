import logging
from fastapi import APIRouter, Depends, Query, Request, status
from typing import List, Optional

from ..errors import InvalidRequest
from ..schemas.pet import Pet, PetStatus
from ..security import Access, Identity, require
from ..services.pets import PetService

logger = logging.getLogger(__name__)

router = APIRouter()

def get_pet_service(request: Request) -> PetService:
    return request.app.state.pet_service

def _split(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]

@router.post("", response_model=Pet, status_code=status.HTTP_201_CREATED)
async def create_pet(
    payload: Pet,
    current: Identity = Depends(require(Access.user)),
    pets: PetService = Depends(get_pet_service),
):
    pet = await pets.create(payload)
    logger.info(f"Mascota {pet.id} creada por {current.username}")
    return pet

@router.get("", response_model=List[Pet])
async def list_pets(
    page_size: Optional[int] = Query(None, alias="pageSize", ge=0),
    offset: int = Query(0, ge=0),
    _: Identity = Depends(require(Access.public)),
    pets: PetService = Depends(get_pet_service),
):
    return await pets.list(page_size, offset)

# GET /pets/findByTags?tags=dog,cat
@router.get("/findByTags", response_model=List[Pet])
async def find_pets_by_tags(
    tags: str = Query(""),
    _: Identity = Depends(require(Access.public)),
    pets: PetService = Depends(get_pet_service),
):
    return await pets.find_by_tag(_split(tags))

# GET /pets/findByStatus?status=Available,Pending
@router.get("/findByStatus", response_model=List[Pet])
async def find_pets_by_status(
    status_: str = Query("", alias="status"),
    _: Identity = Depends(require(Access.public)),
    pets: PetService = Depends(get_pet_service),
):
    try:
        statuses = [PetStatus(s) for s in _split(status_)]
    except ValueError:
        raise InvalidRequest(f"status inválido: {status_}")
    return await pets.find_by_status(statuses)

@router.get("/{pet_id}", response_model=Pet)
async def get_pet(
    pet_id: int,
    _: Identity = Depends(require(Access.public)),
    pets: PetService = Depends(get_pet_service),
):
    return await pets.get(pet_id)

@router.put("/{pet_id}", response_model=Pet)
async def update_pet(
    pet_id: int,
    payload: Pet,
    current: Identity = Depends(require(Access.user)),
    pets: PetService = Depends(get_pet_service),
):
    # el id de la ruta manda sobre el del body
    pet = await pets.update(payload.model_copy(update={"id": pet_id}))
    logger.info(f"Mascota {pet.id} modificada por {current.username}")
    return pet

@router.delete("/{pet_id}", status_code=status.HTTP_200_OK)
async def delete_pet(
    pet_id: int,
    current: Identity = Depends(require(Access.admin)),
    pets: PetService = Depends(get_pet_service),
):
    await pets.delete(pet_id)
    logger.info(f"Mascota {pet_id} borrada por {current.username}")
    return None
