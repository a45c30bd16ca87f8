import asyncio
import threading
import pytest

from petstore.repositories.memory import InMemoryPetRepository
from petstore.schemas.pet import Pet, PetStatus


@pytest.mark.asyncio
async def test_create_assigns_monotonic_ids(pet_repo):
    a = await pet_repo.create(Pet(name="A"))
    b = await pet_repo.create(Pet(name="B"))
    assert (a.id, b.id) == (1, 2)

    await pet_repo.delete(b.id)
    c = await pet_repo.create(Pet(name="C"))
    # nunca se reutiliza un id borrado
    assert c.id == 3

@pytest.mark.asyncio
async def test_create_then_get_roundtrip(pet_repo):
    pet = Pet(name="Rex", category="dog", tags={"dog", "big"}, photo_urls={"/a.jpg"})
    created = await pet_repo.create(pet)
    assert await pet_repo.get(created.id) == pet.model_copy(update={"id": created.id})

@pytest.mark.asyncio
async def test_create_with_existing_id_is_upsert(pet_repo):
    """Alta con id fijado sobre un id ya ocupado: reemplaza el registro"""
    first = await pet_repo.create(Pet(name="Rex"))
    again = await pet_repo.create(Pet(id=first.id, name="Max"))
    assert again.id == first.id
    assert (await pet_repo.get(first.id)).name == "Max"
    assert len(await pet_repo.list()) == 1

@pytest.mark.asyncio
async def test_create_with_id_bumps_sequence(pet_repo):
    await pet_repo.create(Pet(id=10, name="Ten"))
    fresh = await pet_repo.create(Pet(name="Fresh"))
    assert fresh.id == 11

@pytest.mark.asyncio
async def test_update_missing_does_nothing(pet_repo):
    await pet_repo.create(Pet(name="Rex"))
    assert await pet_repo.update(Pet(id=42, name="Ghost")) is None
    assert await pet_repo.update(Pet(name="NoId")) is None
    assert [p.name for p in await pet_repo.list()] == ["Rex"]

@pytest.mark.asyncio
async def test_update_replaces_record(pet_repo):
    created = await pet_repo.create(Pet(name="Rex", tags={"dog"}))
    updated = await pet_repo.update(created.model_copy(update={"tags": {"puppy"}}))
    assert updated.tags == {"puppy"}
    assert (await pet_repo.get(created.id)).tags == {"puppy"}

@pytest.mark.asyncio
async def test_delete_is_idempotent(pet_repo):
    created = await pet_repo.create(Pet(name="Rex"))
    await pet_repo.delete(created.id)
    assert await pet_repo.get(created.id) is None
    await pet_repo.delete(created.id)
    assert await pet_repo.get(created.id) is None

@pytest.mark.asyncio
async def test_list_keeps_insertion_order_and_pages(pet_repo):
    for name in ["a", "b", "c", "d"]:
        await pet_repo.create(Pet(name=name))
    assert [p.name for p in await pet_repo.list()] == ["a", "b", "c", "d"]
    assert [p.name for p in await pet_repo.list(2, 1)] == ["b", "c"]
    assert [p.name for p in await pet_repo.list(10, 3)] == ["d"]
    assert await pet_repo.list(0) == []

@pytest.mark.asyncio
async def test_find_by_tag_is_union(pet_repo):
    dog = await pet_repo.create(Pet(name="Rex", tags={"dog", "big"}))
    cat = await pet_repo.create(Pet(name="Tom", tags={"cat"}))
    await pet_repo.create(Pet(name="Nemo", tags={"fish"}))

    assert await pet_repo.find_by_tag({"dog"}) == [dog]
    assert await pet_repo.find_by_tag({"big", "dog", "cat"}) == [dog, cat]
    assert await pet_repo.find_by_tag({"bird"}) == []

@pytest.mark.asyncio
async def test_find_by_status(pet_repo):
    await pet_repo.create(Pet(name="Rex"))
    lola = await pet_repo.create(Pet(name="Lola", status=PetStatus.adopted))
    assert await pet_repo.find_by_status([PetStatus.adopted]) == [lola]
    assert len(await pet_repo.find_by_status([PetStatus.adopted, PetStatus.available])) == 2

@pytest.mark.asyncio
async def test_stored_records_are_copies(pet_repo):
    created = await pet_repo.create(Pet(name="Rex", tags={"dog"}))
    created.tags.add("mutado")
    assert (await pet_repo.get(created.id)).tags == {"dog"}

def test_concurrent_creates_get_unique_ids():
    """Altas desde varios hilos nunca comparten id"""
    repo = InMemoryPetRepository()
    ids: list[int] = []
    ids_lock = threading.Lock()

    def worker(n: int):
        for i in range(50):
            pet = asyncio.run(repo.create(Pet(name=f"{n}-{i}")))
            with ids_lock:
                ids.append(pet.id)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ids) == 400
    assert len(set(ids)) == 400
    assert len(asyncio.run(repo.list())) == 400
