"""
Configuración de pytest para tests
"""
import asyncio
import pytest
from fastapi.testclient import TestClient

from petstore.config import Settings
from petstore.main import create_app
from petstore.repositories.memory import InMemoryPetRepository, InMemoryUserRepository
from petstore.schemas.user import Role, User


@pytest.fixture
def pet_repo():
    return InMemoryPetRepository()

@pytest.fixture
def user_repo():
    return InMemoryUserRepository()

@pytest.fixture
def app(pet_repo, user_repo):
    """App nueva por test, con repositorios en memoria propios"""
    return create_app(Settings(repository="memory"), pet_repo, user_repo)

@pytest.fixture
def client(app):
    """Fixture para cliente de test de FastAPI"""
    return TestClient(app)

@pytest.fixture
def auth(app):
    return app.state.auth

@pytest.fixture
def user(user_repo):
    """Usuario con rol User"""
    return asyncio.run(user_repo.create(User(username="ana", role=Role.user)))

@pytest.fixture
def admin(user_repo):
    """Usuario con rol Admin"""
    return asyncio.run(user_repo.create(User(username="root", role=Role.admin)))

@pytest.fixture
def send(client, auth):
    """Envía una petición con el token de ``as_user`` embebido (si se indica)"""
    def _send(method: str, url: str, as_user: User | None = None, **kwargs):
        request = client.build_request(method, url, **kwargs)
        if as_user is not None:
            request = auth.embed_token(as_user, request)
        return client.send(request)
    return _send

@pytest.fixture
def rex():
    return {
        "name": "Rex",
        "category": "dog",
        "bio": "Buen chico",
        "status": "Available",
        "tags": ["dog", "big"],
        "photoUrls": ["/media/pets/rex.jpg"],
    }
