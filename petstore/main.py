from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .config import Settings, get_settings
from .errors import PetstoreError
from .repositories.base import PetRepository, UserRepository
from .routers import pets, users
from .security import AuthGate
from .services.pets import PetService
from .services.users import UserService
from .validation import PetValidation
import logging

# Configurar logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_repositories(settings: Settings) -> tuple[PetRepository, UserRepository]:
    if settings.repository == "mongo":
        from .db import get_db
        from .repositories.mongo import MongoPetRepository, MongoUserRepository
        db = get_db(settings)
        return MongoPetRepository(db), MongoUserRepository(db)
    if settings.repository != "memory":
        raise ValueError(f"PET_REPOSITORY desconocido: {settings.repository}")
    from .repositories.memory import InMemoryPetRepository, InMemoryUserRepository
    return InMemoryPetRepository(), InMemoryUserRepository()


async def petstore_error_handler(request: Request, exc: PetstoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


def create_app(
    settings: Settings | None = None,
    pet_repository: PetRepository | None = None,
    user_repository: UserRepository | None = None,
) -> FastAPI:
    """
    Raíz de composición: los repositorios se inyectan en validación y
    servicios aquí, y en ningún otro sitio.
    """
    settings = settings or get_settings()
    if pet_repository is None or user_repository is None:
        default_pets, default_users = build_repositories(settings)
        pet_repository = pet_repository or default_pets
        user_repository = user_repository or default_users

    auth = AuthGate(user_repository)
    user_service = UserService(user_repository, auth)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.repository == "mongo":
            from .db import ensure_indexes, get_db
            await ensure_indexes(get_db(settings))
        if settings.admin_username and settings.admin_password:
            await user_service.seed_admin(settings.admin_username, settings.admin_password)
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.pet_repository = pet_repository
    app.state.user_repository = user_repository
    app.state.auth = auth
    app.state.pet_service = PetService(pet_repository, PetValidation(pet_repository))
    app.state.user_service = user_service
    app.add_exception_handler(PetstoreError, petstore_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok", "env": settings.env, "repository": settings.repository}

    # Routers
    app.include_router(pets.router, prefix="/pets", tags=["pets"])
    app.include_router(users.router, prefix="/users", tags=["users"])
    logger.info(f"{settings.app_name} listo (repositorio: {settings.repository})")
    return app


app = create_app()
