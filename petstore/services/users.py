import logging
from typing import List, Tuple

from ..errors import AlreadyExists, NotFound, Unauthorized
from ..repositories.base import UserRepository
from ..schemas.user import Role, Signup, User
from ..security import AuthGate, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, repository: UserRepository, auth: AuthGate):
        self.repository = repository
        self.auth = auth

    async def signup(self, payload: Signup) -> User:
        doc = payload.model_dump(exclude={"password"})
        doc["password_hash"] = hash_password(payload.password)
        # el rol no se elige al registrarse
        user = await self.repository.create(User(**doc, role=Role.user))
        logger.info(f"Usuario registrado: {user.username}")
        return user

    async def login(self, username: str, password: str) -> Tuple[User, str]:
        user = await self.repository.find_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Login fallido para {username}")
            raise Unauthorized("Credenciales inválidas")
        return user, self.auth.issue_token(user)

    async def get_by_username(self, username: str) -> User:
        user = await self.repository.find_by_username(username)
        if user is None:
            raise NotFound(f"Usuario {username} no encontrado")
        return user

    async def list(self) -> List[User]:
        return await self.repository.list()

    async def seed_admin(self, username: str, password: str) -> User:
        existing = await self.repository.find_by_username(username)
        if existing is not None:
            return existing
        try:
            user = await self.repository.create(
                User(username=username, password_hash=hash_password(password), role=Role.admin)
            )
        except AlreadyExists:
            # otro arranque lo creó entre medias
            return await self.get_by_username(username)
        logger.info(f"Admin inicial creado: {username}")
        return user
