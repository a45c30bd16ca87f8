"""
Autenticación y autorización.

Fase 1 (autenticación): se extrae el bearer token, se verifica su firma con
la clave del proceso y se busca el usuario por el ``sub`` del token.
Fase 2 (autorización): el rol del usuario se compara con el acceso que exige
la operación (público, usuario o admin).

La emisión (``issue_token``) y la verificación (``authenticate``) usan la
misma clave, el mismo algoritmo y los mismos claims.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import get_settings
from .errors import Forbidden, Unauthorized
from .repositories.base import UserRepository
from .schemas.user import Role, User

logger = logging.getLogger(__name__)

ALGO = "HS256"
pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(plain: str) -> str:
    return pwd.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd.verify(plain, hashed)


# ---------------- clave de firma ----------------

@dataclass(frozen=True)
class SigningKey:
    secret: str
    algorithm: str = ALGO
    expires_hours: int = 8


_signing_key: SigningKey | None = None
def get_signing_key() -> SigningKey:
    """Se carga una vez desde la configuración y no cambia después."""
    global _signing_key
    if _signing_key is None:
        settings = get_settings()
        _signing_key = SigningKey(settings.jwt_secret, ALGO, settings.jwt_expires_hours)
    return _signing_key


# ---------------- identidad y accesos ----------------

class Access(str, Enum):
    public = "public"
    user = "user"
    admin = "admin"


@dataclass(frozen=True)
class Identity:
    username: Optional[str]
    role: Optional[Role]

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(None, None)

    @property
    def is_anonymous(self) -> bool:
        return self.username is None


def satisfies(identity: Identity, access: Access) -> bool:
    if access == Access.public:
        return True
    if identity.role == Role.admin:
        return True
    return access == Access.user and identity.role == Role.user


class AuthGate:

    def __init__(self, users: UserRepository, key: Optional[SigningKey] = None):
        self.users = users
        self.key = key or get_signing_key()

    def issue_token(self, user: User, issued_at: Optional[datetime] = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": user.username,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + timedelta(hours=self.key.expires_hours)).timestamp()),
        }
        return jwt.encode(payload, self.key.secret, algorithm=self.key.algorithm)

    def embed_token(self, user: User, request):
        """Pone un token recién emitido como credencial bearer de la petición."""
        request.headers["Authorization"] = f"Bearer {self.issue_token(user)}"
        return request

    async def authenticate(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self.key.secret, algorithms=[self.key.algorithm])
        except JWTError:
            logger.warning("Token rechazado: firma inválida o caducado")
            raise Unauthorized()
        username = payload.get("sub")
        if not username or "iat" not in payload:
            raise Unauthorized()
        user = await self.users.find_by_username(str(username))
        if user is None:
            logger.warning(f"Token de un usuario desconocido: {username}")
            raise Unauthorized("Usuario no encontrado")
        return Identity(user.username, user.role)

    def authorize(self, identity: Identity, access: Access) -> Identity:
        if not satisfies(identity, access):
            logger.warning(f"Acceso {access.value} denegado a {identity.username}")
            raise Forbidden()
        return identity

    async def check(self, access: Access, token: Optional[str]) -> Identity:
        if token is None:
            if access != Access.public:
                raise Unauthorized("Not authenticated")
            return Identity.anonymous()
        identity = await self.authenticate(token)
        return self.authorize(identity, access)


def get_auth(request: Request) -> AuthGate:
    return request.app.state.auth


def require(access: Access):
    """
    Dependencia FastAPI que envuelve un endpoint: autentica, autoriza contra
    ``access`` y entrega la Identity al handler, que nunca ve el token.
    """
    async def _dependency(
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    ) -> Identity:
        token = credentials.credentials if credentials else None
        return await get_auth(request).check(access, token)

    return _dependency
