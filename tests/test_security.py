"""
Tests del control de acceso (token + roles)
"""
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from jose import jwt

from petstore.errors import Forbidden, Unauthorized
from petstore.repositories.memory import InMemoryUserRepository
from petstore.schemas.user import Role, User
from petstore.security import (
    Access, AuthGate, Identity, SigningKey, get_signing_key, hash_password,
    satisfies, verify_password,
)

KEY = SigningKey("secreto-de-test")


@pytest.fixture
async def gate():
    users = InMemoryUserRepository()
    await users.create(User(username="ana", role=Role.user))
    await users.create(User(username="root", role=Role.admin))
    return AuthGate(users, KEY)


def test_password_hashing():
    hashed = hash_password("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("otra", hashed)
    assert not verify_password("password123", "")

def test_signing_key_is_loaded_once():
    assert get_signing_key() is get_signing_key()

@pytest.mark.parametrize("role,access,allowed", [
    (None, Access.public, True),
    (None, Access.user, False),
    (None, Access.admin, False),
    (Role.user, Access.public, True),
    (Role.user, Access.user, True),
    (Role.user, Access.admin, False),
    (Role.admin, Access.public, True),
    (Role.admin, Access.user, True),
    (Role.admin, Access.admin, True),
])
def test_role_matrix(role, access, allowed):
    identity = Identity("x", role) if role else Identity.anonymous()
    assert satisfies(identity, access) is allowed

@pytest.mark.asyncio
async def test_issue_then_authenticate(gate):
    token = gate.issue_token(User(username="ana"))
    claims = jwt.get_unverified_claims(token)
    assert claims["sub"] == "ana"
    assert isinstance(claims["iat"], int)
    assert await gate.authenticate(token) == Identity("ana", Role.user)

@pytest.mark.asyncio
async def test_token_signed_with_other_key(gate):
    token = AuthGate(gate.users, SigningKey("otra-clave")).issue_token(User(username="ana"))
    with pytest.raises(Unauthorized):
        await gate.authenticate(token)

@pytest.mark.asyncio
async def test_expired_token(gate):
    issued = datetime.now(timezone.utc) - timedelta(hours=KEY.expires_hours + 1)
    token = gate.issue_token(User(username="ana"), issued_at=issued)
    with pytest.raises(Unauthorized):
        await gate.authenticate(token)

@pytest.mark.asyncio
async def test_token_for_unknown_user(gate):
    token = gate.issue_token(User(username="fantasma"))
    with pytest.raises(Unauthorized):
        await gate.authenticate(token)

@pytest.mark.asyncio
async def test_check_without_token(gate):
    assert (await gate.check(Access.public, None)).is_anonymous
    with pytest.raises(Unauthorized):
        await gate.check(Access.user, None)

@pytest.mark.asyncio
async def test_check_user_against_admin(gate):
    token = gate.issue_token(User(username="ana"))
    assert await gate.check(Access.user, token) == Identity("ana", Role.user)
    with pytest.raises(Forbidden):
        await gate.check(Access.admin, token)

@pytest.mark.asyncio
async def test_check_invalid_token_on_public(gate):
    with pytest.raises(Unauthorized):
        await gate.check(Access.public, "basura")

@pytest.mark.asyncio
async def test_embed_token(gate):
    request = httpx.Request("GET", "http://test/pets")
    request = gate.embed_token(User(username="root"), request)
    scheme, token = request.headers["Authorization"].split(" ", 1)
    assert scheme == "Bearer"
    assert await gate.check(Access.admin, token) == Identity("root", Role.admin)
