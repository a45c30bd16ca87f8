from fastapi import APIRouter, Depends, Request, Response, status
from typing import List

from ..schemas.user import Login, Signup, UserOut
from ..security import Access, Identity, require
from ..services.users import UserService

router = APIRouter()

def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service

@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: Signup,
    users: UserService = Depends(get_user_service),
):
    user = await users.signup(payload)
    return user.public()

@router.post("/login")
async def login(
    payload: Login,
    response: Response,
    users: UserService = Depends(get_user_service),
):
    _, token = await users.login(payload.username, payload.password)
    response.headers["Authorization"] = f"Bearer {token}"
    return {"access_token": token, "token_type": "bearer"}

@router.get("/me", response_model=UserOut)
async def get_me(
    current: Identity = Depends(require(Access.user)),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_by_username(current.username)
    return user.public()

@router.get("", response_model=List[UserOut])
async def list_users(
    _: Identity = Depends(require(Access.admin)),
    users: UserService = Depends(get_user_service),
):
    return [u.public() for u in await users.list()]

@router.get("/{username}", response_model=UserOut)
async def get_user(
    username: str,
    _: Identity = Depends(require(Access.admin)),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_by_username(username)
    return user.public()
