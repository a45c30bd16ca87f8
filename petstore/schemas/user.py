from pydantic import BaseModel, ConfigDict, EmailStr, Field
from enum import Enum
from typing import Optional

class Role(str, Enum):
    user = "User"
    admin = "Admin"

class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    username: str = Field(..., min_length=1, max_length=80, alias="userName")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: Role = Role.user

class User(UserOut):
    # nunca se expone: los endpoints responden con UserOut
    password_hash: str = ""

    def public(self) -> UserOut:
        return UserOut(**self.model_dump(exclude={"password_hash"}))

class Signup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=2, max_length=80, alias="userName")
    first_name: str = Field("", max_length=80, alias="firstName")
    last_name: str = Field("", max_length=80, alias="lastName")
    email: Optional[EmailStr] = Field(None, description="Email válido")
    phone: Optional[str] = Field(None, max_length=20)
    password: str = Field(..., min_length=6, max_length=72, description="Contraseña (mín. 6 caracteres)")

class Login(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., alias="userName")
    password: str = Field(..., min_length=1, description="Contraseña")
