from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portfolio.domain.entities import Principal, User


class LoginSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1)


class CreateAdminSchema(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=6)
    name: str = Field(default="Admin User", min_length=1, max_length=50)


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class ResolvePrincipalInput:
    token: str | None


@dataclass
class CreateAdminInput:
    email: str
    password: str
    name: str = "Admin User"


@dataclass
class AuthOutput:
    user: User
    token: str
    expires_at: datetime
    success: bool = True


@dataclass
class PrincipalOutput:
    principal: Principal
    user: User | None = None


@dataclass
class UserOutput:
    user: User
    success: bool = True
