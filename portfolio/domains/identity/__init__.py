from portfolio.domains.identity.entities import User
from portfolio.domains.identity.schemas import UserCreate, UserLogin, UserResponse

__all__ = [
    "User",
    "UserCreate", "UserLogin", "UserResponse"
]
