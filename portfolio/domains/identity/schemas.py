from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
import uuid


class UserCreate(BaseModel):
    """Схема для регистрации администратора"""
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.strip():
            raise ValueError('Username cannot be empty')
        return v.strip()


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя"""
    id: uuid.UUID
    username: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)
