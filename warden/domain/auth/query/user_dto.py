from datetime import datetime

from pydantic import BaseModel

from warden.domain.auth.model.user import User


class UserDTO(BaseModel):
    id: str
    email: str
    name: str | None
    role: str
    role_level: int
    permissions: list[str]
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_user(cls, user: User) -> "UserDTO":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role.name,
            role_level=user.role_level,
            permissions=sorted(user.permissions),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
