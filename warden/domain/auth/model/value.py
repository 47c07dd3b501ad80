"""Value objects for the auth domain."""

from uuid import uuid4

from pydantic import RootModel, field_validator

from warden.domain.shared.error import ValidationError


class UserId(RootModel[str]):
    """Opaque identifier for a User, assigned by the identity-sync process."""

    @field_validator("root")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("UserId must not be blank")
        return v

    @classmethod
    def generate(cls) -> "UserId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.root

    def __hash__(self) -> int:
        return hash(self.root)


def parse_user_id(value: str) -> UserId:
    """Parse a caller-supplied user id.

    Raises:
        ValidationError: If the id is blank.
    """
    if not value.strip():
        raise ValidationError("User id must not be blank", field="user_id", code="invalid_user_id")
    return UserId(value)


class AuditEntryId(RootModel[str]):
    """Unique identifier for an AuditLogEntry."""

    @classmethod
    def generate(cls) -> "AuditEntryId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.root

    def __hash__(self) -> int:
        return hash(self.root)
