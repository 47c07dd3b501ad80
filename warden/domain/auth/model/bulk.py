"""Outcome of a bulk role change."""

from pydantic import BaseModel

from warden.domain.auth.model.role import Role


class BulkFailure(BaseModel):
    user_id: str
    code: str
    reason: str


class BulkSkip(BaseModel):
    user_id: str
    email: str
    reason: str


class BulkResult(BaseModel):
    """Per-item outcome; one target failing never aborts the rest."""

    new_role: Role
    requested: int
    updated: list[str] = []
    failed: list[BulkFailure] = []
    skipped: list[BulkSkip] = []

    @property
    def updated_count(self) -> int:
        return len(self.updated)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def summary(self) -> str:
        message = f"Successfully updated {self.updated_count} of {self.requested} users"
        if self.skipped:
            message += f". {self.skipped_count} super admin user(s) were skipped."
        return message
