from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class Aggregate(BaseModel):
    """Mutable domain aggregate; assignments are re-validated."""

    model_config = ConfigDict(validate_assignment=True)
