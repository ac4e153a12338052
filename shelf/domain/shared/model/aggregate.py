from pydantic import BaseModel, ConfigDict


class Aggregate(BaseModel):
    """Base class for aggregates: mutable, validated on assignment."""

    model_config = ConfigDict(validate_assignment=True)
