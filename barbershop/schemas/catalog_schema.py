"""Service catalog data models."""

from pydantic import BaseModel, Field, field_validator

from barbershop.schemas.provider_schema import ProfessionLevel


class ServiceOffering(BaseModel):
    """A bookable catalog entry."""

    id: str
    name: str
    price: int = Field(ge=0)
    duration: int = Field(gt=0, description="Minutes")
    eligible_levels: list[ProfessionLevel] = Field(default_factory=list)

    @field_validator("eligible_levels", mode="before")
    @classmethod
    def _split_levels(cls, value):
        # Seed data stores the levels as one comma separated string
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value
