"""Provider (barber) data models and directory filter criteria."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

ALL = "all"


class ProfessionLevel(str, Enum):
    """Capability tier of a provider. Tiers gate services, not behavior."""

    MASTER = "Maestro Barbero"
    ARTIST = "Barbero Artista"
    SENIOR = "Estilista Senior"


class GeoPoint(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Location(GeoPoint):
    """Where a provider works."""

    address: str = ""


class Review(BaseModel):
    """A single client review of a provider."""

    id: str
    user_name: str
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    date: str


class Provider(BaseModel):
    """A bookable barber.

    ``is_available`` is the manual online/offline toggle and is independent
    of calendar occupancy, which is derived from the appointment set.
    """

    id: str
    name: str
    is_available: bool = True
    experience: str = ""
    specialty: str
    bio: str = ""
    profession_level: ProfessionLevel
    location: Location
    profile_pic_url: Optional[str] = None
    gallery: list[str] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    reviews: list[Review] = Field(default_factory=list)


class ProviderFilter(BaseModel):
    """Conjunctive directory filter. ``"all"`` is a wildcard."""

    available_only: bool = False
    specialty: str = ALL
    level: str = ALL
    max_distance_km: Optional[float] = Field(default=None, gt=0)
    origin: Optional[GeoPoint] = None
