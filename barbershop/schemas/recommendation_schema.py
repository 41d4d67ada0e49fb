"""Response models for the text-generation collaborator."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WebSource(BaseModel):
    title: str = "Fuente Web"
    uri: str


class StyleRecommendation(BaseModel):
    """Services suggested for a described style.

    Accepts both the camelCase keys the model is prompted to emit and
    snake_case keys. ``notice`` is set when a fallback was substituted.
    """

    model_config = ConfigDict(populate_by_name=True)

    recommended_service_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("recommended_service_ids", "recommendedServices"),
    )
    required_level: str = Field(
        default="Estilista Senior",
        validation_alias=AliasChoices("required_level", "barberTypeRequired"),
    )
    explanation: str = ""
    image_urls: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("image_urls", "imageUrls"),
    )
    web_sources: list[WebSource] = Field(
        default_factory=list,
        validation_alias=AliasChoices("web_sources", "webSources"),
    )
    notice: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.notice is not None


class GeneratedDescription(BaseModel):
    """Polished product copy, or the rough text when generation failed."""

    text: str
    notice: Optional[str] = None
