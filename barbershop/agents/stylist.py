"""
Style advisor: turns a free-text style description into catalog services.

The text-generation collaborator is treated as an untrusted oracle. Its
output is validated before use: unknown service ids are dropped, and a
transport failure or malformed reply yields a neutral recommendation with a
user-visible notice instead of an exception.
"""

import json
import logging
import re

from pydantic import ValidationError

from barbershop.agents.text_generation import TextGenerator
from barbershop.errors import ExternalServiceError
from barbershop.prompts.prompt_templates import build_description_query, build_style_query
from barbershop.prompts.system_prompts import (
    PRODUCT_DESCRIPTION_SYSTEM_PROMPT,
    STYLE_RECOMMENDATION_SYSTEM_PROMPT,
)
from barbershop.schemas.catalog_schema import ServiceOffering
from barbershop.schemas.provider_schema import ProfessionLevel
from barbershop.schemas.recommendation_schema import GeneratedDescription, StyleRecommendation

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

FALLBACK_EXPLANATION = (
    "We could not process the automatic recommendation, "
    "but one of our professionals will advise you in person."
)
RECOMMENDATION_NOTICE = "Style recommendation is unavailable right now."
DESCRIPTION_NOTICE = "Description generation is unavailable right now; kept your text."


def fallback_recommendation() -> StyleRecommendation:
    return StyleRecommendation(
        recommended_service_ids=[],
        required_level=ProfessionLevel.SENIOR.value,
        explanation=FALLBACK_EXPLANATION,
        notice=RECOMMENDATION_NOTICE,
    )


def parse_recommendation(raw: str, known_ids: set[str]) -> StyleRecommendation:
    """Parse model output into a recommendation.

    Raises:
        ValueError: If the text is not a JSON object of the expected shape.
    """
    cleaned = _CODE_FENCE.sub("", raw).strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("recommendation must be a JSON object")
    recommendation = StyleRecommendation.model_validate(data)
    unknown = [sid for sid in recommendation.recommended_service_ids if sid not in known_ids]
    if unknown:
        logger.info("Dropping unknown recommended service ids: %s", unknown)
    recommendation.recommended_service_ids = [
        sid for sid in recommendation.recommended_service_ids if sid in known_ids
    ]
    recommendation.notice = None
    return recommendation


class StyleAdvisor:
    """Recommendation and copywriting on top of a TextGenerator."""

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    def recommend(
        self, style_description: str, services: list[ServiceOffering]
    ) -> StyleRecommendation:
        user_prompt = build_style_query(style_description, services)
        try:
            raw = self._generator.generate(STYLE_RECOMMENDATION_SYSTEM_PROMPT, user_prompt)
        except ExternalServiceError:
            logger.warning("Style recommendation request failed", exc_info=True)
            return fallback_recommendation()

        try:
            return parse_recommendation(raw, {s.id for s in services})
        except (ValueError, ValidationError):
            # json.JSONDecodeError is a ValueError
            logger.warning("Failed to parse style recommendation: %.200s", raw)
            return fallback_recommendation()

    def describe_product(self, product_name: str, rough_description: str) -> GeneratedDescription:
        user_prompt = build_description_query(product_name, rough_description)
        try:
            text = self._generator.generate(PRODUCT_DESCRIPTION_SYSTEM_PROMPT, user_prompt)
        except ExternalServiceError:
            logger.warning("Product description request failed", exc_info=True)
            return GeneratedDescription(text=rough_description, notice=DESCRIPTION_NOTICE)
        return GeneratedDescription(text=text.strip())
