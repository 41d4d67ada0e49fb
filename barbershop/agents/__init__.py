from barbershop.agents.stylist import StyleAdvisor, fallback_recommendation, parse_recommendation
from barbershop.agents.text_generation import HttpTextGenerator, TextGenerator

__all__ = [
    "StyleAdvisor", "fallback_recommendation", "parse_recommendation",
    "HttpTextGenerator", "TextGenerator",
]
