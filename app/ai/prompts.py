"""Prompt templates sent to the language model."""

from typing import Optional

PLAN_PROMPT = """You are an assistant that writes concise travel itineraries in {language}.
Create a JSON itinerary for a trip to "{destination}"{details}.
JSON output:
{{
  "summary": "short text",
  "itinerary": [
    {{"day": 1, "date": "YYYY-MM-DD", "summary": "", "activities": [ {{"time": "Morning", "title": "", "desc": ""}} ] }}
  ]
}}
Also include an "images" property with a list of relevant image URLs (use the Unsplash pattern). Reply ONLY with valid JSON."""

CHAT_SYSTEM_PROMPT = (
    "You are a professional travel assistant. Answer in {language}. "
    "If the user mentions a destination and asks for an itinerary, produce a compact JSON "
    "object with \"summary\" and \"itinerary\" keys that can be stored in the history."
)

BANNER_PROMPT = (
    "Write in {language} a short phrase (10-12 words at most), in a neutral and elegant tone, "
    "about traveling or discovering the world. Do not use emojis. Return only the phrase."
)


def build_plan_prompt(
    destination: str,
    language: str,
    days: Optional[str] = None,
    budget: Optional[str] = None,
    interests: Optional[str] = None,
    group: Optional[str] = None,
) -> str:
    details = ""
    if days:
        details += f" lasting {days} days"
    if group:
        details += f" designed for {group}"
    if budget:
        details += f" with budget: {budget}"
    if interests:
        details += f" focused on: {interests}"
    return PLAN_PROMPT.format(language=language, destination=destination, details=details)


def build_chat_system_prompt(language: str, group: Optional[str] = None) -> str:
    prompt = CHAT_SYSTEM_PROMPT.format(language=language)
    if group:
        prompt += f" Group context: {group}"
    return prompt


def build_banner_prompt(language: str) -> str:
    return BANNER_PROMPT.format(language=language)
