"""
Text-to-outline generation.

Turns free text (an article, rough notes) into candidate sections with an
LLM. Generated sections only replace the ones being authored when the model
returned something usable; otherwise the current sections are kept.
"""

import json
import logging
import re
import time
from typing import Optional, Protocol

from google import genai
from google.genai import types as genai_types
from pydantic import ValidationError as SchemaValidationError

from podium.config import DEFAULT_MODEL, DEFAULT_TEMPERATURE, Settings
from podium.schemas import GeneratedSection, Section
from podium.utils.prompt_loader import format_prompt, load_prompt


logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "outline"


class TextClient(Protocol):
    def generate(self, system_prompt: str, user_prompt: str) -> str: ...


# -----------------------------------------------------------------------------
# Gemini API Client
# -----------------------------------------------------------------------------

class GeminiClient:
    """Wrapper for Gemini API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_retries: int = 3,
    ):
        if not api_key:
            raise ValueError("GEMINI_API_KEY not set.")

        self.client = genai.Client(api_key=api_key)
        self.model_name = model
        self.temperature = temperature
        self.max_retries = max_retries

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.model,
            temperature=settings.temperature,
        )

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Generate text, retrying failed API calls with exponential backoff."""
        for attempt in range(self.max_retries):
            try:
                response = self.client.models.generate_content(
                    model=self.model_name,
                    contents=user_prompt,
                    config=genai_types.GenerateContentConfig(
                        system_instruction=system_prompt,
                        temperature=self.temperature,
                        response_mime_type="application/json",
                    )
                )

                if response.text is None:
                    raise ValueError("Empty response from API")
                return response.text

            except Exception as e:
                logger.warning(f"API call failed (attempt {attempt + 1}/{self.max_retries}): {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(2 ** attempt)
                else:
                    raise


# -----------------------------------------------------------------------------
# Response parsing
# -----------------------------------------------------------------------------

def extract_json_from_response(text: str) -> dict:
    """
    Extract a JSON object from an LLM response.

    Tries fenced code blocks first, then the first balanced {...} object.

    Raises:
        ValueError: If no JSON object can be parsed
    """
    for match in re.findall(r'```(?:json)?\s*([\s\S]*?)```', text):
        try:
            return json.loads(match.strip())
        except json.JSONDecodeError:
            continue

    text = text.strip()
    start = text.find('{')
    if start >= 0:
        depth = 0
        for i, char in enumerate(text[start:], start):
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(text[start:i + 1])
                    except json.JSONDecodeError:
                        break

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not extract JSON: {e}\n\nResponse:\n{text[:500]}...")


def parse_generated_sections(payload: dict) -> list[GeneratedSection]:
    """
    Validate the "sections" array of a generator response.

    A response with any unusable item is rejected as a whole and yields [].
    """
    items = payload.get("sections") if isinstance(payload, dict) else None
    if not isinstance(items, list) or not items:
        logger.warning("Generator response has no sections")
        return []

    try:
        return [GeneratedSection.model_validate(item) for item in items]
    except SchemaValidationError as e:
        logger.warning(f"Generator returned malformed sections: {e.error_count()} errors")
        return []


def apply_generated_sections(
    current: list[Section],
    generated: list[GeneratedSection],
) -> list[Section]:
    """
    Replace authored sections with generated ones.

    Generated sections get the default duration and start incomplete. An
    empty result keeps the current sections.
    """
    if not generated:
        return current
    return [item.to_section() for item in generated]


# -----------------------------------------------------------------------------
# Generator
# -----------------------------------------------------------------------------

class OutlineGenerator:
    """Generate candidate sections from free text."""

    def __init__(self, client: TextClient, prompt_name: str = DEFAULT_PROMPT, prompts_dir=None):
        self.client = client
        self.prompt = load_prompt(prompt_name, prompts_dir)

    def generate(self, source_text: str) -> list[GeneratedSection]:
        """
        Ask the model for sections summarizing source_text.

        Returns [] for blank input or an unusable response.
        """
        if not source_text.strip():
            return []

        user_prompt = format_prompt(self.prompt["user_template"], source_text=source_text)
        logger.info(f"Generating outline from ~{len(source_text)} chars of text")

        response_text = self.client.generate(self.prompt["system"], user_prompt)

        try:
            payload = extract_json_from_response(response_text)
        except ValueError as e:
            logger.warning(f"Generator response was not JSON: {e}")
            return []

        sections = parse_generated_sections(payload)
        logger.info(f"Generated {len(sections)} sections")
        return sections
