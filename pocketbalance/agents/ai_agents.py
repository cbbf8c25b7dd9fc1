"""
AI Agents for PocketBalance

CRITICAL BOUNDARIES:

CATEGORY SUGGESTION AGENT:
   - CAN: Suggest one spending category for a free-text description
   - CANNOT: Write to the transaction list
   - CANNOT: Guarantee its answer is a real category

The agent returns the model's label as-is. Checking it against
SpendingCategory is the entry layer's job, and a label that fails the check
means the user picks the category manually.
"""

from typing import Any, Optional, Protocol

import google.generativeai as genai

from pocketbalance.config import get_settings
from pocketbalance.models.transaction import (
    CategorizeSpendingInput,
    CategorizeSpendingOutput,
    SpendingCategory,
)


CATEGORIZE_SPENDING_PROMPT = """You are a personal finance assistant.  You will suggest a spending category for a given transaction description.

Transaction Description: {description}

Suggest a single category for this transaction. The category should be one of the following: {categories}.

Respond with ONLY the name of the category.
"""


class SuggestionFailedError(Exception):
    """The category suggestion could not be produced."""
    pass


class CategorySuggester(Protocol):
    """Capability interface: description in, raw category label out."""

    async def suggest_category(self, description: str) -> CategorizeSpendingOutput:
        ...


def build_generative_model(
    generation_config: Optional[dict[str, Any]] = None,
) -> "genai.GenerativeModel":
    """
    Configure Google Generative AI and build a model from settings.

    Raises pydantic's ValidationError if GEMINI_API_KEY is not set.
    """
    settings = get_settings().gemini
    genai.configure(api_key=settings.api_key)
    config = {
        "temperature": settings.temperature,
        "max_output_tokens": settings.max_tokens,
    }
    config.update(generation_config or {})
    return genai.GenerativeModel(
        model_name=settings.model_name,
        generation_config=config,
    )


class CategorySuggestionAgent:
    """
    AI agent that classifies a spending description.

    Any object with an async ``generate_content_async`` method can stand in
    for the Gemini model, which is how tests avoid the network.
    """

    def __init__(self, model: Optional[Any] = None):
        self._model = model if model is not None else build_generative_model()

    def build_prompt(self, description: str) -> str:
        return CATEGORIZE_SPENDING_PROMPT.format(
            description=description,
            categories=", ".join(SpendingCategory.labels()),
        )

    async def suggest_category(self, description: str) -> CategorizeSpendingOutput:
        """
        Ask the model for a category label.

        Returns the trimmed label without checking it against the
        enumeration.

        Raises:
            SuggestionFailedError: On any provider failure or empty output.
                No retries are attempted.
        """
        try:
            request = CategorizeSpendingInput(description=description)
            response = await self._model.generate_content_async(
                self.build_prompt(request.description)
            )
            label = response.text.strip().strip("\"'`.").strip()
        except Exception as e:
            raise SuggestionFailedError(f"Failed to suggest a category: {e}") from e

        if not label:
            raise SuggestionFailedError("Failed to suggest a category: empty response")

        return CategorizeSpendingOutput(category=label)
