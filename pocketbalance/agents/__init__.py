"""AI Agents package."""

from pocketbalance.agents.ai_agents import (
    CATEGORIZE_SPENDING_PROMPT,
    CategorySuggester,
    CategorySuggestionAgent,
    SuggestionFailedError,
    build_generative_model,
)

__all__ = [
    "CATEGORIZE_SPENDING_PROMPT",
    "CategorySuggester",
    "CategorySuggestionAgent",
    "SuggestionFailedError",
    "build_generative_model",
]
