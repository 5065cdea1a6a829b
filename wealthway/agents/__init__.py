"""AI Agents package."""

from wealthway.agents.ai_agents import (
    EMPTY_RESPONSE_MESSAGE,
    FAILURE_MESSAGE,
    NO_DATA_MESSAGE,
    FinancialAdvisorAgent,
)

__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "FAILURE_MESSAGE",
    "NO_DATA_MESSAGE",
    "FinancialAdvisorAgent",
]
