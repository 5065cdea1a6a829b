"""
AI Agents for WealthWay

CRITICAL BOUNDARIES:

FINANCIAL ADVISOR AGENT:
   - CAN: Turn category totals for the selected period into a short tip
   - CANNOT: See individual transactions, memos or ids
   - CANNOT: Change any stored data
   - MUST: Return a string, always. Failures become a static fallback.

The LLM is a WRITER, not a BOOKKEEPER.
It only ever sees a summary of totals we computed ourselves.
"""

import json
from collections.abc import Callable, Sequence
from datetime import date
from typing import Optional

import google.generativeai as genai

from wealthway.activity import ActivityLogger, get_logger
from wealthway.config import get_settings
from wealthway.ledger.aggregation import summarize_for_advice
from wealthway.models.transaction import Transaction


NO_DATA_MESSAGE = "Add some transactions to get AI-powered advice for this period."
EMPTY_RESPONSE_MESSAGE = "Still analysing... please try again in a moment."
FAILURE_MESSAGE = "Advice isn't available right now. Keep tracking your spending!"

SYSTEM_INSTRUCTION = (
    "You are a capable and friendly household financial planner. "
    "Give specific, practical and encouraging advice based on everyday "
    "living costs and the user's actual spending pattern."
)


class FinancialAdvisorAgent:
    """
    AI agent for the advice panel.

    RESPONSIBILITIES:
    - Summarize the filtered transactions by type and category
    - Ask the model for three concrete tips in one paragraph

    BOUNDARIES:
    - NEVER raises to the caller
    - NEVER retries; one request, one answer or one fallback
    """

    def __init__(
        self,
        model=None,
        currency_code: Optional[str] = None,
        activity_logger: Optional[ActivityLogger] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize the advisor.

        Args:
            model: Object with an async `generate_content_async(prompt)`.
                   If None, a Gemini model is configured from settings.
            currency_code: Currency named in the prompt. Defaults to settings.
            activity_logger: Where service failures are reported.
            today: Clock for the date mentioned in the prompt.
        """
        self._model = model
        self._currency_code = currency_code
        self._activity_logger = activity_logger
        self._today = today or date.today
        self._logger = get_logger(__name__)

        if self._model is None:
            self._configure_genai()
        if self._currency_code is None:
            self._currency_code = get_settings().app.currency_code

    def _configure_genai(self):
        """Configure Google Generative AI."""
        settings = get_settings().gemini
        genai.configure(api_key=settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=settings.model_name,
            system_instruction=SYSTEM_INSTRUCTION,
            generation_config={
                "temperature": settings.temperature,
                "max_output_tokens": settings.max_tokens,
            },
        )

    def build_prompt(self, transactions: Sequence[Transaction]) -> str:
        """
        Build the prompt from category totals and today's date.

        Only "<type>-<category>": total pairs go out; no memos, no ids.
        """
        summary = summarize_for_advice(transactions)
        return f"""Analyse the following household budget data and give three specific,
useful pieces of advice for improving it. Be concise.
The currency is {self._currency_code}.

Current transactions (totals by category):
{json.dumps(summary, indent=2, ensure_ascii=False)}

Today's date: {self._today().isoformat()}

Answer in a single friendly but professional paragraph. Avoid long lists."""

    async def get_financial_insights(self, transactions: Sequence[Transaction]) -> str:
        """
        Get a paragraph of advice for the given (already filtered) transactions.

        Returns:
            The model's text, or one of the static fallback messages.
        """
        if not transactions:
            return NO_DATA_MESSAGE

        prompt = self.build_prompt(transactions)

        try:
            response = await self._model.generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            self._logger.warning("advice_generation_failed", error=str(e))
            if self._activity_logger:
                self._activity_logger.log_external_service_error("gemini", str(e))
            return FAILURE_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE
