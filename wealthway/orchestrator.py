"""
Main Orchestrator for WealthWay

This module ties together all the components and holds the state one
dashboard session works with:
1. The selected date range (presets, manual edits, validation)
2. The entry/edit form
3. The advice panel

DESIGN DECISION: The orchestrator holds NO rendering code. The Streamlit
app reads `view()` and calls the action methods; everything here can be
driven from a test without a UI.

The range is initialized from the current cycle and is NOT kept in sync
with it afterwards. Only the preset actions and a change of the cycle start
day move it.
"""

from collections.abc import Callable
from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field

from wealthway.activity import ActivityLogger, configure_logging
from wealthway.agents import FinancialAdvisorAgent
from wealthway.config import get_settings
from wealthway.cycles import current_cycle, describe_cycle, previous_cycle
from wealthway.ledger import (
    TransactionStore,
    breakdown_by_category,
    compute_totals,
    filter_by_range,
    to_date,
)
from wealthway.models.transaction import (
    CategoryTotal,
    DateRange,
    Totals,
    Transaction,
    TransactionForm,
    TransactionType,
)
from wealthway.services.storage import NotFoundError, create_state_storage


INVALID_RANGE_MESSAGE = "The start date must be on or before the end date."


class DashboardView(BaseModel):
    """Everything the dashboard shows for the current range."""

    start_date: date
    end_date: date
    transactions: list[Transaction] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    breakdown: list[CategoryTotal] = Field(default_factory=list)
    invalid_range: bool = False
    error_message: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.transactions)


class AdvisoryPanel:
    """
    Latest-wins slot for advice text.

    Each request takes a generation number. A result is applied only if
    no newer request has started since, so a slow early response can never
    overwrite a newer one.
    """

    def __init__(self):
        self.text: str = ""
        self._generation = 0
        self._pending: set[int] = set()

    @property
    def is_loading(self) -> bool:
        return bool(self._pending)

    @property
    def latest_generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        self._pending.add(self._generation)
        return self._generation

    def discard(self, generation: int) -> None:
        """Stop waiting on `generation` without touching the text."""
        self._pending.discard(generation)

    def complete(self, generation: int, text: str) -> bool:
        """Store `text` if `generation` is still the latest. Returns whether it was applied."""
        self._pending.discard(generation)
        if generation != self._generation:
            return False
        self.text = text
        return True


class DashboardSession:
    """
    Controller state for one user session.

    Flow:
    1. Range starts as the current cycle
    2. User edits dates or picks a preset
    3. view() filters and aggregates
    4. Form submissions go through the store
    5. Advice requests snapshot the filtered list
    """

    def __init__(
        self,
        store: TransactionStore,
        advisor: Optional[FinancialAdvisorAgent] = None,
        activity_logger: Optional[ActivityLogger] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._store = store
        self._advisor = advisor
        self._activity_logger = activity_logger
        self._today = today or date.today

        initial = current_cycle(store.cycle_start_day, self._today())
        self.start_date: date = initial.start
        self.end_date: date = initial.end

        self.form = self._blank_form()
        self.advice = AdvisoryPanel()

    @property
    def store(self) -> TransactionStore:
        return self._store

    @property
    def cycle_start_day(self) -> int:
        return self._store.cycle_start_day

    @property
    def cycle_description(self) -> str:
        return describe_cycle(self._store.cycle_start_day)

    @property
    def has_advisor(self) -> bool:
        return self._advisor is not None

    # -------------------------------------------------------------------------
    # Date range
    # -------------------------------------------------------------------------

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def date_error(self) -> Optional[str]:
        if self.start_date > self.end_date:
            return INVALID_RANGE_MESSAGE
        return None

    def set_start_date(self, value: Union[date, str]) -> None:
        self.start_date = to_date(value)

    def set_end_date(self, value: Union[date, str]) -> None:
        self.end_date = to_date(value)

    def _apply_range(self, new_range: DateRange) -> None:
        self.start_date = new_range.start
        self.end_date = new_range.end

    def select_this_cycle(self) -> DateRange:
        """The "this cycle" preset: the cycle containing today."""
        cycle = current_cycle(self._store.cycle_start_day, self._today())
        self._apply_range(cycle)
        return cycle

    def select_previous_cycle(self) -> DateRange:
        """The "previous cycle" preset: the cycle before today's cycle."""
        day = self._store.cycle_start_day
        cycle = previous_cycle(current_cycle(day, self._today()).start, day)
        self._apply_range(cycle)
        return cycle

    def change_cycle_start_day(self, day: int) -> DateRange:
        """Persist a new cycle start day and jump the range to the current cycle."""
        self._store.set_cycle_start_day(day)
        return self.select_this_cycle()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def filtered_transactions(self) -> list[Transaction]:
        return filter_by_range(self._store.transactions, self.start_date, self.end_date).transactions

    def view(self) -> DashboardView:
        """Filter by the current range and compute every aggregate view."""
        result = filter_by_range(self._store.transactions, self.start_date, self.end_date)
        return DashboardView(
            start_date=self.start_date,
            end_date=self.end_date,
            transactions=result.transactions,
            totals=compute_totals(result.transactions),
            breakdown=breakdown_by_category(result.transactions),
            invalid_range=result.invalid_range,
            error_message=INVALID_RANGE_MESSAGE if result.invalid_range else None,
        )

    # -------------------------------------------------------------------------
    # Form
    # -------------------------------------------------------------------------

    def _blank_form(self) -> TransactionForm:
        return TransactionForm(date=self._today())

    def reset_form(self) -> None:
        self.form = self._blank_form()

    def switch_form_type(self, transaction_type: TransactionType) -> None:
        self.form.switch_type(transaction_type)

    def start_editing(self, transaction_id: str) -> TransactionForm:
        """
        Load an existing transaction into the form.

        Raises:
            NotFoundError: If the id is unknown
        """
        tx = self._store.get(transaction_id)
        if tx is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")
        self.form = TransactionForm(
            type=tx.type,
            amount=str(tx.amount),
            category=tx.category,
            memo=tx.memo,
            date=tx.date,
            editing_id=tx.id,
        )
        return self.form

    def submit_form(self) -> Optional[Transaction]:
        """
        Create or update from the form.

        On success the form is reset. On rejected input the form is left
        exactly as it was so the user can fix it.
        """
        form = self.form
        if form.editing_id is not None:
            result = self._store.update(
                form.editing_id, form.type, form.amount, form.category, form.memo, form.date
            )
        else:
            result = self._store.create(
                form.type, form.amount, form.category, form.memo, form.date
            )
        if result is not None:
            self.reset_form()
        return result

    def delete_transaction(self, transaction_id: str, confirm: Callable[[], bool]) -> bool:
        deleted = self._store.delete(transaction_id, confirm)
        if deleted and self.form.editing_id == transaction_id:
            self.reset_form()
        return deleted

    # -------------------------------------------------------------------------
    # Advice
    # -------------------------------------------------------------------------

    @property
    def insights(self) -> str:
        return self.advice.text

    @property
    def is_loading_insights(self) -> bool:
        return self.advice.is_loading

    async def request_insights(self) -> Optional[str]:
        """
        Ask the advisor about the currently filtered transactions.

        Returns the text if it was applied, or None if there is no advisor,
        the range is invalid, or a newer request superseded this one.
        """
        if self._advisor is None or self.date_error:
            return None

        snapshot = self.filtered_transactions()
        generation = self.advice.begin()
        if self._activity_logger:
            self._activity_logger.log_advice_requested(generation, len(snapshot))

        try:
            text = await self._advisor.get_financial_insights(snapshot)
        finally:
            # Cancelled requests must not leave the panel loading
            self.advice.discard(generation)

        if self.advice.complete(generation, text):
            if self._activity_logger:
                self._activity_logger.log_advice_generated(generation)
            return text

        if self._activity_logger:
            self._activity_logger.log_advice_discarded(generation, self.advice.latest_generation)
        return None


def create_app_components(
    data_path: Optional[str] = None,
    use_settings_path: bool = True,
    use_ai: bool = True,
) -> DashboardSession:
    """
    Factory function to create all application components.

    Args:
        data_path: JSON file for state. Overrides the configured path.
        use_settings_path: When data_path is None, fall back to the
                           configured path. False keeps state in memory.
        use_ai: Whether to create the Gemini advisor. If Gemini is not
                configured the session runs without the advice panel.

    Returns:
        A ready DashboardSession
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)
    activity_logger = ActivityLogger()

    if data_path is None and use_settings_path:
        data_path = settings.storage.data_path

    storage = create_state_storage(
        data_path,
        default_cycle_start_day=app_settings.default_cycle_start_day,
    )
    store = TransactionStore(storage, activity_logger=activity_logger)

    advisor = None
    if use_ai:
        try:
            advisor = FinancialAdvisorAgent(
                currency_code=app_settings.currency_code,
                activity_logger=activity_logger,
            )
        except Exception as e:
            # Gemini not configured - continue without advice
            activity_logger.log_external_service_error("gemini", f"not configured: {e}")
            advisor = None

    return DashboardSession(store, advisor=advisor, activity_logger=activity_logger)
