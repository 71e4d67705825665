"""
Financial Advisor Agent for RupeeWise

DESIGN DECISION: The advisor is a best-effort add-on. It turns the
user's records into a plain-text prompt, asks Gemini for a short
Markdown analysis and hands the text back unchanged.

BOUNDARIES:
- CAN: Read transactions and unpaid debts passed in by the caller
- CANNOT: Change any record (it never sees the store)
- NEVER raises: every failure becomes a fixed, human-readable string

Single attempt, no retry. A failed call is cheap to repeat by hand,
and a silent retry loop would only make the UI wait longer.
"""

import asyncio
from typing import Any, Iterable, Optional

import google.generativeai as genai
import structlog

from rupeewise.config import get_settings
from rupeewise.models.records import Debt, DebtType, Transaction


logger = structlog.get_logger(__name__)


UNABLE_TO_ANALYZE_MESSAGE = "Unable to generate analysis at this time."
CONNECTION_ERROR_MESSAGE = "Error connecting to AI advisor. Please check your API key."
NOTHING_TO_ANALYZE_MESSAGE = (
    "Add some transactions or debts first, then ask again for an analysis."
)


PROMPT_TEMPLATE = """Act as a strict but helpful financial advisor.
Current Month Context: {period_label}
Currency: INR ({currency})

Here is my financial data:

--- TRANSACTIONS ---
{transactions}

--- OUTSTANDING DEBTS/LOANS ---
{debts}

Please provide a brief, actionable financial analysis in Markdown format.
1. Summarize my spending habits this month.
2. Identify the biggest money drain.
3. Give specific advice on how to save more rupees based on the categories.
4. Comment on my debt situation (who I need to pay back urgently or collect from).
5. Keep it concise, under 200 words. Use bullet points."""


def format_transaction_line(transaction: Transaction, currency: str = "₹") -> str:
    return (
        f"{transaction.date.isoformat()}: {transaction.description} "
        f"({transaction.type.value}) - {currency}{transaction.amount} "
        f"[{transaction.category}]"
    )


def format_debt_line(debt: Debt, currency: str = "₹") -> str:
    direction = "I owe" if debt.type == DebtType.I_OWE else "Owes me"
    return (
        f"{direction} {debt.person_name}: {currency}{debt.amount} "
        f"({debt.description or 'No desc'})"
    )


class FinancialAdvisorAgent:
    """
    Asks a Gemini model for advice on the user's finances.

    The model is created lazily so the rest of the app works without
    a Gemini API key. Tests pass a stub with `generate_content_async`.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        timeout_seconds: Optional[float] = None,
        currency_symbol: Optional[str] = None,
    ):
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._currency = currency_symbol or get_settings().app.currency_symbol

    def _get_model(self):
        """Configure Google Generative AI on first use."""
        if self._model is None:
            settings = get_settings().gemini
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
            if self._timeout_seconds is None:
                self._timeout_seconds = settings.request_timeout_seconds
        return self._model

    def build_prompt(
        self,
        transactions: Iterable[Transaction],
        debts: Iterable[Debt],
        period_label: str,
    ) -> str:
        """
        Render the advisor prompt.

        Every transaction is listed; only unpaid debts are.
        """
        transaction_lines = [
            format_transaction_line(t, self._currency) for t in transactions
        ]
        debt_lines = [
            format_debt_line(d, self._currency) for d in debts if not d.is_paid
        ]
        return PROMPT_TEMPLATE.format(
            period_label=period_label,
            currency=self._currency,
            transactions="\n".join(transaction_lines),
            debts="\n".join(debt_lines),
        )

    async def analyze(
        self,
        transactions: Iterable[Transaction],
        debts: Iterable[Debt],
        period_label: str,
    ) -> str:
        """
        Get a Markdown analysis of the user's finances.

        Always returns a string: the model's text, or one of the fixed
        messages when there is nothing to send, the model returns no
        text, or the call fails.
        """
        transactions = list(transactions)
        debts = list(debts)

        if not transactions and not debts:
            return NOTHING_TO_ANALYZE_MESSAGE

        prompt = self.build_prompt(transactions, debts, period_label)

        try:
            model = self._get_model()
            call = model.generate_content_async(prompt)
            if self._timeout_seconds:
                response = await asyncio.wait_for(call, timeout=self._timeout_seconds)
            else:
                response = await call
            text = _response_text(response)
        except Exception as e:
            logger.error(
                "advisor_request_failed",
                error=str(e),
                error_type=type(e).__name__,
                period=period_label,
            )
            return CONNECTION_ERROR_MESSAGE

        if not text:
            logger.warning("advisor_empty_response", period=period_label)
            return UNABLE_TO_ANALYZE_MESSAGE

        logger.info(
            "advisor_response_received",
            period=period_label,
            transactions=len(transactions),
            debts=len(debts),
        )
        return text


def _response_text(response: Any) -> str:
    # .text raises ValueError when the response was blocked or has no parts
    try:
        text = response.text
    except ValueError:
        return ""
    return (text or "").strip()
