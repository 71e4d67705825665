"""AI agents for RupeeWise."""

from rupeewise.agents.advisor import (
    CONNECTION_ERROR_MESSAGE,
    NOTHING_TO_ANALYZE_MESSAGE,
    UNABLE_TO_ANALYZE_MESSAGE,
    FinancialAdvisorAgent,
)

__all__ = [
    "CONNECTION_ERROR_MESSAGE",
    "NOTHING_TO_ANALYZE_MESSAGE",
    "UNABLE_TO_ANALYZE_MESSAGE",
    "FinancialAdvisorAgent",
]
