# =============================================================================
# Strategy Search Core - Exceptions
# =============================================================================
"""
Error taxonomy shared by both search engines.

- Configuration errors fail fast at the entry points.
- Search exhaustion is a reportable "no plan" outcome.
- Dead ends inside a search are not errors at all and never raise.
"""

from typing import Any, Optional


class StrategySearchError(Exception):
    """Base class for every error raised by the search core"""


class SearchConfigurationError(StrategySearchError, ValueError):
    """
    The caller asked for something meaningless: a non-positive ply budget,
    negative resource requirements, or a malformed snapshot.
    """


class PlanNotFoundError(StrategySearchError):
    """
    The planner could not reach the goal.

    Attributes:
        stats: Statistics of the failed search, when one was run
    """

    def __init__(self, message: str, stats: Optional[Any] = None):
        super().__init__(message)
        self.stats = stats


class UnreachableGoalError(SearchConfigurationError, PlanNotFoundError):
    """
    The map cannot supply the required amounts, so no search was run.
    Caught as either a configuration error or a missing plan.
    """

    def __init__(self, message: str, stats: Optional[Any] = None):
        PlanNotFoundError.__init__(self, message, stats)
