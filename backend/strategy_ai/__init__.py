# =============================================================================
# Strategy Search Core - Backend Package
# =============================================================================
"""
Strategy Search Core

Search engines for an autonomous agent in a turn-based strategy game:
MinMax with Alpha-Beta pruning for combat decisions and a best-first
STRIPS planner for resource gathering.
"""

__version__ = "0.1.0"
