"""
Routes Module

Contains API route definitions.
"""

from . import planner, search

__all__ = ['planner', 'search']
