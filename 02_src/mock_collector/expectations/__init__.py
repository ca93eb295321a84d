"""Expectations module."""

from .matcher import MatchOutcome, find_match, format_report, reconcile
from .registry import ExpectationRegistry

__all__ = [
    "ExpectationRegistry",
    "MatchOutcome",
    "find_match",
    "format_report",
    "reconcile",
]
