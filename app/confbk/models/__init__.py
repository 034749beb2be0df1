"""Data models for confbk.

This module exports the core data structures used throughout the application.
"""

from confbk.models.spec import InputSpec, ResolutionResult

__all__ = [
    "InputSpec",
    "ResolutionResult",
]
