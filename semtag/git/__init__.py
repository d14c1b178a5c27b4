"""
Git operations module for semtag.

Every git interaction goes through GitCommand, so tag reconciliation and
existence checks can be exercised against a fake transport in tests.
"""

from .command import CommandResult, GitCommand, DEFAULT_REMOTE

__all__ = [
    "CommandResult",
    "GitCommand",
    "DEFAULT_REMOTE",
]
