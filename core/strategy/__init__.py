"""Table rules and the basic strategy advisor."""

from core.strategy.rules import RuleSet
from core.strategy.basic import BasicStrategy, Action, advise

__all__ = [
    "RuleSet",
    "BasicStrategy",
    "Action",
    "advise",
]
