"""Pure dialogue state machine for the task form."""

from .engine import TransitionResult, transition

__all__ = ["TransitionResult", "transition"]
