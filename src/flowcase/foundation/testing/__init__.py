"""Testing utilities: call-recording spies for callback flows."""

from .spy import Call, Spy

__all__ = ["Call", "Spy"]
