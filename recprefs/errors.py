# recprefs/errors.py
from __future__ import annotations


class PreferenceError(Exception):
    """Base class for errors surfaced by the preference facade."""


class CapabilityError(PreferenceError):
    """Stored encoder needs a newer platform than the running one.

    By the time this is raised the stored value has already been reset to
    ``default``, so the next read succeeds.
    """

    def __init__(self, setting: str, choice: str, required: int, actual: int):
        self.setting = setting
        self.choice = choice
        self.required = required
        self.actual = actual
        super().__init__(
            f"{choice} requires platform version {required} (running {actual})"
        )


class UnrecognizedLocationKind(PreferenceError, ValueError):
    """Persisted save-location kind matches no known kind (store corruption)."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown uri type {kind!r}.")
