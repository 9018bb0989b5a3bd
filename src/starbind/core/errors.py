"""
StarBind error types.

Only decode failures surface as exceptions. Unknown actions and stale
binding notifications degrade to a re-sync or a no-op instead.
"""

from typing import Any, Dict, List, Optional


class StarBindError(Exception):
    """Base class for all StarBind errors."""


class DecodeError(StarBindError):
    """Raised when an inbound payload cannot be decoded into a parameter bag."""

    def __init__(self, message: str, diagnostics: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.diagnostics = diagnostics or []

    def errors(self) -> List[Dict[str, Any]]:
        """Validation diagnostics reported by the composite decoder."""
        return list(self.diagnostics)
