"""
Adapters that deliver page updates to a concrete client surface.
"""

from .datastar import DatastarSink, SSE_HEADERS, render_value, render_markup

__all__ = ["DatastarSink", "SSE_HEADERS", "render_value", "render_markup"]
