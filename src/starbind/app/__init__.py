"""
Host layer: pages, elements and their shared event support.
"""

from .config import StarBindSettings, configure_logging
from .support import EventSupport
from .page import BasePage, Page, PageUpdate
from .element import Element

__all__ = [
    "StarBindSettings",
    "configure_logging",
    "EventSupport",
    "BasePage",
    "Page",
    "PageUpdate",
    "Element",
]
