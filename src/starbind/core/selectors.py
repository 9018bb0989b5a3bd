"""Helpers for composing hierarchical UI selector paths."""


def selectors(*parts: str) -> str:
    """Join selector fragments into a descendant path: ("#A", "#B") -> "#A #B"."""
    return " ".join(p for p in parts if p)


def array_selector(selector: str, index: int) -> str:
    """Selector for the item at `index` of a repeated element ("#Item", 0 -> "#Item0")."""
    return f"{selector}{index}"
