"""Price calculators — protection service quotes."""

from armora.calculators.pricing import compute_quote

__all__ = [
    "compute_quote",
]
