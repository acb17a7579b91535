"""
Summary package — natural-language renderings of a normalized transaction.

Responsibilities:
- Bullet list, headline sentence and step-by-step breakdown.
- {{content}} marker parsing for display consumers.
"""

from sui_explainer.summary.breakdown import build_breakdown
from sui_explainer.summary.bullets import build_bullets
from sui_explainer.summary.headline import build_headline, explain_headline
from sui_explainer.summary.markers import Segment, resolve_markers, split_markers

__all__ = [
    "Segment",
    "build_breakdown",
    "build_bullets",
    "build_headline",
    "explain_headline",
    "resolve_markers",
    "split_markers",
]
