"""
Visibility policy component.
"""

from portfolio.components.visibility.component import (
    is_testimonial_visible,
    is_visible,
    testimonial_status_filter,
    visibility_filter,
)
from portfolio.components.visibility.models import UNRESTRICTED, VisibilityFilter

__all__ = [
    "is_visible",
    "visibility_filter",
    "is_testimonial_visible",
    "testimonial_status_filter",
    "VisibilityFilter",
    "UNRESTRICTED",
]
