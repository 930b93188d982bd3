"""
Navigation bar labels for previous/next buttons.
"""

from dataclasses import dataclass
from typing import Optional

from stackquest.classroom import Navigator

LOCKED_HINT = "Complete current question to unlock"


@dataclass
class NavigationLabels:
    previous_label: str
    previous_enabled: bool
    next_label: str
    next_enabled: bool
    next_hint: Optional[str] = None


def get_navigation_labels(navigator: Navigator) -> NavigationLabels:
    """
    Button labels and states for the navigation bar.

    Previous shows the title of the preceding question; next shows the
    following title, with a lock while the current question is unattempted.
    """
    previous_title = navigator.get_previous_title()
    next_title = navigator.get_next_title()
    can_proceed = navigator.can_proceed()

    previous_label = f"← {previous_title}" if previous_title else "← Previous"

    next_hint = None
    if next_title is None:
        next_label = "Next →"
    elif can_proceed:
        next_label = f"{next_title} →"
    else:
        next_label = f"🔒 {next_title} →"
        next_hint = LOCKED_HINT

    return NavigationLabels(
        previous_label=previous_label,
        previous_enabled=navigator.is_backward_allowed(),
        next_label=next_label,
        next_enabled=navigator.is_forward_allowed(),
        next_hint=next_hint,
    )
