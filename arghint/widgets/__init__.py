"""PySide widgets for argument hints."""

from .arg_tooltip import ArgHintTooltip, TooltipWidgetProvider
from .editor_binding import ArgHintBinding, ArgHintManager, EditorArgHintHost

__all__ = [
    "ArgHintBinding",
    "ArgHintManager",
    "ArgHintTooltip",
    "EditorArgHintHost",
    "TooltipWidgetProvider",
]
