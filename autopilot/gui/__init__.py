"""Diagnostic panels for autopilot modules.

Provides tagged-attribute inspection and a minimal window abstraction.
Nothing here takes part in the control computation.
"""

from autopilot.gui.inspector import (
    CollectionElement,
    GuiAttr,
    InspectorSession,
    ScalarElement,
    ToggleElement,
    format_value,
    gui_field,
    gui_property,
)
from autopilot.gui.window import GUIWindow

__all__ = [
    # Inspector
    "GuiAttr",
    "gui_field",
    "gui_property",
    "InspectorSession",
    "ScalarElement",
    "ToggleElement",
    "CollectionElement",
    "format_value",
    # Window
    "GUIWindow",
]
