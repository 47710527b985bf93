"""Diagnostic window state.

A window only tracks whether it is shown and whether the host hid all
windows (e.g. for a screenshot). Drawing produces text through the
subclass's ``_draw_gui``; each window owns its own ``InspectorSession``.
"""

from abc import ABC, abstractmethod

from beartype import beartype

from autopilot.gui.inspector import InspectorSession


class GUIWindow(ABC):
    """Basic window, subclasses implement ``_draw_gui``."""

    @beartype
    def __init__(self, wnd_name: str, wnd_id: int) -> None:
        self._wnd_name = wnd_name
        self._wnd_id = wnd_id
        self._gui_shown = False
        self._gui_hidden = False
        self.inspector = InspectorSession()

    @property
    def window_name(self) -> str:
        return self._wnd_name

    @property
    def wnd_id(self) -> int:
        return self._wnd_id

    def is_shown(self) -> bool:
        return self._gui_shown

    def on_gui(self) -> str | None:
        """Draw the window, or return None when it is not visible."""
        if not self._gui_shown or self._gui_hidden:
            return None
        lines = [
            self._wnd_name,
            "=" * 40,
            self._draw_gui(),
        ]
        return "\n".join(lines)

    def toggle_gui(self) -> bool:
        self._gui_shown = not self._gui_shown
        return self._gui_shown

    def hide_gui(self) -> None:
        self._gui_hidden = True

    def unhide_gui(self) -> None:
        self._gui_hidden = False

    def show_gui(self) -> None:
        self._gui_shown = True

    def unshow_gui(self) -> None:
        self._gui_shown = False

    @abstractmethod
    def _draw_gui(self) -> str:
        """Window body."""
