"""Attribute inspector for diagnostic panels.

Values are tagged for display with ``gui_field`` (dataclass fields) or
``gui_property`` (computed attributes). An ``InspectorSession`` turns the
tagged attributes of an object into elements from a closed set of variants
and renders them as a text panel:

- ``ScalarElement``: label and value, optionally editable through a text buffer
- ``ToggleElement``: editable boolean
- ``CollectionElement``: every member rendered on its own line

Edit buffers and per-type attribute lists belong to the session, so two
windows never see each other's half-typed values. Formatting and parsing
failures stop at this boundary: they are logged and the panel keeps going.

Example:
    >>> from autopilot.control import PIDController
    >>> from autopilot.gui import InspectorSession
    >>>
    >>> pid = PIDController(kp=1.0, kd=0.01)
    >>> session = InspectorSession()
    >>> session.edit(pid, "kp", "0.5")
    True
    >>> print(session.render(pid))
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any

from beartype import beartype

logger = logging.getLogger(__name__)

GUI_METADATA_KEY = "autogui"

# =============================================================================
# Tagging
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class GuiAttr:
    """Display markup for one attribute.

    Attributes:
        value_name: Label shown in the panel
        editable: Whether the value may be edited (use for tunables only)
        format: Format spec passed to ``format()``, None for ``str()``
    """
    value_name: str
    editable: bool = False
    format: str | None = None


def gui_field(
    value_name: str,
    editable: bool = False,
    format: str | None = None,
    **kwargs: Any,
) -> Any:
    """Dataclass ``field()`` carrying inspector markup in its metadata."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[GUI_METADATA_KEY] = GuiAttr(value_name, editable, format)
    return field(metadata=metadata, **kwargs)


class GuiProperty(property):
    """Property carrying inspector markup."""

    def __init__(self, fget=None, fset=None, fdel=None, doc=None, gui: GuiAttr | None = None):
        super().__init__(fget, fset, fdel, doc)
        self.gui = gui

    def getter(self, fget):
        return type(self)(fget, self.fset, self.fdel, self.__doc__, gui=self.gui)

    def setter(self, fset):
        return type(self)(self.fget, fset, self.fdel, self.__doc__, gui=self.gui)

    def deleter(self, fdel):
        return type(self)(self.fget, self.fset, fdel, self.__doc__, gui=self.gui)


def gui_property(
    value_name: str,
    editable: bool = False,
    format: str | None = None,
) -> Callable[[Callable[[Any], Any]], GuiProperty]:
    """Decorator turning a getter into a tagged property."""
    gui = GuiAttr(value_name, editable, format)

    def decorator(fget: Callable[[Any], Any]) -> GuiProperty:
        return GuiProperty(fget, doc=fget.__doc__, gui=gui)

    return decorator


@dataclass(frozen=True, slots=True)
class TaggedAttribute:
    """Attribute name paired with its markup."""
    name: str
    gui: GuiAttr


def tagged_attributes(cls: type) -> tuple[TaggedAttribute, ...]:
    """Collect tagged attributes of a class, properties first, then fields."""
    found: dict[str, GuiAttr] = {}
    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if isinstance(member, GuiProperty) and member.gui is not None:
                found[name] = member.gui
    if is_dataclass(cls):
        for f in fields(cls):
            gui = f.metadata.get(GUI_METADATA_KEY)
            if gui is not None:
                found[f.name] = gui
    return tuple(TaggedAttribute(name, gui) for name, gui in found.items())


# =============================================================================
# Elements
# =============================================================================


@dataclass
class _BoundElement:
    obj: Any
    attribute: str
    gui: GuiAttr

    @property
    def name(self) -> str:
        return self.gui.value_name

    @property
    def editable(self) -> bool:
        return self.gui.editable

    @property
    def format(self) -> str | None:
        return self.gui.format

    def get(self) -> Any:
        return getattr(self.obj, self.attribute)

    def set(self, value: Any) -> None:
        setattr(self.obj, self.attribute, value)


class ScalarElement(_BoundElement):
    """Plain value, shown as label and text."""


class ToggleElement(_BoundElement):
    """Editable boolean, shown as a check box."""

    def flip(self) -> bool:
        value = not self.get()
        self.set(value)
        return value


class CollectionElement(_BoundElement):
    """Iterable value, every member shown on its own line."""

    def items(self) -> list[Any]:
        return list(self.get())


Element = ScalarElement | ToggleElement | CollectionElement


def make_element(obj: Any, tagged: TaggedAttribute) -> Element:
    """Pick the element variant for the current value of an attribute."""
    value = getattr(obj, tagged.name)
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        return CollectionElement(obj, tagged.name, tagged.gui)
    if isinstance(value, bool) and tagged.gui.editable:
        return ToggleElement(obj, tagged.name, tagged.gui)
    return ScalarElement(obj, tagged.name, tagged.gui)


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {text!r}")


def _parser_for(value: Any) -> Callable[[str], Any]:
    if isinstance(value, bool):
        return _parse_bool
    return type(value)


def format_value(value: Any, fmt: str | None = None) -> str:
    """Format a value for display, falling back to ``str()`` on bad formats."""
    if fmt is None:
        return str(value)
    try:
        return format(value, fmt)
    except (ValueError, TypeError) as exc:
        logger.debug("Cannot format %r with %r: %s", value, fmt, exc)
        return str(value)


# =============================================================================
# Session
# =============================================================================


class InspectorSession:
    """Inspector state owned by one window.

    Edit buffers are keyed by (object identity, attribute name). Call
    ``forget()`` when an inspected object goes away so a later object that
    reuses its identity does not inherit stale text.
    """

    def __init__(self) -> None:
        self._attributes: dict[type, tuple[TaggedAttribute, ...]] = {}
        self._buffers: dict[tuple[int, str], str] = {}

    def attributes(self, cls: type) -> tuple[TaggedAttribute, ...]:
        if cls not in self._attributes:
            self._attributes[cls] = tagged_attributes(cls)
        return self._attributes[cls]

    def elements(self, obj: Any) -> list[Element]:
        """Elements for every tagged attribute of ``obj``."""
        return [make_element(obj, tagged) for tagged in self.attributes(type(obj))]

    def element(self, obj: Any, attribute: str) -> Element:
        for tagged in self.attributes(type(obj)):
            if tagged.name == attribute:
                return make_element(obj, tagged)
        raise KeyError(f"{type(obj).__name__} has no inspectable attribute {attribute!r}")

    def buffer(self, obj: Any, attribute: str) -> str | None:
        """Pending edit text for an attribute, if any."""
        return self._buffers.get((id(obj), attribute))

    @beartype
    def edit(self, obj: Any, attribute: str, text: str) -> bool:
        """Store edit text and apply it when it parses.

        Returns:
            True if the value was updated, False if the text did not parse
        """
        element = self.element(obj, attribute)
        if not element.editable:
            raise ValueError(f"{element.name!r} is not editable")
        self._buffers[(id(obj), attribute)] = text
        try:
            value = _parser_for(element.get())(text)
        except (ValueError, TypeError) as exc:
            logger.debug("Ignoring edit of %s.%s: %s", type(obj).__name__, attribute, exc)
            return False
        element.set(value)
        return True

    def toggle(self, obj: Any, attribute: str) -> bool:
        """Flip an editable boolean and return its new value."""
        element = self.element(obj, attribute)
        if not isinstance(element, ToggleElement):
            raise ValueError(f"{element.name!r} is not a toggle")
        return element.flip()

    def forget(self, obj: Any) -> None:
        """Drop every edit buffer held for ``obj``."""
        key = id(obj)
        for buffered in [k for k in self._buffers if k[0] == key]:
            del self._buffers[buffered]

    def render(self, obj: Any) -> str:
        """Render all tagged attributes of ``obj`` as text lines."""
        lines: list[str] = []
        self._render_into(obj, lines, depth=0)
        return "\n".join(lines)

    def _render_into(self, obj: Any, lines: list[str], depth: int) -> None:
        pad = "  " * depth
        if not self.attributes(type(obj)):
            lines.append(pad + format_value(obj))
            return

        for element in self.elements(obj):
            if isinstance(element, CollectionElement):
                lines.append(f"{pad}{element.name}:")
                for item in element.items():
                    self._render_into(item, lines, depth + 1)
            elif isinstance(element, ToggleElement):
                mark = "x" if element.get() else " "
                lines.append(f"{pad}[{mark}] {element.name}")
            else:
                text = None
                if element.editable:
                    text = self.buffer(obj, element.attribute)
                if text is None:
                    text = format_value(element.get(), element.format)
                lines.append(f"{pad}{element.name}: {text}")
