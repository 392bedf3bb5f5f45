"""Element location strategies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..models import Dialect

_W3C_STRATEGIES = {"css selector", "link text", "partial link text", "tag name", "xpath"}


@dataclass(frozen=True)
class ElementLocator:
    using: str
    value: str

    @classmethod
    def css(cls, selector: str) -> "ElementLocator":
        return cls("css selector", selector)

    @classmethod
    def xpath(cls, expression: str) -> "ElementLocator":
        return cls("xpath", expression)

    @classmethod
    def link_text(cls, text: str) -> "ElementLocator":
        return cls("link text", text)

    @classmethod
    def partial_link_text(cls, text: str) -> "ElementLocator":
        return cls("partial link text", text)

    @classmethod
    def tag_name(cls, name: str) -> "ElementLocator":
        return cls("tag name", name)

    @classmethod
    def id(cls, element_id: str) -> "ElementLocator":
        return cls("id", element_id)

    @classmethod
    def name(cls, name: str) -> "ElementLocator":
        return cls("name", name)

    @classmethod
    def class_name(cls, name: str) -> "ElementLocator":
        if not name or any(char.isspace() for char in name):
            raise ValueError(f"class name must be a single non-empty class: {name!r}")
        return cls("class name", name)

    @classmethod
    def test_id(cls, value: str) -> "ElementLocator":
        """Match elements by their ``data-testid`` attribute."""
        return cls.css(_attribute_selector("data-testid", value))

    @classmethod
    def role(cls, value: str) -> "ElementLocator":
        """Match elements by their ``role`` attribute."""
        return cls.css(_attribute_selector("role", value))

    def to_wire(self, dialect: Dialect) -> dict[str, Any]:
        # W3C only knows five strategies; the legacy ones become CSS.
        if dialect is Dialect.W3C and self.using not in _W3C_STRATEGIES:
            if self.using == "id":
                return {"using": "css selector", "value": _attribute_selector("id", self.value)}
            if self.using == "name":
                return {"using": "css selector", "value": _attribute_selector("name", self.value)}
            if self.using == "class name":
                return {"using": "css selector", "value": "." + _css_identifier(self.value)}
        return {"using": self.using, "value": self.value}


def _attribute_selector(attribute: str, value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'[{attribute}="{escaped}"]'


def _css_identifier(value: str) -> str:
    """Escape ``value`` for use as a CSS identifier (as ``CSS.escape`` does)."""

    parts = []
    for index, char in enumerate(value):
        if char.isdigit() and (index == 0 or (index == 1 and value[0] == "-")):
            parts.append(f"\\{ord(char):x} ")
        elif char.isalnum() or char in "-_" or ord(char) >= 0x80:
            parts.append(char)
        else:
            parts.append("\\" + char)
    return "".join(parts)
