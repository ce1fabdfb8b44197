"""
Core markup types, translation helpers and errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Protocol, TypeAlias, runtime_checkable

from markupsafe import Markup


@dataclass(frozen=True, slots=True)
class SafeHTML:
    """
    Marks content as already escaped/safe.
    Immutable and hashable for use as cache keys.
    """

    content: str

    def __html__(self) -> str:
        return self.content

    def __str__(self) -> str:
        return self.content

    def __bool__(self) -> bool:
        return bool(self.content)

    def __add__(self, other: SafeHTML | str) -> SafeHTML:
        if is_markup(other):
            return SafeHTML(self.content + other.__html__())
        return SafeHTML(self.content + escape(str(other)))

    def __radd__(self, other: SafeHTML | str) -> SafeHTML:
        if is_markup(other):
            return SafeHTML(other.__html__() + self.content)
        return SafeHTML(escape(str(other)) + self.content)


# Plain text, or pre-rendered markup (anything with __html__)
Message: TypeAlias = "str | SafeHTML | Markup"


@runtime_checkable
class Translator(Protocol):
    """Anything that turns a plain-text message into its translation."""

    def translate(self, message: str) -> str: ...


def is_markup(value: Any) -> bool:
    """True for pre-rendered markup, which is never translated or escaped."""
    return hasattr(value, "__html__")


def translate(value: Any, translator: Translator | None) -> Any:
    """Translate plain text; markup, empty values and missing translators pass through."""
    if translator is None or value is None or is_markup(value):
        return value
    if not value:
        return value
    return translator.translate(str(value))


def raw(content: str) -> SafeHTML:
    """Mark a string as safe/pre-escaped HTML. Use with caution."""
    return SafeHTML(content)


def markup(value: Any) -> Any:
    """Convert pre-rendered markup into something tdom inserts unescaped."""
    if is_markup(value):
        return Markup(value.__html__())
    return value


def attr(name: str, value: str | bool | None) -> SafeHTML:
    """
    Build a safe HTML attribute.

    - None or False: returns empty (attribute omitted)
    - True: returns just the attribute name (boolean attribute)
    - str: returns name="escaped_value"
    """
    if value is None or value is False:
        return SafeHTML("")
    if value is True:
        return SafeHTML(name)
    return SafeHTML(f'{name}="{escape(str(value))}"')


def attrs(**values: str | bool | None) -> SafeHTML:
    """Render several attributes; trailing underscores are dropped (class_ -> class)."""
    parts = []
    for key, value in values.items():
        if key.endswith("_"):
            key = key[:-1]
        key = key.replace("_", "-")
        result = attr(key, value)
        if result.content:
            parts.append(result.content)
    return SafeHTML(" ".join(parts))


class BootformError(Exception):
    """Base class for bootform errors."""


class ConfigurationError(BootformError):
    """The renderer was configured in a way the bound form cannot satisfy."""


class MissingGroupError(ConfigurationError, LookupError):
    def __init__(self, group: str):
        super().__init__(f"Form has no group {group}.")
        self.group = group


class TemplateNotFound(BootformError, LookupError):
    def __init__(self, name: str, registry: str | None = None):
        where = f" in '{registry}'" if registry else ""
        super().__init__(f"Template '{name}' is not registered{where}.")
        self.name = name
