"""
Named template registry.

A template is any callable taking keyword arguments and returning a tdom
node, SafeHTML or a string. Registries can be chained so an application
overrides a handful of templates and inherits the rest.

Usage:
    from bootform.bootstrap import bootstrap

    mine = bootstrap.extend("mine")

    @mine.template("controls/Checkbox")
    def Checkbox(*, control, renderer, **_):
        return html(t"<label><input type=checkbox name={control.name} /> {control.label}</label>")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from .core import SafeHTML, TemplateNotFound, is_markup

logger = logging.getLogger(__name__)

TemplateFunc = Callable[..., Any]


class Templates:
    """Registry of template callables keyed by identifier."""

    def __init__(self, name: str, parent: Templates | None = None):
        self.name = name
        self.parent = parent
        self._templates: dict[str, TemplateFunc] = {}

    def __repr__(self) -> str:
        return f"Templates({self.name!r}, templates={len(self._templates)})"

    def __contains__(self, name: object) -> bool:
        return self.get(name) is not None  # type: ignore[arg-type]

    def register(self, name: str, fn: TemplateFunc) -> TemplateFunc:
        self._templates[name] = fn
        return fn

    def template(self, name: str) -> Callable[[TemplateFunc], TemplateFunc]:
        """Register the decorated function under ``name``."""

        def decorator(fn: TemplateFunc) -> TemplateFunc:
            return self.register(name, fn)

        return decorator

    def get(self, name: str) -> TemplateFunc | None:
        if name in self._templates:
            return self._templates[name]
        if self.parent is not None:
            return self.parent.get(name)
        return None

    def names(self) -> list[str]:
        inherited = self.parent.names() if self.parent is not None else []
        return sorted(set(inherited) | set(self._templates))

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def extend(self, name: str) -> Templates:
        """Create a child registry that falls back to this one."""
        return Templates(name, parent=self)

    def render(self, name: str, context: Mapping[str, Any]) -> SafeHTML:
        fn = self.get(name)
        if fn is None:
            raise TemplateNotFound(name, self.name)
        logger.debug(f"rendering template {name} from '{self.name}'")
        return to_safe_html(fn(**context))


def to_safe_html(result: Any) -> SafeHTML:
    """Normalise whatever a template returned."""
    if result is None:
        return SafeHTML("")
    if isinstance(result, SafeHTML):
        return result
    if is_markup(result):
        return SafeHTML(result.__html__())
    return SafeHTML(str(result))
