"""Translator adapters."""

from __future__ import annotations

import gettext
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class GettextTranslator:
    """
    Adapts stdlib gettext catalogs to the Translator protocol.

    Usage:
        form.translator = GettextTranslator.load("locale", ["cs"], domain="forms")
    """

    catalog: gettext.NullTranslations = field(default_factory=gettext.NullTranslations)

    @classmethod
    def load(
        cls,
        localedir: str | Path,
        languages: list[str] | None = None,
        *,
        domain: str = "messages",
    ) -> GettextTranslator:
        catalog = gettext.translation(domain, localedir, languages=languages, fallback=True)
        return cls(catalog)

    def translate(self, message: str) -> str:
        return self.catalog.gettext(message)


@dataclass
class DictTranslator:
    """In-memory translations, mostly useful in tests and small apps."""

    messages: dict[str, str] = field(default_factory=dict)

    def translate(self, message: str) -> str:
        return self.messages.get(message, message)
