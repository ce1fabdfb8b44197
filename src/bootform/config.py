"""Renderer configuration, loaded from pyproject.toml [tool.bootform]."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

logger = logging.getLogger(__name__)

TOOL_KEY = "bootform"


@dataclass
class RendererConfig:
    """
    Example pyproject.toml section:

        [tool.bootform]
        errors_at_inputs = true
        prior_groups = ["Account", "Address"]
        form_class = "form-horizontal"
    """

    errors_at_inputs: bool = True
    prior_groups: list[str] = field(default_factory=list)
    form_class: str = "form-horizontal"
    form_class_prefix: str = "form-"
    project_root: Path | None = field(default=None, repr=False)

    @classmethod
    def load(cls, project_root: Path) -> RendererConfig:
        pyproject = project_root / "pyproject.toml"
        if not pyproject.exists():
            return cls(project_root=project_root)

        doc = tomlkit.parse(pyproject.read_text())
        tool_config = doc.get("tool", {}).get(TOOL_KEY, {})
        logger.debug(f"loaded [tool.{TOOL_KEY}] from {pyproject}: {dict(tool_config)}")

        return cls(
            errors_at_inputs=bool(tool_config.get("errors_at_inputs", True)),
            prior_groups=[str(g) for g in tool_config.get("prior_groups", [])],
            form_class=str(tool_config.get("form_class", "form-horizontal")),
            form_class_prefix=str(tool_config.get("form_class_prefix", "form-")),
            project_root=project_root,
        )

    def save(self) -> None:
        if self.project_root is None:
            raise ValueError("RendererConfig has no project_root to save to")

        pyproject = self.project_root / "pyproject.toml"
        if pyproject.exists():
            doc = tomlkit.parse(pyproject.read_text())
        else:
            doc = tomlkit.document()

        if "tool" not in doc:
            doc["tool"] = tomlkit.table()

        doc["tool"][TOOL_KEY] = {
            "errors_at_inputs": self.errors_at_inputs,
            "prior_groups": self.prior_groups,
            "form_class": self.form_class,
            "form_class_prefix": self.form_class_prefix,
        }
        pyproject.write_text(tomlkit.dumps(doc))
