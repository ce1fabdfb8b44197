"""
bootform - Bootstrap form rendering using Python 3.14 t-strings

Turns a form's control tree into an ordered sequence of render units
(errors, groups, fields, button rows) and renders each one through a
named template.
"""

from .core import (
    BootformError,
    ConfigurationError,
    MissingGroupError,
    SafeHTML,
    TemplateNotFound,
    Translator,
    raw,
)
from .controls import Control, ControlGroup, ControlOptions, Form, GroupOptions
from .templates import Templates
from .bootstrap import bootstrap
from .renderer import FormRenderer, RenderPass, RenderUnit
from .config import RendererConfig
from .forms import BaseForm, parse_form_errors

__all__ = [
    # Core
    "SafeHTML",
    "Translator",
    "raw",
    # Errors
    "BootformError",
    "ConfigurationError",
    "MissingGroupError",
    "TemplateNotFound",
    # Form model
    "Form",
    "Control",
    "ControlGroup",
    "ControlOptions",
    "GroupOptions",
    # Rendering
    "Templates",
    "bootstrap",
    "FormRenderer",
    "RenderPass",
    "RenderUnit",
    "RendererConfig",
    # Pydantic forms
    "BaseForm",
    "parse_form_errors",
]
