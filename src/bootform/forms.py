"""
Pydantic models as form definitions.

Usage:
    from pydantic import Field
    from bootform.forms import BaseForm

    class SignupForm(BaseForm):
        username: str = Field(min_length=3, max_length=20, json_schema_extra={"form_group": "Account"})
        password: str = Field(min_length=8, json_schema_extra={"form_group": "Account"})
        age: int = Field(ge=18, le=120)

    form = SignupForm.to_form(action="/signup")
    form = SignupForm.to_form(action="/signup", values=data, errors=errors)
"""

from __future__ import annotations

import types
from typing import Any, Literal, Union, cast, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from .controls import Control, ControlKind, ControlOptions, Form
from .core import Translator


# Choices can be list of [value, label] pairs
Choices = list[list[str | int | bool | float]]
Widget = Literal["input", "textarea", "select", "checkbox", "radio", "hidden"]

# Key of form-level errors in parse_form_errors() output
FORM_ERRORS = ""


class FieldConfig(BaseModel):
    """Configuration for how a field should render."""

    name: str
    label: str
    type: str = "text"
    required: bool = False
    placeholder: str = ""
    description: str | None = None

    # Select/radio options: [[value, label], ...]
    choices: Choices | None = None

    # Widget override
    widget: Widget | None = None

    # Name of the control group the field belongs to
    group: str | None = None

    # Per-field template override
    template: str | None = None

    @property
    def kind(self) -> ControlKind:
        match self.widget:
            case "textarea":
                return "textarea"
            case "select":
                return "select"
            case "checkbox":
                return "checkbox"
            case "radio":
                return "radiolist"
            case "hidden":
                return "hidden"
        match self.type:
            case "password" | "email" | "number":
                return self.type
            case "file":
                return "upload"
            case _:
                return "text"


def _label_from_name(name: str) -> str:
    """Convert field_name to Field Name."""
    return name.replace("_", " ").title()


def _infer_input_type(python_type: type, field_name: str) -> str:
    """Infer HTML input type from Python type and field name."""
    type_str = str(python_type)

    if python_type is int:
        return "number"
    if python_type is float:
        return "number"
    if python_type is bool:
        return "checkbox"
    if "EmailStr" in type_str:
        return "email"
    if "HttpUrl" in type_str or "AnyUrl" in type_str:
        return "url"
    if "SecretStr" in type_str:
        return "password"

    name_lower = field_name.lower()
    if "password" in name_lower:
        return "password"
    if "email" in name_lower:
        return "email"
    if "url" in name_lower or "website" in name_lower:
        return "url"
    if "phone" in name_lower or "tel" in name_lower:
        return "tel"
    if "datetime" in name_lower:
        return "datetime-local"
    if "date" in name_lower:
        return "date"
    if "time" in name_lower:
        return "time"
    if "color" in name_lower:
        return "color"

    return "text"


def _extract_field_config(name: str, annotation: type, field_info: FieldInfo) -> FieldConfig:
    """Extract FieldConfig from Pydantic field."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        annotation = args[0] if args else str
        origin = get_origin(annotation)

    choices: Choices | None = None
    if origin is Literal:
        args = get_args(annotation)
        choices = [[str(a), str(a)] for a in args]

    widget: Widget = "input"
    group: str | None = None
    template: str | None = None
    extra = field_info.json_schema_extra or {}
    if isinstance(extra, dict):
        widget = cast(Widget, extra.get("form_widget", widget))
        if raw_choices := extra.get("form_choices", None):
            choices = cast(Choices, raw_choices)
        group = cast(str | None, extra.get("form_group"))
        template = cast(str | None, extra.get("form_template"))

    if choices and widget == "input":
        widget = "select"

    input_type = _infer_input_type(annotation, name)
    if input_type == "checkbox":
        widget = "checkbox"

    required = field_info.default is PydanticUndefined and field_info.default_factory is None

    placeholder: str = ""
    if field_info.examples:
        placeholder = ", ".join([str(e) for e in field_info.examples])

    return FieldConfig(
        name=name,
        label=field_info.title or _label_from_name(name),
        type=input_type,
        required=required,
        placeholder=placeholder,
        description=field_info.description,
        choices=choices,
        widget=widget,
        group=group,
        template=template,
    )


def _as_list(messages: str | list[str] | None) -> list[str]:
    if messages is None:
        return []
    if isinstance(messages, str):
        return [messages]
    return list(messages)


class BaseForm(BaseModel):
    """
    Base class for models that describe a form.

    Usage:
        class LoginSchema(BaseForm):
            email: EmailStr
            password: str = Field(min_length=8)

        # Build the renderable form (class method)
        form = LoginSchema.to_form(action="/login", values=values, errors=errors)

        # Validate and create instance (normal Pydantic)
        data = LoginSchema(**form_data)
    """

    @classmethod
    def get_field_configs(cls) -> dict[str, FieldConfig]:
        """Cache field configurations per class."""
        if "_field_config_cache" not in cls.__dict__:
            configs = {}
            for name, field_info in cls.model_fields.items():
                annotation = field_info.annotation or str
                configs[name] = _extract_field_config(name, annotation, field_info)
            cls._field_config_cache = configs
        return cls._field_config_cache

    @classmethod
    def configure_field(cls, name: str, **kwargs) -> type[BaseForm]:
        """Override configuration for a specific field."""
        configs = cls.get_field_configs()
        if name in configs:
            for key, value in kwargs.items():
                setattr(configs[name], key, value)
        return cls

    @classmethod
    def form_name(cls) -> str:
        return cls.__name__.removesuffix("Form").lower() or "form"

    @classmethod
    def to_form(
        cls,
        action: str = "",
        method: str = "post",
        *,
        values: dict[str, Any] | None = None,
        errors: dict[str, str | list[str]] | None = None,
        exclude: set[str] | None = None,
        include: list[str] | None = None,
        submit_text: str | None = "Submit",
        translator: Translator | None = None,
        name: str | None = None,
    ) -> Form:
        """Build a Form with one control per field, grouped by ``form_group``."""
        values = values or {}
        errors = errors or {}
        exclude = exclude or set()
        configs = cls.get_field_configs()

        if include:
            field_names = [n for n in include if n in configs]
        else:
            field_names = [n for n in configs if n not in exclude]

        form = Form(name or cls.form_name(), action=action, method=method, translator=translator)
        for message in _as_list(errors.get(FORM_ERRORS)):
            form.add_error(message)

        for field_name in field_names:
            cfg = configs[field_name]
            group = None
            if cfg.group:
                group = form.get_group(cfg.group) or form.add_group(cfg.group, name=cfg.group)
            form.set_current_group(group)

            control = form.add(cls._build_control(cfg, values.get(field_name)))
            for message in _as_list(errors.get(field_name)):
                control.add_error(message)

        form.set_current_group(None)
        if submit_text:
            form.add_submit("submit", submit_text)
        return form

    @classmethod
    def _build_control(cls, cfg: FieldConfig, value: Any) -> Control:
        kind = cfg.kind
        return Control(
            cfg.name,
            kind=kind,
            label=cfg.label if kind != "hidden" else None,
            value=value,
            required=cfg.required,
            items={str(v): str(lbl) for v, lbl in (cfg.choices or [])},
            html_type=cfg.type if kind == "text" and cfg.type != "text" else None,
            options=ControlOptions(
                description=cfg.description,
                placeholder=cfg.placeholder or None,
                template=cfg.template,
            ),
        )


def parse_form_errors(error: ValidationError) -> dict[str, list[str]]:
    """Convert Pydantic ValidationError to field -> messages dict.

    Errors without a location (model validators) land under FORM_ERRORS.
    """
    errors: dict[str, list[str]] = {}
    for err in error.errors():
        loc = err["loc"]
        field = str(loc[0]) if loc else FORM_ERRORS
        errors.setdefault(field, []).append(err["msg"])
    return errors
