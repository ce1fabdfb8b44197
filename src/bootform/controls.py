"""
In-memory form model: forms, controls and control groups.

Usage:
    from bootform.controls import Form

    form = Form("signup", action="/signup")
    form.add_group("Account")
    form.add_text("username", "Username", required=True, placeholder="jdoe")
    form.add_password("password", "Password", required=True)
    form.set_current_group(None)
    form.add_submit("save", "Sign up")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from .core import Message, Translator


ControlKind = Literal[
    "text",
    "password",
    "email",
    "number",
    "upload",
    "textarea",
    "select",
    "checkbox",
    "radiolist",
    "hidden",
    "submit",
    "image",
    "button",
]
Status = Literal["warning", "error", "success", "info"]


class ControlOptions(BaseModel):
    """Presentation options recognised by the renderer."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    description: Any = None
    help: Any = None
    status: Status | None = None
    css_class: str | None = None
    prepend: Any = None
    append: Any = None

    # Name of a button control rendered inside the input group
    prepend_button: str | None = None
    append_button: str | None = None

    placeholder: Any = None
    template: str | None = None


class GroupOptions(BaseModel):
    """Options of a control group."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    visual: bool = False
    label: Any = None
    description: Any = None
    template: str | None = None


@dataclass
class Presentation:
    """Presentational state derived by the renderer when a form is bound."""

    label_classes: list[str] = field(default_factory=list)
    control_classes: list[str] = field(default_factory=list)
    placeholder: Any = None

    def add_label_class(self, name: str) -> None:
        if name not in self.label_classes:
            self.label_classes.append(name)

    def add_control_class(self, name: str) -> None:
        if name not in self.control_classes:
            self.control_classes.append(name)

    def reset(self) -> None:
        self.label_classes.clear()
        self.control_classes.clear()
        self.placeholder = None


@dataclass(eq=False)
class Control:
    """A single form field. Equality and hashing are by identity."""

    name: str
    kind: ControlKind = "text"
    label: Message | None = None
    value: Any = None
    required: bool = False
    errors: list[Message] = field(default_factory=list)
    items: dict[str, Message] = field(default_factory=dict)
    options: ControlOptions = field(default_factory=ControlOptions)
    # HTML type for text inputs that are not plain text (url, tel, date, ...)
    html_type: str | None = None
    presentation: Presentation = field(default_factory=Presentation)
    form: Form | None = field(default=None, repr=False)

    @property
    def element(self) -> str:
        match self.kind:
            case "textarea":
                return "textarea"
            case "select":
                return "select"
            case _:
                return "input"

    @property
    def input_type(self) -> str | None:
        """HTML type attribute for input elements."""
        match self.kind:
            case "textarea" | "select":
                return None
            case "upload":
                return "file"
            case "radiolist":
                return "radio"
            case "text" if self.html_type:
                return self.html_type
            case kind:
                return kind

    @property
    def variant(self) -> str:
        """Concrete variant name, used to look up the control template."""
        match self.kind:
            case "text" | "password" | "email" | "number":
                return "TextInput"
            case "upload":
                return "UploadControl"
            case "textarea":
                return "TextArea"
            case "select":
                return "SelectBox"
            case "checkbox":
                return "Checkbox"
            case "radiolist":
                return "RadioList"
            case "hidden":
                return "HiddenField"
            case "submit":
                return "SubmitButton"
            case "image":
                return "ImageButton"
            case "button":
                return "Button"
        raise ValueError(f"Unknown control kind: {self.kind}")

    @property
    def is_button(self) -> bool:
        return self.kind in ("submit", "image", "button")

    @property
    def is_submitter(self) -> bool:
        return self.kind in ("submit", "image")

    @property
    def is_hidden(self) -> bool:
        return self.kind == "hidden"

    @property
    def html_id(self) -> str:
        prefix = f"frm-{self.form.name}" if self.form is not None else "frm"
        return f"{prefix}-{self.name}"

    def add_error(self, message: Message) -> None:
        self.errors.append(message)

    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(eq=False)
class ControlGroup:
    """An ordered, named subset of a form's controls."""

    name: str | None = None
    controls: list[Control] = field(default_factory=list)
    options: GroupOptions = field(default_factory=GroupOptions)

    def add(self, *controls: Control) -> ControlGroup:
        for control in controls:
            if control not in self.controls:
                self.controls.append(control)
        return self


@dataclass(eq=False)
class Form:
    """Root aggregate holding ordered controls and groups."""

    name: str = "form"
    action: str = ""
    method: str = "post"
    translator: Translator | None = None
    css_classes: list[str] = field(default_factory=list)
    controls: list[Control] = field(default_factory=list)
    groups: list[ControlGroup] = field(default_factory=list)
    errors: list[Message] = field(default_factory=list)
    current_group: ControlGroup | None = field(default=None, repr=False)

    def add(self, control: Control) -> Control:
        if control.name in self:
            raise ValueError(f"Form '{self.name}' already has a control named '{control.name}'")
        control.form = self
        self.controls.append(control)
        if self.current_group is not None:
            self.current_group.add(control)
        return control

    def _add(self, name: str, kind: ControlKind, label: Message | None, **kwargs: Any) -> Control:
        options = {k: kwargs.pop(k) for k in list(kwargs) if k in ControlOptions.model_fields}
        return self.add(
            Control(name, kind=kind, label=label, options=ControlOptions(**options), **kwargs)
        )

    def add_text(self, name: str, label: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "text", label, **kwargs)

    def add_password(self, name: str, label: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "password", label, **kwargs)

    def add_email(self, name: str, label: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "email", label, **kwargs)

    def add_upload(self, name: str, label: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "upload", label, **kwargs)

    def add_textarea(self, name: str, label: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "textarea", label, **kwargs)

    def add_select(
        self, name: str, label: Message | None = None, items: dict[str, Message] | None = None, **kwargs: Any
    ) -> Control:
        return self._add(name, "select", label, items=dict(items or {}), **kwargs)

    def add_checkbox(self, name: str, label: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "checkbox", label, **kwargs)

    def add_radio_list(
        self, name: str, label: Message | None = None, items: dict[str, Message] | None = None, **kwargs: Any
    ) -> Control:
        return self._add(name, "radiolist", label, items=dict(items or {}), **kwargs)

    def add_hidden(self, name: str, value: Any = None, **kwargs: Any) -> Control:
        return self._add(name, "hidden", None, value=value, **kwargs)

    def add_submit(self, name: str, caption: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "submit", caption, **kwargs)

    def add_image(self, name: str, src: str | None = None, alt: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "image", alt, value=src, **kwargs)

    def add_button(self, name: str, caption: Message | None = None, **kwargs: Any) -> Control:
        return self._add(name, "button", caption, **kwargs)

    def add_group(
        self,
        label: Message | None = None,
        *,
        name: str | None = None,
        visual: bool = True,
        description: Message | None = None,
        template: str | None = None,
    ) -> ControlGroup:
        """Create a group and make it current; later controls join it."""
        group = ControlGroup(
            name=name or (str(label) if label is not None else None),
            options=GroupOptions(
                visual=visual, label=label, description=description, template=template
            ),
        )
        self.groups.append(group)
        self.current_group = group
        return group

    def set_current_group(self, group: ControlGroup | None) -> None:
        self.current_group = group

    def get_group(self, name: str) -> ControlGroup | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def get(self, name: str) -> Control | None:
        for control in self.controls:
            if control.name == name:
                return control
        return None

    def __getitem__(self, name: str) -> Control:
        control = self.get(name)
        if control is None:
            raise KeyError(name)
        return control

    def __contains__(self, name: object) -> bool:
        return any(control.name == name for control in self.controls)

    def add_error(self, message: Message) -> None:
        self.errors.append(message)

    def get_errors(self) -> list[Message]:
        """Own errors plus every control's errors, without duplicates."""
        seen: list[Message] = []
        for message in [*self.errors, *(e for c in self.controls for e in c.errors)]:
            if message not in seen:
                seen.append(message)
        return seen

    def has_errors(self) -> bool:
        return bool(self.get_errors())
