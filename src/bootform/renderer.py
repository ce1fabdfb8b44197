"""
Form rendering pipeline.

A render call binds the form (annotating its controls once per distinct
form), collects the form-level errors, resolves the visual groups and then
walks the form producing RenderUnits, each of which is passed through a
named template.

Usage:
    from bootform import FormRenderer

    renderer = FormRenderer(prior_groups=["Account"])
    renderer.render(form)                   # writes to sys.stdout
    markup = renderer.render_string(form)   # SafeHTML
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import unquote_plus

from .bootstrap import bootstrap
from .controls import Control, ControlGroup, Form
from .core import MissingGroupError, SafeHTML, Translator, translate

if TYPE_CHECKING:
    from .config import RendererConfig
    from .templates import Templates

logger = logging.getLogger(__name__)

FORM_BEGIN = "form/begin"
FORM_ERRORS = "form/errors"
FORM_END = "form/end"
GROUP_BEGIN = "group/begin"
GROUP_END = "group/end"
BUTTON_STACK = "button_stack"

# Presentation class per input subtype, anything else keeps its own name
INPUT_CLASSES = {
    "password": "text",
    "file": "text",
    "submit": "button",
    "image": "imagebutton",
}

# Variants whose templates draw prepend/append buttons
ATTACHING_VARIANTS = {"TextInput"}


class Sink(Protocol):
    def write(self, text: str, /) -> Any: ...


@dataclass(frozen=True, slots=True)
class RenderUnit:
    """One emission step: a template name, its context and the controls it renders."""

    template: str
    context: dict[str, Any]
    controls: tuple[Control, ...] = ()


@dataclass(frozen=True, slots=True)
class GroupView:
    """A visual group ready for emission."""

    group: ControlGroup
    template: str | None
    label: Any
    description: Any
    controls: tuple[Control, ...]


@dataclass(frozen=True, slots=True)
class Choice:
    key: str
    caption: Any
    checked: bool
    html_id: str


class FormRenderer:
    """
    Renders forms with Bootstrap markup.

    Args:
        templates: Template registry, defaults to the bundled Bootstrap templates
        errors_at_inputs: Show field errors next to their fields and leave them out
            of the form-level error list. False echoes them at form level instead.
        prior_groups: Groups (or group names) rendered before the others, in order
        form_class: Layout class added to the <form> element
        form_class_prefix: Existing classes with this prefix suppress form_class
    """

    def __init__(
        self,
        templates: Templates | None = None,
        *,
        errors_at_inputs: bool = True,
        prior_groups: Iterable[str | ControlGroup] = (),
        form_class: str = "form-horizontal",
        form_class_prefix: str = "form-",
    ):
        self.templates = templates if templates is not None else bootstrap
        self.errors_at_inputs = errors_at_inputs
        self.prior_groups: list[str | ControlGroup] = list(prior_groups)
        self.form_class = form_class
        self.form_class_prefix = form_class_prefix
        self._form: Form | None = None

    @classmethod
    def from_config(cls, config: RendererConfig, templates: Templates | None = None) -> FormRenderer:
        return cls(
            templates,
            errors_at_inputs=config.errors_at_inputs,
            prior_groups=config.prior_groups,
            form_class=config.form_class,
            form_class_prefix=config.form_class_prefix,
        )

    @property
    def form(self) -> Form | None:
        """The currently bound form."""
        return self._form

    # Annotation

    def bind(self, form: Form) -> bool:
        """Bind ``form``, annotating it unless it is already the bound form."""
        if self._form is form:
            return False

        self._form = form
        logger.debug(f"binding form '{form.name}' with {len(form.controls)} controls")
        for control in form.controls:
            self.annotate(control, form.translator)

        if not any(c.startswith(self.form_class_prefix) for c in form.css_classes):
            form.css_classes.append(self.form_class)
        return True

    def annotate(self, control: Control, translator: Translator | None = None) -> None:
        presentation = control.presentation
        presentation.reset()

        if control.required:
            presentation.add_label_class("required")

        if control.element == "input" and control.input_type:
            subtype = control.input_type
            presentation.add_control_class(INPUT_CLASSES.get(subtype, subtype))

        if control.options.css_class:
            for name in control.options.css_class.split():
                presentation.add_control_class(name)

        if control.options.placeholder:
            presentation.placeholder = translate(control.options.placeholder, translator)

    # Errors and groups

    def find_errors(self, form: Form) -> list[Any]:
        """Form-level error messages, translated."""
        errors = form.get_errors()
        if not errors:
            return []

        if self.errors_at_inputs:
            for control in form.controls:
                if not control.has_errors():
                    continue
                errors = [e for e in errors if e not in control.errors]

        return [translate(e, form.translator) for e in errors]

    def find_groups(self, form: Form) -> list[GroupView]:
        """Prior groups first, then the rest in declaration order."""
        views: list[GroupView] = []
        visited: list[ControlGroup] = []

        for entry in self.prior_groups:
            group = entry if isinstance(entry, ControlGroup) else form.get_group(entry)
            if group is None:
                raise MissingGroupError(str(entry))
            if group in visited:
                continue
            visited.append(group)
            if view := self.build_group(group, translator=form.translator):
                views.append(view)

        for group in form.groups:
            if group in visited:
                continue
            if view := self.build_group(group, translator=form.translator):
                views.append(view)

        logger.debug(f"resolved groups {[v.group.name for v in views]}")
        return views

    def build_group(
        self,
        group: ControlGroup,
        *,
        translator: Translator | None = None,
        rendered: Iterable[Control] = (),
    ) -> GroupView | None:
        if not group.options.visual or not group.controls:
            return None

        done = set(rendered)
        controls = tuple(
            c for c in group.controls if c not in done and not c.is_submitter and not c.is_hidden
        )
        return GroupView(
            group=group,
            template=group.options.template,
            label=translate(group.options.label, translator),
            description=translate(group.options.description, translator),
            controls=controls,
        )

    # Emission

    def begin(self, form: Form) -> RenderPass:
        """Prepare a render pass; configuration errors are raised here."""
        self.bind(form)
        errors = self.find_errors(form)
        groups = self.find_groups(form)
        return RenderPass(self, form, errors, groups)

    def stream(self, form: Form) -> Iterator[str]:
        render_pass = self.begin(form)
        return (self.templates.render(unit.template, unit.context).content for unit in render_pass)

    def render(self, form: Form, sink: Sink | None = None) -> None:
        """Write the form markup to ``sink`` (stdout by default)."""
        out = sink if sink is not None else sys.stdout
        for chunk in self.stream(form):
            out.write(chunk)

    def render_string(self, form: Form) -> SafeHTML:
        return SafeHTML("".join(self.stream(form)))

    __call__ = render_string

    def control_template(self, control: Control) -> str:
        return control.options.template or f"controls/{control.variant}"

    def form_context(self, form: Form) -> dict[str, Any]:
        """Context of the form begin/end templates."""
        action = form.action
        hiddens: dict[str, str] = {}
        if form.method.lower() == "get" and "?" in action:
            # a GET submission replaces the action's query string
            action, query = action.split("?", 1)
            for param in re.split(r"[;&]", query):
                if not param:
                    continue
                key, _, value = param.partition("=")
                key = unquote_plus(key)
                if key not in form:
                    hiddens[key] = unquote_plus(value)

        return {
            "form": form,
            "renderer": self,
            "action": action,
            "method": form.method,
            "hiddens": hiddens,
            "classes": list(form.css_classes),
        }

    # Template helpers

    def translate(self, value: Any, control: Control | None = None) -> Any:
        form = control.form if control is not None and control.form is not None else self._form
        return translate(value, form.translator if form is not None else None)

    def description_for(self, control: Control) -> Any:
        desc = control.options.description or control.options.help
        if not desc:
            return None
        return self.translate(desc, control)

    def error_for(self, control: Control) -> Any:
        if not control.errors or not self.errors_at_inputs:
            return None
        return self.translate(control.errors[0], control)

    def status_for(self, control: Control) -> str | None:
        if self.error_for(control) is not None:
            return "error"
        return control.options.status

    def choices(self, control: Control) -> list[Choice]:
        if isinstance(control.value, (list, tuple, set)):
            selected = {str(v) for v in control.value}
        else:
            selected = {str(control.value)} if control.value is not None else set()
        return [
            Choice(
                key=str(key),
                caption=self.translate(caption, control),
                checked=str(key) in selected,
                html_id=f"{control.html_id}-{key}",
            )
            for key, caption in control.items.items()
        ]

    def radio_items(self, control: Control) -> list[Choice]:
        return self.choices(control)

    def is_email(self, control: Control) -> bool:
        return control.input_type == "email"

    def is_button(self, control: Control) -> bool:
        return control.is_button

    def is_checkbox(self, control: Control) -> bool:
        return control.kind == "checkbox"

    def is_radio_list(self, control: Control) -> bool:
        return control.kind == "radiolist"


@dataclass
class RenderPass:
    """
    State of one render call.

    Iterating yields the RenderUnits in emission order. Rendered controls and
    the pending button batch live here, so they are discarded with the pass.
    """

    renderer: FormRenderer
    form: Form
    errors: list[Any]
    groups: list[GroupView]
    rendered: set[Control] = field(default_factory=set)
    buttons: list[Control] = field(default_factory=list)
    # attached button -> the control that draws it
    attached: dict[Control, Control] = field(default_factory=dict)

    def __post_init__(self):
        for control in self.form.controls:
            for name in (control.options.prepend_button, control.options.append_button):
                if name is None:
                    continue
                button = self.form.get(name)
                if button is None:
                    logger.warning(f"control '{control.name}' refers to unknown button '{name}'")
                    continue
                if not button.is_button:
                    logger.warning(f"control '{control.name}' refers to '{name}', which is not a button")
                    continue
                if control.variant not in ATTACHING_VARIANTS:
                    logger.warning(f"control '{control.name}' cannot hold button '{name}', batching it instead")
                    continue
                self.attached[button] = control

    def __iter__(self) -> Iterator[RenderUnit]:
        context = self.renderer.form_context(self.form)
        yield RenderUnit(FORM_BEGIN, context)

        if self.errors:
            yield RenderUnit(
                FORM_ERRORS,
                {"errors": self.errors, "form": self.form, "renderer": self.renderer},
            )

        for view in self.groups:
            yield from self._group(view)

        for control in self.form.controls:
            yield from self._control(control)
        yield from self._flush()

        yield RenderUnit(FORM_END, context)

    def is_rendered(self, control: Control) -> bool:
        return control in self.rendered

    def _eligible(self, control: Control) -> bool:
        return (
            control not in self.rendered
            and control not in self.buttons
            and control not in self.attached
            and control.form is self.form
        )

    def _group(self, view: GroupView) -> Iterator[RenderUnit]:
        body = self.renderer.build_group(view.group, translator=self.form.translator, rendered=self.rendered)
        members = body.controls if body is not None else ()

        if view.template:
            controls = tuple(c for c in members if self._eligible(c))
            yield RenderUnit(
                view.template,
                {"group": view, "controls": controls, "renderer": self.renderer},
                controls,
            )
            self.rendered.update(controls)
            # group templates draw fields only, their buttons join the next batch
            for button, owner in list(self.attached.items()):
                if owner in controls:
                    del self.attached[button]
            return

        yield RenderUnit(GROUP_BEGIN, {"group": view, "renderer": self.renderer})
        for control in members:
            yield from self._control(control)
        yield from self._flush()
        yield RenderUnit(GROUP_END, {"group": view, "renderer": self.renderer})

    def _control(self, control: Control) -> Iterator[RenderUnit]:
        if not self._eligible(control):
            return

        if control.is_button:
            self.buttons.append(control)
            return

        yield from self._flush()

        prepend = self._attached(control, control.options.prepend_button)
        append = self._attached(control, control.options.append_button)
        yield RenderUnit(
            self.renderer.control_template(control),
            {
                "control": control,
                "renderer": self.renderer,
                "prepend_button": prepend,
                "append_button": append,
            },
            (control,),
        )
        self.rendered.add(control)
        self.rendered.update(b for b in (prepend, append) if b is not None)

    def _attached(self, control: Control, name: str | None) -> Control | None:
        if name is None:
            return None
        button = self.form.get(name)
        if button is None or self.attached.get(button) is not control:
            return None
        return button

    def _flush(self) -> Iterator[RenderUnit]:
        if not self.buttons:
            return

        buttons = tuple(self.buttons)
        self.buttons.clear()
        logger.debug(f"flushing button batch {[b.name for b in buttons]}")
        yield RenderUnit(
            BUTTON_STACK,
            {"buttons": buttons, "form": self.form, "renderer": self.renderer},
            buttons,
        )
        self.rendered.update(buttons)
