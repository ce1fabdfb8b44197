"""
Default Bootstrap form templates.

Balanced fragments are tdom t-strings. The begin/end templates open or close
a tag another template finishes, so they are assembled from SafeHTML.
"""

from __future__ import annotations

from typing import Any

from markupsafe import escape
from tdom import html

from .core import SafeHTML, attrs, is_markup, markup
from .templates import Templates

bootstrap = Templates("bootstrap")


def _classes(*names: str | None) -> str | None:
    joined = " ".join(n for n in names if n)
    return joined or None


def _text(value: Any) -> str | None:
    """Attribute values are plain text."""
    if value is None:
        return None
    if is_markup(value):
        return value.__html__()
    return str(value)


def _escaped(value: Any) -> str:
    return str(escape(value)) if value is not None else ""


def _label(control, renderer, css: str = "control-label"):
    if not control.label:
        return None
    cls = _classes(css, *control.presentation.label_classes)
    caption = markup(renderer.translate(control.label, control))
    return html(t"<label class={cls} for={control.html_id}>{caption}</label>")


def _control_group(control, renderer, body, *, label=True):
    """Wrap a field with its label, inline error and help block."""
    status = renderer.status_for(control)
    error = renderer.error_for(control)
    desc = renderer.description_for(control)

    body = markup(body)
    label_el = _label(control, renderer) if label else None
    error_el = html(t'<span class="help-inline">{markup(error)}</span>') if error is not None else None
    desc_el = html(t'<p class="help-block">{markup(desc)}</p>') if desc is not None else None
    cls = _classes("control-group", status)
    return html(
        t'<div class={cls}>{label_el}<div class="controls">{body}{error_el}{desc_el}</div></div>'
    )


def _input(control, *, value: Any = None):
    cls = _classes(*control.presentation.control_classes)
    return html(
        t"<input type={control.input_type} name={control.name} id={control.html_id}"
        t" value={_text(value)} class={cls} placeholder={_text(control.presentation.placeholder)}"
        t" required={control.required or None} />"
    )


def _addon(text: Any):
    if not text:
        return None
    return html(t'<span class="add-on">{markup(text)}</span>')


def _button(control, renderer):
    caption = _text(renderer.translate(control.label, control))
    match control.kind:
        case "image":
            cls = _classes(*control.presentation.control_classes)
            return html(
                t'<input type="image" name={control.name} id={control.html_id}'
                t" src={_text(control.value)} alt={caption} class={cls} />"
            )
        case kind:
            cls = _classes(
                "btn",
                "btn-primary" if kind == "submit" else None,
                *control.presentation.control_classes,
            )
            return html(
                t"<input type={control.input_type} name={control.name} id={control.html_id}"
                t" value={caption} class={cls} />"
            )


# Form structure


@bootstrap.template("form/begin")
def FormBegin(*, form, action, method, hiddens, classes, **_) -> SafeHTML:
    enctype = "multipart/form-data" if any(c.kind == "upload" for c in form.controls) else None
    tag = attrs(
        action=action,
        method=method,
        id=f"frm-{form.name}",
        class_=" ".join(classes) or None,
        enctype=enctype,
    )
    result = SafeHTML(f"<form {tag}>")
    if hiddens:
        inputs = "".join(
            f"<input {attrs(type='hidden', name=name, value=value)}>" for name, value in hiddens.items()
        )
        result += SafeHTML(f"<div>{inputs}</div>")
    return result


@bootstrap.template("form/end")
def FormEnd(**_) -> SafeHTML:
    return SafeHTML("</form>")


@bootstrap.template("form/errors")
def FormErrors(*, errors, **_):
    items = [html(t"<li>{markup(error)}</li>") for error in errors]
    return html(t'<div class="alert alert-error"><ul class="unstyled">{items}</ul></div>')


@bootstrap.template("group/begin")
def GroupBegin(*, group, **_) -> SafeHTML:
    parts = [f"<fieldset {attrs(id=group.group.name and f'group-{group.group.name}')}>"]
    if group.label:
        parts.append(f"<legend>{_escaped(group.label)}</legend>")
    if group.description:
        parts.append(f'<p class="help-block">{_escaped(group.description)}</p>')
    return SafeHTML("".join(parts))


@bootstrap.template("group/end")
def GroupEnd(**_) -> SafeHTML:
    return SafeHTML("</fieldset>")


@bootstrap.template("button_stack")
def ButtonStack(*, buttons, renderer, **_):
    rendered = [_button(b, renderer) for b in buttons]
    return html(t'<div class="form-actions">{rendered}</div>')


# Controls


@bootstrap.template("controls/TextInput")
def TextInput(*, control, renderer, prepend_button=None, append_button=None, **_):
    value = None if control.kind == "password" else control.value
    field = _input(control, value=value)

    opts = control.options
    before = [n for n in (_addon(opts.prepend), prepend_button and _button(prepend_button, renderer)) if n]
    after = [n for n in (append_button and _button(append_button, renderer), _addon(opts.append)) if n]
    if before or after:
        cls = _classes("input-prepend" if before else None, "input-append" if after else None)
        field = html(t"<div class={cls}>{before}{field}{after}</div>")

    return _control_group(control, renderer, field)


@bootstrap.template("controls/UploadControl")
def UploadControl(*, control, renderer, **_):
    return _control_group(control, renderer, _input(control))


@bootstrap.template("controls/TextArea")
def TextArea(*, control, renderer, **_):
    # built by hand, the parser treats textarea content as raw text
    tag = attrs(
        name=control.name,
        id=control.html_id,
        class_=_classes(*control.presentation.control_classes),
        placeholder=_text(control.presentation.placeholder),
        required=control.required or None,
    )
    area = SafeHTML(f"<textarea {tag}>{_escaped(control.value)}</textarea>")
    return _control_group(control, renderer, area)


@bootstrap.template("controls/SelectBox")
def SelectBox(*, control, renderer, **_):
    cls = _classes(*control.presentation.control_classes)
    options = [
        html(t"<option value={c.key} selected={c.checked or None}>{markup(c.caption)}</option>")
        for c in renderer.choices(control)
    ]
    select = html(
        t"<select name={control.name} id={control.html_id} class={cls}"
        t" required={control.required or None}>{options}</select>"
    )
    return _control_group(control, renderer, select)


@bootstrap.template("controls/Checkbox")
def Checkbox(*, control, renderer, **_):
    caption = markup(renderer.translate(control.label, control))
    box = html(
        t'<label class="checkbox" for={control.html_id}>'
        t'<input type="checkbox" name={control.name} id={control.html_id}'
        t" checked={bool(control.value) or None} required={control.required or None} />"
        t"{caption}</label>"
    )
    return _control_group(control, renderer, box, label=False)


@bootstrap.template("controls/RadioList")
def RadioList(*, control, renderer, **_):
    items = [
        html(
            t'<label class="radio" for={c.html_id}>'
            t'<input type="radio" name={control.name} id={c.html_id} value={c.key}'
            t" checked={c.checked or None} />{markup(c.caption)}</label>"
        )
        for c in renderer.radio_items(control)
    ]
    return _control_group(control, renderer, items)


@bootstrap.template("controls/HiddenField")
def HiddenField(*, control, **_):
    return html(
        t'<input type="hidden" name={control.name} id={control.html_id} value={_text(control.value)} />'
    )


@bootstrap.template("controls/SubmitButton")
@bootstrap.template("controls/ImageButton")
@bootstrap.template("controls/Button")
def SingleButton(*, control, renderer, **_):
    """Buttons normally arrive batched; this covers a direct template override."""
    return html(t'<div class="form-actions">{_button(control, renderer)}</div>')
