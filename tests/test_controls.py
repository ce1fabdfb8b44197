"""
Tests for the form model.
"""

import pytest
from pydantic import ValidationError

from bootform import Control, ControlOptions, Form


class TestControlKinds:
    @pytest.mark.parametrize(
        ("kind", "element", "input_type", "variant"),
        [
            ("text", "input", "text", "TextInput"),
            ("password", "input", "password", "TextInput"),
            ("email", "input", "email", "TextInput"),
            ("number", "input", "number", "TextInput"),
            ("upload", "input", "file", "UploadControl"),
            ("textarea", "textarea", None, "TextArea"),
            ("select", "select", None, "SelectBox"),
            ("checkbox", "input", "checkbox", "Checkbox"),
            ("radiolist", "input", "radio", "RadioList"),
            ("hidden", "input", "hidden", "HiddenField"),
            ("submit", "input", "submit", "SubmitButton"),
            ("image", "input", "image", "ImageButton"),
            ("button", "input", "button", "Button"),
        ],
    )
    def test_kind_properties(self, kind, element, input_type, variant):
        control = Control("field", kind=kind)
        assert control.element == element
        assert control.input_type == input_type
        assert control.variant == variant

    def test_html_type_for_text(self):
        assert Control("site", html_type="url").input_type == "url"
        assert Control("site", kind="password", html_type="url").input_type == "password"

    def test_buttons(self):
        assert Control("a", kind="submit").is_submitter
        assert Control("a", kind="image").is_submitter
        assert Control("a", kind="button").is_button
        assert not Control("a", kind="button").is_submitter
        assert not Control("a").is_button

    def test_hidden(self):
        assert Control("a", kind="hidden").is_hidden
        assert not Control("a").is_hidden


class TestControl:
    def test_identity_equality(self):
        a = Control("name")
        b = Control("name")
        assert a != b
        assert len({a, b}) == 2

    def test_errors(self):
        control = Control("name")
        assert not control.has_errors()
        control.add_error("too short")
        assert control.has_errors()
        assert control.errors == ["too short"]

    def test_html_id(self):
        form = Form("signup")
        assert form.add_text("email").html_id == "frm-signup-email"
        assert Control("loose").html_id == "frm-loose"

    def test_options_reject_unknown_keys(self):
        with pytest.raises(ValidationError):
            ControlOptions(colour="red")


class TestForm:
    def test_add_sets_back_reference(self):
        form = Form()
        control = form.add_text("name", "Name")
        assert control.form is form
        assert control.label == "Name"
        assert form.controls == [control]

    def test_duplicate_name_rejected(self):
        form = Form()
        form.add_text("name")
        with pytest.raises(ValueError, match="already has a control named 'name'"):
            form.add_email("name")

    def test_factories_route_options(self):
        form = Form()
        control = form.add_text("name", required=True, value="x", placeholder="Name", css_class="wide")
        assert control.required
        assert control.value == "x"
        assert control.options.placeholder == "Name"
        assert control.options.css_class == "wide"

    def test_unknown_option_rejected(self):
        with pytest.raises(TypeError):
            Form().add_text("name", colour="red")

    def test_select_items(self):
        items = {"a": "A"}
        control = Form().add_select("letter", items=items)
        assert control.items == items
        assert control.items is not items

    def test_hidden_and_image(self):
        form = Form()
        token = form.add_hidden("token", "abc")
        image = form.add_image("go", "/go.png", "Go")
        assert token.value == "abc"
        assert token.label is None
        assert image.value == "/go.png"
        assert image.label == "Go"

    def test_lookup(self):
        form = Form()
        control = form.add_text("name")
        assert form.get("name") is control
        assert form["name"] is control
        assert "name" in form
        assert form.get("nope") is None
        assert "nope" not in form
        with pytest.raises(KeyError):
            form["nope"]


class TestGroups:
    def test_controls_join_current_group(self):
        form = Form()
        group = form.add_group("Account")
        name = form.add_text("name")
        form.set_current_group(None)
        other = form.add_text("other")

        assert group.name == "Account"
        assert group.options.visual is True
        assert group.options.label == "Account"
        assert group.controls == [name]
        assert other not in group.controls

    def test_explicit_group_name(self):
        form = Form()
        group = form.add_group("Your account", name="account", description="Login details")
        assert form.get_group("account") is group
        assert form.get_group("Your account") is None
        assert group.options.description == "Login details"

    def test_add_to_group_once(self):
        form = Form()
        group = form.add_group("Main")
        control = form.add_text("name")
        group.add(control, control)
        assert group.controls == [control]

    def test_switch_current_group(self):
        form = Form()
        first = form.add_group("First")
        second = form.add_group("Second")
        form.set_current_group(first)
        control = form.add_text("name")
        assert first.controls == [control]
        assert second.controls == []


class TestFormErrors:
    def test_get_errors_merges_controls(self):
        form = Form()
        form.add_error("required")
        form.add_error("too long")
        form.add_text("name").add_error("too long")
        form.add_text("other").add_error("taken")

        assert form.get_errors() == ["required", "too long", "taken"]
        assert form.has_errors()

    def test_no_errors(self):
        form = Form()
        form.add_text("name")
        assert form.get_errors() == []
        assert not form.has_errors()
