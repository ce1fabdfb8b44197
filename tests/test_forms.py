"""
Tests for pydantic form definitions.
"""

from typing import Literal

import pytest
from pydantic import BaseModel, Field, ValidationError, model_validator

from bootform import FormRenderer
from bootform.forms import (
    FORM_ERRORS,
    BaseForm,
    parse_form_errors,
    _label_from_name,
    _infer_input_type,
)
from bootform.translation import DictTranslator


# Test models


class SimpleForm(BaseForm):
    name: str
    email: str


class ValidatedForm(BaseForm):
    username: str = Field(min_length=3, max_length=20)
    age: int = Field(ge=18, le=120)
    website: str = Field(default="")


class FullForm(BaseForm):
    name: str = Field(title="Full Name", description="Enter your name")
    email: str = Field(title="Email Address", examples=["jdoe@example.com"])
    password: str = Field(min_length=8)
    bio: str = Field(default="", json_schema_extra={"form_widget": "textarea"})
    role: Literal["admin", "user", "guest"] = Field(default="user")
    agree: bool = Field(default=False, title="I agree to terms")
    nickname: str | None = None


class ChoicesForm(BaseForm):
    priority: str = Field(
        default="normal",
        json_schema_extra={
            "form_widget": "radio",
            "form_choices": [["low", "Low"], ["normal", "Normal"], ["high", "High"]],
        },
    )
    country: str = Field(
        json_schema_extra={
            "form_widget": "select",
            "form_choices": [
                ["us", "United States"],
                ["uk", "United Kingdom"],
                ["ca", "Canada"],
            ],
        },
    )


class AddressForm(BaseForm):
    name: str
    street: str = Field(json_schema_extra={"form_group": "Address"})
    city: str = Field(json_schema_extra={"form_group": "Address"})
    token: str = Field(default="", json_schema_extra={"form_widget": "hidden"})
    note: str = Field(default="", json_schema_extra={"form_template": "widgets/note"})


class PasswordChangeForm(BaseForm):
    password: str
    confirm: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm:
            raise ValueError("Passwords do not match")
        return self


class TestHelpers:
    def test_label_from_name(self):
        assert _label_from_name("first_name") == "First Name"
        assert _label_from_name("email") == "Email"
        assert _label_from_name("user_id") == "User Id"

    def test_infer_input_type_by_type(self):
        assert _infer_input_type(int, "count") == "number"
        assert _infer_input_type(float, "price") == "number"
        assert _infer_input_type(bool, "active") == "checkbox"
        assert _infer_input_type(str, "name") == "text"

    def test_infer_input_type_by_name(self):
        assert _infer_input_type(str, "password") == "password"
        assert _infer_input_type(str, "user_password") == "password"
        assert _infer_input_type(str, "email") == "email"
        assert _infer_input_type(str, "user_email") == "email"
        assert _infer_input_type(str, "website") == "url"
        assert _infer_input_type(str, "phone") == "tel"
        assert _infer_input_type(str, "telephone") == "tel"
        assert _infer_input_type(str, "birth_date") == "date"
        assert _infer_input_type(str, "start_time") == "time"
        assert _infer_input_type(str, "created_datetime") == "datetime-local"


class TestFieldConfig:
    def test_basic_config(self):
        configs = SimpleForm.get_field_configs()

        assert "name" in configs
        assert "email" in configs

        name_cfg = configs["name"]
        assert name_cfg.name == "name"
        assert name_cfg.label == "Name"
        assert name_cfg.type == "text"
        assert name_cfg.required is True
        assert name_cfg.widget == "input"
        assert name_cfg.kind == "text"

    def test_types_and_defaults(self):
        configs = ValidatedForm.get_field_configs()

        assert configs["age"].type == "number"
        assert configs["age"].kind == "number"
        assert configs["website"].type == "url"
        assert configs["website"].required is False

    def test_custom_title_and_examples(self):
        configs = FullForm.get_field_configs()

        assert configs["name"].label == "Full Name"
        assert configs["name"].description == "Enter your name"
        assert configs["email"].label == "Email Address"
        assert configs["email"].kind == "email"
        assert configs["email"].placeholder == "jdoe@example.com"

    def test_widget_override(self):
        bio_cfg = FullForm.get_field_configs()["bio"]
        assert bio_cfg.widget == "textarea"
        assert bio_cfg.kind == "textarea"

    def test_literal_creates_choices(self):
        role_cfg = FullForm.get_field_configs()["role"]
        assert role_cfg.widget == "select"
        assert role_cfg.choices == [
            ["admin", "admin"],
            ["user", "user"],
            ["guest", "guest"],
        ]

    def test_bool_creates_checkbox(self):
        agree_cfg = FullForm.get_field_configs()["agree"]
        assert agree_cfg.widget == "checkbox"
        assert agree_cfg.kind == "checkbox"

    def test_optional_unwrapped(self):
        nickname_cfg = FullForm.get_field_configs()["nickname"]
        assert nickname_cfg.type == "text"
        assert nickname_cfg.required is False

    def test_custom_choices(self):
        configs = ChoicesForm.get_field_configs()

        priority_cfg = configs["priority"]
        assert priority_cfg.widget == "radio"
        assert priority_cfg.kind == "radiolist"
        assert priority_cfg.choices == [
            ["low", "Low"],
            ["normal", "Normal"],
            ["high", "High"],
        ]

        country_cfg = configs["country"]
        assert country_cfg.widget == "select"
        assert ["us", "United States"] in country_cfg.choices

    def test_group_and_template(self):
        configs = AddressForm.get_field_configs()
        assert configs["street"].group == "Address"
        assert configs["name"].group is None
        assert configs["note"].template == "widgets/note"

    def test_configure_override(self):
        class ProfileForm(BaseForm):
            name: str

        ProfileForm.configure_field("name", label="Your Name", placeholder="John Doe")

        name_cfg = ProfileForm.get_field_configs()["name"]
        assert name_cfg.label == "Your Name"
        assert name_cfg.placeholder == "John Doe"

    def test_cache_is_per_class(self):
        class BaseProfile(BaseForm):
            name: str

        class ExtendedProfile(BaseProfile):
            age: int

        assert list(BaseProfile.get_field_configs()) == ["name"]
        assert list(ExtendedProfile.get_field_configs()) == ["name", "age"]

    def test_form_name(self):
        assert SimpleForm.form_name() == "simple"
        assert PasswordChangeForm.form_name() == "passwordchange"


class TestToForm:
    def test_controls_in_field_order(self):
        form = SimpleForm.to_form(action="/contact")

        assert form.name == "simple"
        assert form.action == "/contact"
        assert [c.name for c in form.controls] == ["name", "email", "submit"]
        assert form["email"].kind == "email"
        assert form["name"].required
        assert form["submit"].kind == "submit"
        assert form["submit"].label == "Submit"

    def test_values_and_errors(self):
        form = SimpleForm.to_form(
            values={"name": "Bob"},
            errors={"email": "Required", "name": ["Too short", "Taken"]},
        )

        assert form["name"].value == "Bob"
        assert form["name"].errors == ["Too short", "Taken"]
        assert form["email"].errors == ["Required"]

    def test_form_level_errors(self):
        form = PasswordChangeForm.to_form(errors={FORM_ERRORS: ["Passwords do not match"]})
        assert form.errors == ["Passwords do not match"]

    def test_exclude(self):
        form = FullForm.to_form(exclude={"password", "bio"})
        assert "password" not in form
        assert "bio" not in form
        assert "name" in form

    def test_include_order(self):
        form = FullForm.to_form(include=["email", "name", "unknown"], submit_text=None)
        assert [c.name for c in form.controls] == ["email", "name"]

    def test_custom_submit_text(self):
        form = SimpleForm.to_form(submit_text="Send")
        assert form["submit"].label == "Send"

    def test_choices_become_items(self):
        form = ChoicesForm.to_form()
        assert form["country"].items == {
            "us": "United States",
            "uk": "United Kingdom",
            "ca": "Canada",
        }
        assert form["priority"].kind == "radiolist"

    def test_html_type_for_text_variants(self):
        form = ValidatedForm.to_form()
        assert form["website"].input_type == "url"
        assert form["username"].html_type is None

    def test_groups(self):
        form = AddressForm.to_form()

        address = form.get_group("Address")
        assert address is not None
        assert [c.name for c in address.controls] == ["street", "city"]
        assert form.current_group is None
        assert form["token"].kind == "hidden"
        assert form["token"].label is None
        assert form["note"].options.template == "widgets/note"

    def test_translator(self):
        translator = DictTranslator({"Name": "Jméno"})
        form = SimpleForm.to_form(translator=translator, name="contact")
        assert form.translator is translator
        assert form.name == "contact"

    def test_renders(self):
        form = AddressForm.to_form(action="/address", values={"street": "Main St"}, exclude={"note"})

        out = FormRenderer(prior_groups=["Address"]).render_string(form).content

        assert "<legend>Address</legend>" in out
        assert 'value="Main St"' in out
        assert out.index('name="street"') < out.index('name="name"')


class TestParseFormErrors:
    def test_single_error(self):
        class TestModel(BaseModel):
            name: str = Field(min_length=3)

        with pytest.raises(ValidationError) as exc:
            TestModel(name="ab")

        errors = parse_form_errors(exc.value)
        assert list(errors) == ["name"]
        assert len(errors["name"]) == 1

    def test_multiple_errors(self):
        class TestModel(BaseModel):
            name: str = Field(min_length=3)
            age: int = Field(ge=0)

        with pytest.raises(ValidationError) as exc:
            TestModel(name="ab", age=-1)

        errors = parse_form_errors(exc.value)
        assert set(errors) == {"name", "age"}

    def test_missing_field_error(self):
        with pytest.raises(ValidationError) as exc:
            SimpleForm()  # type: ignore

        errors = parse_form_errors(exc.value)
        assert "name" in errors
        assert "email" in errors

    def test_model_validator_error(self):
        with pytest.raises(ValidationError) as exc:
            PasswordChangeForm(password="a", confirm="b")

        errors = parse_form_errors(exc.value)
        assert list(errors) == [FORM_ERRORS]
        assert "Passwords do not match" in errors[FORM_ERRORS][0]
