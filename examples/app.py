"""
Example form handling with Pydantic + bootform + FastAPI.

    uvicorn app:app --reload
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import Field, field_validator
from tdom import html

from bootform import Form, FormRenderer, SafeHTML, bootstrap
from bootform.core import markup
from bootform.fastapi import FormValidationError, HTMLForm, form_validation_error_handler
from bootform.forms import BaseForm


router = APIRouter()


# --- Templates ---

# Application templates inherit the bundled Bootstrap ones
templates = bootstrap.extend("demo")


@templates.template("groups/inline")
def InlineGroup(*, group, controls, renderer, **_):
    fields = [
        markup(renderer.templates.render(renderer.control_template(c), {"control": c, "renderer": renderer}))
        for c in controls
    ]
    return html(t'<div class="well"><h4>{group.label}</h4>{fields}</div>')


def page(title: str, content: SafeHTML) -> HTMLResponse:
    body = html(t"""
        <!DOCTYPE html>
        <html>
        <head>
            <title>{title}</title>
            <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@2.3.2/docs/assets/css/bootstrap.css">
        </head>
        <body>
            <div class="container"><h1>{title}</h1>{markup(content)}</div>
        </body>
        </html>
    """)
    return HTMLResponse(str(body))


# --- Schema definitions with validation rules ---


class SignupForm(BaseForm):
    username: str = Field(
        min_length=3,
        max_length=20,
        title="Username",
        description="Letters, numbers, underscores only",
        json_schema_extra={"form_group": "Account"},
    )
    email: str = Field(title="Email Address", json_schema_extra={"form_group": "Account"})
    password: str = Field(
        min_length=8,
        title="Password",
        description="At least 8 characters",
        json_schema_extra={"form_group": "Account"},
    )
    confirm_password: str = Field(min_length=8, title="Confirm Password", json_schema_extra={"form_group": "Account"})
    age: int = Field(ge=18, le=120, title="Age", json_schema_extra={"form_group": "Profile"})
    plan: Literal["free", "pro", "enterprise"] = Field(
        default="free",
        title="Plan",
        json_schema_extra={
            "form_group": "Profile",
            "form_choices": [
                ["free", "Free - $0/mo"],
                ["pro", "Pro - $10/mo"],
                ["enterprise", "Enterprise - $50/mo"],
            ],
        },
    )
    bio: str = Field(
        default="",
        max_length=500,
        title="Bio",
        json_schema_extra={"form_widget": "textarea", "form_group": "Profile"},
    )
    agree_tos: bool = Field(title="I agree to the Terms of Service")

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v, info):
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Passwords do not match")
        return v


class ContactForm(BaseForm):
    name: str = Field(min_length=2, title="Your Name")
    city: str = Field(default="", title="City", json_schema_extra={"form_group": "Where"})
    country: str = Field(default="", title="Country", json_schema_extra={"form_group": "Where"})
    message: str = Field(min_length=20, max_length=2000, title="Message", json_schema_extra={"form_widget": "textarea"})
    priority: Literal["low", "normal", "high"] = Field(
        default="normal",
        title="Priority",
        json_schema_extra={
            "form_widget": "radio",
            "form_choices": [["low", "Low"], ["normal", "Normal"], ["high", "High"]],
        },
    )


def contact_form(**kwargs) -> Form:
    form = ContactForm.to_form(action="/contact", submit_text="Send Message", **kwargs)
    form.get_group("Where").options.template = "groups/inline"
    return form


def search_form(query: str = "") -> Form:
    form = Form("search", action="/search?page=1", method="get", css_classes=["form-search"])
    form.add_text("q", "Search", value=query, prepend="@", append_button="go", placeholder="Anything")
    form.add_submit("go", "Go")
    return form


# Account fields first, then the rest
signup_renderer = FormRenderer(templates, prior_groups=["Account"])
renderer = FormRenderer(templates)


# --- Routes ---


@router.get("/signup")
async def signup_page():
    form = SignupForm.to_form(action="/signup", values={"username": "Bob"}, submit_text="Sign Up")
    return page("Sign Up", signup_renderer(form))


@router.post("/signup")
async def signup_submit(
    data: Annotated[SignupForm, Depends(HTMLForm(SignupForm, signup_renderer, action="/signup"))],
):
    # Would save to DB here
    return page("Welcome", SafeHTML(str(html(t"<p>Welcome, {data.username}!</p>"))))


@router.get("/contact")
async def contact_page():
    return page("Contact Us", renderer(contact_form()))


@router.post("/contact")
async def contact_submit(
    data: Annotated[ContactForm, Depends(HTMLForm(ContactForm, renderer, action="/contact"))],
):
    # Would send email here
    return RedirectResponse("/contact", status_code=303)


@router.get("/search")
async def search(q: str = ""):
    return page("Search", renderer(search_form(q)))


# App setup

app = FastAPI(debug=True)
app.add_exception_handler(FormValidationError, form_validation_error_handler)
app.include_router(router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
