"""FastAPI helpers: form responses and a validating form dependency."""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from fastapi import HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from .controls import Form
from .core import SafeHTML
from .forms import BaseForm, parse_form_errors
from .renderer import FormRenderer

logger = logging.getLogger(__name__)


def render_form(form: Form, renderer: FormRenderer | None = None, status_code: int = 200) -> HTMLResponse:
    """Render ``form`` into an HTMLResponse."""
    renderer = renderer or FormRenderer()
    return HTMLResponse(renderer.render_string(form).content, status_code=status_code)


class FormValidationError(HTTPException):
    """Raised when form validation fails - contains the rendered HTML response."""

    def __init__(self, content: SafeHTML, form: Form):
        super().__init__(status_code=200, detail="Form validation failed")
        self.form = form
        self.response = HTMLResponse(content=content.content, status_code=200)


async def form_validation_error_handler(request: Request, exc: FormValidationError):
    return exc.response


T = TypeVar("T", bound=BaseForm)


class HTMLForm(Generic[T]):
    """
    Dependency that validates form data and re-renders the form on errors.

    Usage:
        app.add_exception_handler(FormValidationError, form_validation_error_handler)

        @app.get("/login")
        async def show_login():
            return render_form(LoginSchema.to_form(action="/login"))

        @app.post("/login")
        async def handle_login(
            data: LoginSchema = Depends(HTMLForm(LoginSchema, action="/login")),
        ):
            # Only reached if validation succeeds
            return RedirectResponse("/dashboard", status_code=303)
    """

    def __init__(
        self,
        model: type[T],
        renderer: FormRenderer | None = None,
        *,
        action: str = "",
        method: str = "post",
    ):
        self.model = model
        self.renderer = renderer
        self.action = action
        self.method = method

    async def __call__(self, request: Request) -> T:
        """Validate form data or raise FormValidationError with the rendered form."""
        form_data = await request.form()
        values = {k: v for k, v in form_data.items() if isinstance(v, str)}

        # Unchecked checkboxes are simply missing from the body
        for name, cfg in self.model.get_field_configs().items():
            if cfg.widget == "checkbox":
                values[name] = name in form_data  # type: ignore[assignment]

        try:
            return self.model(**values)
        except ValidationError as e:
            errors = parse_form_errors(e)
            logger.info(f"{self.model.__name__} failed validation on {sorted(errors)}")

            form = self.model.to_form(
                action=self.action or str(request.url.path),
                method=self.method,
                values=values,
                errors=errors,
            )
            renderer = self.renderer or FormRenderer()
            raise FormValidationError(renderer.render_string(form), form)
