"""Password-reset email rendering."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

TOKEN_EXPIRY_MINUTES = 5

_env = Environment(
    loader=PackageLoader("resetmail", "templates"),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def reset_subject(product_name: str) -> str:
    return f"Password reset request - {product_name}"


def render_reset_email(
    reset_link: str,
    expiry_minutes: int = TOKEN_EXPIRY_MINUTES,
    person_name: str = "",
    product_name: str = "Medical System",
    sent_at: Optional[datetime] = None,
) -> RenderedEmail:
    """Render subject, HTML and plain-text bodies for a reset email."""
    sent_at = sent_at or datetime.now().astimezone()
    context = {
        "reset_link": reset_link,
        "expiry_minutes": expiry_minutes,
        "person_name": (person_name or "").strip(),
        "product_name": product_name,
        "year": sent_at.year,
        "sent_at": sent_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
    }
    return RenderedEmail(
        subject=reset_subject(product_name),
        html=_env.get_template("reset_password.html").render(**context),
        text=_env.get_template("reset_password.txt").render(**context),
    )
