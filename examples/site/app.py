"""A small site -- layouts, global partials, and per-call partials from disk.

Serves three pages the way a request handler would:

- ``/``: a page wrapped in the shared layout
- ``/contact``: a page with two per-call partials (form, social links)
- ``/error``: a bare page rendered without any layout

Run:
    python app.py
"""

import io
from pathlib import Path

from stencil import DirFS, Engine, TemplateError, ctx

assets = Path(__file__).parent / "assets"
engine = Engine(
    DirFS(assets),
    root="views",
    partials="views/partials",
    cache=True,
)
engine.load()


def handle(path: str) -> tuple[int, str]:
    """Render the page for ``path`` and return (status, body)."""
    out = io.StringIO()
    try:
        if path == "/":
            data = ctx().add("Site", "My Site").add("Title", "Welcome")
            data.add("Message", "Views are wrapped in the layout by name.")
            engine.render(out, "pages/home", data, "layout")
        elif path == "/contact":
            data = {"Site": "My Site", "Title": "Contact", "Email": "me@example.com"}
            engine.render(
                out, "pages/contacts", data, "layout", "pages/contact/form", "pages/contact/social"
            )
        elif path == "/error":
            engine.render(out, "errors", None)
        else:
            return 404, "not found"
    except TemplateError as e:
        return 500, str(e)
    return 200, out.getvalue()


home_status, home_output = handle("/")
contact_status, contact_output = handle("/contact")
error_status, error_output = handle("/error")


def main() -> None:
    for path in ("/", "/contact", "/error"):
        status, body = handle(path)
        print(f"=== {path} ({status}) ===")
        print(body)


if __name__ == "__main__":
    main()
