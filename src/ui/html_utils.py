"""Helpers for building HTML snippets rendered with st.markdown."""
from html import escape
from textwrap import dedent
from typing import Any


def html_block(template: str) -> str:
    """
    Flatten multi-line HTML for st.markdown.

    Lines indented by 4+ spaces would be read as Markdown code blocks,
    so every line is left-stripped after dedenting.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines if line.strip())


def safe_text(value: Any) -> str:
    """Escape a user-supplied value for insertion into markup; None becomes ""."""
    if value is None:
        return ""
    return escape(str(value))
