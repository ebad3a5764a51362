# prompting/renderer.py
"""Utilities for rendering LLM prompts using Jinja2 templates."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

PROMPTS_PATH = Path(__file__).parent / "prompts"
_env = Environment(
    loader=FileSystemLoader(PROMPTS_PATH),
    autoescape=False,
    undefined=StrictUndefined,
)


def load_prompt_source(template_name: str) -> str:
    """Return the raw text of a template in the prompts directory."""
    source, _filename, _uptodate = _env.loader.get_source(_env, template_name)
    return source.rstrip("\n")


def render_string(source: str, context: dict[str, Any]) -> str:
    """Render template text that is not backed by a file."""
    return _env.from_string(source).render(**context)


def render_prompt(template_name: str, context: dict[str, Any]) -> str:
    """Render a Jinja2 template from the prompts directory."""
    template = _env.get_template(template_name)
    return template.render(**context)
