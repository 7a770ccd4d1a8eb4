"""Named Jinja templates used by block renderers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from jinja2 import DictLoader, Environment, TemplateNotFound, TemplateSyntaxError


class TemplateEngine(Protocol):
    """Turns a template reference and a context into a payload."""

    def render(self, template: str, context: Mapping[str, Any]) -> str: ...


def _blank_none(value: Any) -> Any:
    return "" if value is None else value


class JinjaTemplateEngine:
    """Jinja environment over an in-memory set of named template sources.

    Payloads are plain text, so autoescaping stays off; missing and None
    context values render empty.
    """

    def __init__(self, sources: Mapping[str, str] | None = None) -> None:
        self._sources: dict[str, str] = {}
        self._env = Environment(
            loader=DictLoader(self._sources),
            autoescape=False,
            finalize=_blank_none,
        )
        for name, source in (sources or {}).items():
            self.register(name, source)

    def register(self, name: str, source: str) -> None:
        key = name.strip()
        if not key:
            msg = "template name cannot be empty."
            raise ValueError(msg)
        try:
            self._env.parse(source)
        except TemplateSyntaxError as exc:
            msg = f"template '{key}' is not valid: {exc.message}."
            raise ValueError(msg) from exc
        self._sources[key] = source

    def has_template(self, name: str) -> bool:
        return name in self._sources

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        try:
            compiled = self._env.get_template(template)
        except TemplateNotFound as exc:
            valid = ", ".join(sorted(self._sources))
            msg = f"unknown template '{template}'. Valid templates: {valid}."
            raise ValueError(msg) from exc
        return compiled.render(dict(context))
