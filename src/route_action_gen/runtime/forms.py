from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def render_attrs(attrs: Mapping[str, Any]) -> str:
    parts = []
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        name = key.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(name)
        else:
            parts.append(f'{name}="{html.escape(str(value), quote=True)}"')
    return " ".join(parts)


@dataclass(frozen=True)
class FormInput:
    attrs: Mapping[str, Any] = field(default_factory=dict)

    def render(self, **overrides: Any) -> str:
        return f"<input {render_attrs({**self.attrs, **overrides})}>"

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class FormLabel:
    for_id: str
    placeholder: str = ""

    def render(self, children: Optional[str] = None) -> str:
        text = html.escape(children if children is not None else self.placeholder)
        return f'<label for="{html.escape(self.for_id, quote=True)}">{text}</label>'

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class FormField:
    input: FormInput
    label: FormLabel

    def render(self) -> str:
        return f"{self.label.render()}\n{self.input.render()}"


def create_input(*, name: str, type: str = "text", id: Optional[str] = None, **defaults: Any) -> FormInput:
    """Attributes given here are defaults; render(**overrides) replaces them per call."""
    return FormInput({"type": type, "name": name, "id": id, **defaults})


def create_label(*, id: str, placeholder: str = "") -> FormLabel:
    return FormLabel(for_id=id, placeholder=placeholder)


def create_form(action: str, method: str = "post", **attrs: Any):
    """Wrap rendered fields in a <form> posting to action."""

    def form(children: str = "", **overrides: Any) -> str:
        opening = render_attrs({"action": action, "method": method, **attrs, **overrides})
        return f"<form {opening}>{children}</form>"

    return form
