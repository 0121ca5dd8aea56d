from __future__ import annotations

from route_action_gen.domain.models import DescriptorSummary, FieldInfo
from route_action_gen.targets.naming import field_name_to_label, kind_to_input_type
from route_action_gen.targets.templates.common import GENERATED_HEADER


def has_form_fields(config: DescriptorSummary) -> bool:
    return bool(config.body_fields or config.param_fields)


def _entry(facet: str, f: FieldInfo) -> list[str]:
    key = f"{facet}.{f.name}"
    attrs = [f"name={key!r}", f"type={kind_to_input_type(f.kind)!r}", f"id={key!r}"]
    if facet == "params" and f.kind == "string":
        attrs.append("minlength=1")
    return [
        f"    {key!r}: FormField(",
        f"        input=create_input({', '.join(attrs)}),",
        f"        label=create_label(id={key!r}, placeholder={field_name_to_label(f.name)!r}),",
        "    ),",
    ]


def form_components_template(config: DescriptorSummary) -> str:
    """
    form_components.py: one FormField per known body/params/query field,
    keyed by the dotted name the form parser expects.
    """
    lines = [
        GENERATED_HEADER,
        "from __future__ import annotations",
        "",
        "from route_action_gen.runtime.forms import FormField, create_input, create_label",
        "",
        f"# Inputs for {config.config_file_name}",
        "form_components = {",
    ]
    for facet, fields in (
        ("body", config.body_fields),
        ("params", config.param_fields),
        ("query", config.query_fields),
    ):
        for f in fields:
            lines += _entry(facet, f)
    lines.append("}")
    return "\n".join(lines) + "\n"
