from __future__ import annotations

import os
from typing import Optional

from route_action_gen.domain.models import DescriptorSummary, EntryPointFile, GeneratedFile, GenerationContext
from route_action_gen.targets.base import TargetAdapter
from route_action_gen.targets.templates.actions import form_action_template, server_function_template
from route_action_gen.targets.templates.client import client_template
from route_action_gen.targets.templates.common import hook_module_name, uses_body
from route_action_gen.targets.templates.dispatcher import fastapi_route_template
from route_action_gen.targets.templates.forms import form_components_template, has_form_fields
from route_action_gen.targets.templates.hooks import use_route_get_template, use_route_mutation_template
from route_action_gen.targets.templates.readme import readme_template


def primary_body_config(context: GenerationContext) -> Optional[DescriptorSummary]:
    """First write verb (in method order) that declares a body."""
    for c in context.body_configs:
        if uses_body(c):
            return c
    return None


def hook_files(context: GenerationContext) -> list[GeneratedFile]:
    out: list[GeneratedFile] = []
    for c in context.configs:
        if c.method == "get":
            content = use_route_get_template(c, context.route_path)
        else:
            content = use_route_mutation_template(c, context.route_path)
        out.append(GeneratedFile(f"{hook_module_name(c.method)}.py", content))
    return out


class FastAPIRouterTarget(TargetAdapter):
    """
    APIRouter endpoints generated next to the descriptors:

        app/api/posts/[postId]/route.post.config.py
        app/api/posts/[postId]/_generated/route.py   (generated)
        app/api/posts/[postId]/route.py              (entry point, written once)
    """

    name = "fastapi-router"
    routes_root = "app"

    def resolve_generated_dir(self, config_dir: str, root: str) -> str:
        return os.path.join(config_dir, self.generated_dir_name)

    def generate(self, context: GenerationContext) -> list[GeneratedFile]:
        files = [
            GeneratedFile("route.py", fastapi_route_template(context)),
            GeneratedFile("client.py", client_template(context.configs, context.route_path)),
            *hook_files(context),
        ]

        primary = primary_body_config(context)
        with_forms = primary is not None and has_form_fields(primary)
        if primary is not None:
            prefix = context.config_import_prefix
            files.append(GeneratedFile("server_function.py", server_function_template(primary, context.route_path, prefix)))
            files.append(GeneratedFile("form_action.py", form_action_template(primary, context.route_path, prefix)))
            if with_forms:
                files.append(GeneratedFile("form_components.py", form_components_template(primary)))

        files.append(
            GeneratedFile(
                "README.md",
                readme_template(
                    context.route_path,
                    [c.method for c in context.configs],
                    self.name,
                    has_actions=primary is not None,
                    has_form_components=with_forms,
                ),
            )
        )
        return files

    def get_entry_point_file(self, generated_dir_rel_path: str) -> EntryPointFile:
        target = f"{generated_dir_rel_path}/route.py"
        content = (
            "# Entry point for the generated FastAPI router.\n"
            "from route_action_gen.runtime.loader import reexport\n"
            "\n"
            f"reexport(globals(), __file__, {target!r})\n"
        )
        return EntryPointFile("route.py", content)
