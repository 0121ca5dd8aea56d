from __future__ import annotations

import os

from route_action_gen.domain.models import EntryPointFile, GeneratedFile, GenerationContext
from route_action_gen.targets.base import TargetAdapter
from route_action_gen.targets.fastapi_router import hook_files, primary_body_config
from route_action_gen.targets.naming import extract_dynamic_segments
from route_action_gen.targets.templates.client import client_template
from route_action_gen.targets.templates.dispatcher import flask_route_template
from route_action_gen.targets.templates.forms import form_components_template, has_form_fields
from route_action_gen.targets.templates.readme import readme_template


class FlaskViewsTarget(TargetAdapter):
    """
    One Flask view per endpoint, generated under a single tree at the root:

        views/api/users/[userId]/route.put.config.py
        _generated/views/api/users/[userId]/route.py   (generated)
        views/api/users/[userId]/blueprint.py          (entry point, written once)

    No server function or form action: the view itself accepts form posts.
    """

    name = "flask-views"
    routes_root = "views"

    def resolve_generated_dir(self, config_dir: str, root: str) -> str:
        rel = os.path.relpath(config_dir, root)
        return os.path.normpath(os.path.join(root, self.generated_dir_name, rel))

    def generate(self, context: GenerationContext) -> list[GeneratedFile]:
        param_names = extract_dynamic_segments(context.route_path)
        files = [
            GeneratedFile("route.py", flask_route_template(context, param_names)),
            GeneratedFile("client.py", client_template(context.configs, context.route_path)),
            *hook_files(context),
        ]

        primary = primary_body_config(context)
        with_forms = primary is not None and has_form_fields(primary)
        if with_forms:
            files.append(GeneratedFile("form_components.py", form_components_template(primary)))

        files.append(
            GeneratedFile(
                "README.md",
                readme_template(
                    context.route_path,
                    [c.method for c in context.configs],
                    self.name,
                    has_actions=False,
                    has_form_components=with_forms,
                ),
            )
        )
        return files

    def get_entry_point_file(self, generated_dir_rel_path: str) -> EntryPointFile:
        target = f"{generated_dir_rel_path}/route.py"
        content = (
            "# Entry point for the generated Flask blueprint.\n"
            "from route_action_gen.runtime.loader import reexport\n"
            "\n"
            f"reexport(globals(), __file__, {target!r})\n"
        )
        return EntryPointFile("blueprint.py", content)
