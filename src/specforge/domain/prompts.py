"""
Prompt templates and prompt composition.

Templates are static, process-wide constants keyed by stage name. Placeholders
use double braces: {{context}}, {{constraints}} and {{filesContext}}.
"""

import json
from collections.abc import Mapping
from textwrap import dedent
from types import MappingProxyType

from specforge.domain.exceptions import TemplateNotFoundError
from specforge.domain.models import PromptBlueprint

# Stage key used automatically when constraints carry previously generated files.
IMPLEMENTATION_WITH_CONTEXT = "implementation_with_context"

FILES_CONTEXT_KEY = "filesContext"

# =============================================================================
# TEMPLATES
# =============================================================================

_FILE_FORMAT = """\
Format each file with ```typescript:path/to/filename.ts
// code
```"""

STAGE_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "analysis": dedent(
            """\
            Analyze the following requirements:
            {{context}}

            Identify key constraints and potential challenges.
            Suggest appropriate design patterns and architectural approaches.
            """
        ),
        "architecture": dedent(
            """\
            Based on previous analysis, design a scalable architecture:
            {{context}}

            Proposed architecture constraints:
            {{constraints}}

            Include component relationships, data flow, and state management strategy.
            Focus on maintainability and separation of concerns.
            """
        ),
        "implementation": dedent(
            """\
            Generate implementation using:
            Architecture: {{context}}
            Constraints: {{constraints}}

            Ensure type safety and best practices.
            Use TypeScript for all implementation.
            Follow React hooks best practices.
            Use Tailwind CSS for styling with shadcn/ui components where appropriate.
            Include comprehensive error handling and loading states.

            """
        )
        + _FILE_FORMAT,
        IMPLEMENTATION_WITH_CONTEXT: dedent(
            """\
            Generate implementation for this file:
            {{context}}

            Previously generated files:
            {{filesContext}}

            Constraints: {{constraints}}

            Ensure type safety and best practices.
            Use TypeScript for all implementation.
            Follow React hooks best practices.
            Use Tailwind CSS for styling with shadcn/ui components where appropriate.
            Include comprehensive error handling and loading states.
            Make sure this file integrates properly with previously generated files.
            All imports should reference existing files in the project.

            """
        )
        + _FILE_FORMAT,
        "validation": dedent(
            """\
            Validate the following implementation:
            {{context}}

            Identify any issues with type safety, best practices, or performance.
            Check for common React anti-patterns.
            Validate integration points between components.
            """
        ),
        "optimization": dedent(
            """\
            Optimize the following implementation:
            {{context}}

            Focus on performance, readability, and maintainability.
            Implement memoization where appropriate.
            Ensure proper cleanup in useEffect hooks.
            Optimize rendering performance with proper dependency arrays.
            """
        ),
    }
)


# =============================================================================
# COMPOSITION
# =============================================================================


class PromptEngineeringService:
    """Renders stage-specific prompts from a PromptBlueprint."""

    def __init__(self, templates: Mapping[str, str] = STAGE_TEMPLATES):
        self._templates = templates

    def template_key(self, blueprint: PromptBlueprint) -> str:
        """Stage name, or the with-context variant when files context is present."""
        if blueprint.constraints.get(FILES_CONTEXT_KEY):
            return IMPLEMENTATION_WITH_CONTEXT
        return str(blueprint.stage)

    def compose_prompt(self, blueprint: PromptBlueprint) -> str:
        """
        Substitute blueprint values into the stage template.

        Raises:
            TemplateNotFoundError: If no template exists for the computed key
        """
        key = self.template_key(blueprint)
        template = self._templates.get(key)
        if template is None:
            raise TemplateNotFoundError(key)

        prompt = template.replace("{{context}}", blueprint.context)
        prompt = prompt.replace(
            "{{constraints}}", json.dumps(dict(blueprint.constraints), default=str)
        )

        files_context = blueprint.constraints.get(FILES_CONTEXT_KEY)
        if files_context:
            prompt = prompt.replace("{{filesContext}}", str(files_context))

        return prompt
