# restobot/core/prompts/builder.py
"""
Prompt building utilities for content extraction and chat.
Centralizes all prompt logic and Jinja2 template rendering.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from restobot.config import get_settings

EXTRACTION_KINDS = ("menu", "offers", "metadata")


class PromptBuilder:
    """Builds prompts from Jinja2 templates with validation"""

    def __init__(self, templates_dir: Optional[Path] = None):
        """
        Initialize the prompt builder with template directory.

        Args:
            templates_dir: Path to Jinja2 templates. Defaults to config setting.
        """
        if templates_dir is None:
            settings = get_settings()
            templates_dir = settings.PROMPTS_DIR

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            undefined=StrictUndefined,  # Fail if variable is missing
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, **variables) -> str:
        """
        Render a template with provided variables.

        Raises:
            jinja2.TemplateNotFound: If template doesn't exist
            jinja2.UndefinedError: If required variable is missing
        """
        template = self.env.get_template(template_name)
        return template.render(**variables)

    def extraction_prompt(
        self,
        kind: str,
        text: Optional[str] = None,
        source: str = "text",
        today: Optional[str] = None,
    ) -> str:
        """
        Build the extraction prompt for one kind of content.

        Args:
            kind: "menu", "offers" or "metadata"
            text: Page or post text; omitted when an image is attached
            source: Short description of the payload ("text", "image")
            today: ISO date used to resolve relative offer dates

        Returns:
            Formatted prompt string
        """
        if kind not in EXTRACTION_KINDS:
            raise ValueError(f"Unknown extraction kind: {kind}")
        return self.render(
            f"{kind}.j2",
            text=text or "",
            source=source,
            today=today or datetime.now().strftime("%Y-%m-%d"),
        )

    def chat_system_prompt(self, context: Dict[str, Any], now: datetime) -> str:
        """Build the system message carrying the restaurant snapshot."""
        return self.render(
            "chat_system.j2",
            restaurant_name=context.get("name") or context.get("id", ""),
            now=now.strftime("%A %Y-%m-%d %H:%M"),
            context=json.dumps(context, indent=2, ensure_ascii=False),
        )


# Singleton instance for easy import
_builder_instance = None


def get_prompt_builder() -> PromptBuilder:
    """Get cached prompt builder instance"""
    global _builder_instance
    if _builder_instance is None:
        _builder_instance = PromptBuilder()
    return _builder_instance
