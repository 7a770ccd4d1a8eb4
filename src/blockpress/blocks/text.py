"""Static text block."""

from __future__ import annotations

from dataclasses import dataclass

from blockpress.block_engine import BlockInstance, RendererDescriptor, ResolvedSettings
from blockpress.templating import TemplateEngine

TEXT_BLOCK_TYPE = "blockpress.block.text"
TEXT_TEMPLATE = "blockpress/text"
TEXT_TEMPLATE_SOURCE = "{{ title }}\n\n{{ body }}"

TEXT_DEFAULTS = {
    "template": TEXT_TEMPLATE,
    "title": "",
    "body": "",
    "ttl": 0,
}


@dataclass(frozen=True)
class TextBlockRenderer:
    """Render a title and body through a named template."""

    engine: TemplateEngine

    def execute(self, instance: BlockInstance, settings: ResolvedSettings) -> str:
        _ = instance
        return self.engine.render(str(settings["template"]), settings).strip()


def text_block_descriptor(engine: TemplateEngine) -> RendererDescriptor:
    return RendererDescriptor(
        block_type=TEXT_BLOCK_TYPE,
        title="Text",
        description="Static title and body text.",
        execute=TextBlockRenderer(engine).execute,
        defaults=TEXT_DEFAULTS,
        aliases=("text",),
    )
