"""PDF preview of rendered page blocks."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from reportlab.lib.utils import simpleSplit

from .block_engine import RenderResult, RenderState
from .config import (
    BODY_FONT_SIZE,
    BODY_LEADING,
    MARGIN,
    PAGE_SIZE,
    SECTION_GAP,
    TITLE_FONT_SIZE,
    Theme,
)
from .drawing import PreviewCanvas, open_preview_canvas


def _section_lines(result: RenderResult, *, width: float, theme: type) -> list[str]:
    if result.state is RenderState.FAILED:
        text = str(result.content) if result.content else "(block unavailable)"
        font = theme.FONT_ITALIC
    else:
        text = str(result.content)
        font = theme.FONT_REGULAR

    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(simpleSplit(paragraph, font, BODY_FONT_SIZE, width) or [""])
    return lines


class _PageCursor:
    """Track the baseline and break pages when the bottom margin is reached."""

    def __init__(self, pdf: PreviewCanvas, *, page_size: tuple[float, float]) -> None:
        self.pdf = pdf
        self.width, self.height = page_size
        self.pages = 1
        self.y = self.height - MARGIN

    def ensure(self, needed: float) -> None:
        if self.y - needed >= MARGIN:
            return
        self.pdf.break_page()
        self.pages += 1
        self.y = self.height - MARGIN


def draw_results(
    pdf: PreviewCanvas,
    results: Sequence[RenderResult],
    *,
    page_size: tuple[float, float] = PAGE_SIZE,
    theme: type = Theme,
) -> int:
    """Draw each rendered block as a titled text section and return the page count.

    Sections are anchored by position, so a block placed twice on a page
    gets two outline entries.
    """
    cursor = _PageCursor(pdf, page_size=page_size)
    text_width = cursor.width - 2 * MARGIN

    for index, result in enumerate(results):
        if result.state is RenderState.SKIPPED:
            continue

        cursor.ensure(TITLE_FONT_SIZE + BODY_LEADING)
        pdf.anchor_section(f"block_{index}_{result.block_id}", result.block_id)

        pdf.write_text(
            MARGIN,
            cursor.y - TITLE_FONT_SIZE,
            result.block_id,
            font=theme.FONT_HEADER,
            size=TITLE_FONT_SIZE,
            color=theme.ACCENT if result.ok else theme.TEXT_SECONDARY,
        )
        cursor.y -= TITLE_FONT_SIZE + 4
        pdf.rule(MARGIN, cursor.width - MARGIN, cursor.y, color=theme.RULE)
        cursor.y -= 4

        body_font = theme.FONT_REGULAR if result.ok else theme.FONT_ITALIC
        body_color = theme.TEXT_PRIMARY if result.ok else theme.TEXT_SECONDARY
        for line in _section_lines(result, width=text_width, theme=theme):
            cursor.ensure(BODY_LEADING)
            cursor.y -= BODY_LEADING
            pdf.write_text(MARGIN, cursor.y, line, font=body_font, size=BODY_FONT_SIZE, color=body_color)

        cursor.y -= SECTION_GAP

    return cursor.pages


def render_results_pdf(
    results: Sequence[RenderResult],
    output_path: str | Path,
    *,
    title: str,
    theme: type = Theme,
) -> Path:
    """Write a PDF preview of rendered blocks and return its path."""
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    pdf = open_preview_canvas(str(destination), pagesize=PAGE_SIZE, title=title)
    draw_results(pdf, results, page_size=PAGE_SIZE, theme=theme)
    pdf.finish()
    return destination
