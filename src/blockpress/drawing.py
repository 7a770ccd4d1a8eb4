"""Preview canvas operations and the ReportLab backend."""

from __future__ import annotations

from typing import Any, Protocol

from reportlab.pdfgen import canvas


class PreviewCanvas(Protocol):
    """What the page preview needs from a PDF backend."""

    def anchor_section(self, key: str, label: str) -> None: ...
    def write_text(self, x: float, y: float, text: str, *, font: str, size: float, color: Any) -> None: ...
    def rule(self, x1: float, x2: float, y: float, *, color: Any, width: float = 0.5) -> None: ...
    def break_page(self) -> None: ...
    def finish(self) -> None: ...


class ReportLabPreviewCanvas:
    """PreviewCanvas drawing onto a ReportLab canvas."""

    def __init__(self, target: canvas.Canvas) -> None:
        self._target = target

    def anchor_section(self, key: str, label: str) -> None:
        # One top-level outline entry per section, pointing at the current page.
        self._target.bookmarkPage(key)
        self._target.addOutlineEntry(label, key, level=0)

    def write_text(self, x: float, y: float, text: str, *, font: str, size: float, color: Any) -> None:
        self._target.setFillColor(color)
        self._target.setFont(font, size)
        self._target.drawString(x, y, text)

    def rule(self, x1: float, x2: float, y: float, *, color: Any, width: float = 0.5) -> None:
        self._target.setStrokeColor(color)
        self._target.setLineWidth(width)
        self._target.line(x1, y, x2, y)

    def break_page(self) -> None:
        self._target.showPage()

    def finish(self) -> None:
        self._target.showPage()
        self._target.save()


def open_preview_canvas(
    output_path: str,
    *,
    pagesize: tuple[float, float],
    title: str,
) -> ReportLabPreviewCanvas:
    """Open a ReportLab canvas for a page preview, titled in the PDF metadata."""
    target = canvas.Canvas(output_path, pagesize=pagesize)
    target.setTitle(title)
    return ReportLabPreviewCanvas(target)
