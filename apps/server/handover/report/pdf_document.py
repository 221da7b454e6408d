"""Buffered PDF document: pages of recorded draw operations.

Renderers never touch a reportlab ``Canvas`` directly.  They append
operations to the current :class:`PageBuffer` using top-down coordinates
(``y`` grows downward from the page top).  Because nothing is emitted until
:meth:`BufferedDocument.render`, later passes such as the "Page i of N"
footer can still add to every page once the final page count is known.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from ..report_theme import FONT


def _hex(c: str) -> colors.Color:
    return colors.HexColor(c)


@dataclass(frozen=True, slots=True)
class DrawOp:
    kind: str
    params: dict[str, Any]


@dataclass(slots=True)
class PageBuffer:
    """Draw operations recorded for one page, in paint order."""

    index: int
    ops: list[DrawOp] = field(default_factory=list)

    # -- recording ------------------------------------------------------------

    def rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        line_width: float = 1.0,
        radius: float = 0.0,
    ) -> None:
        self.ops.append(
            DrawOp(
                "rect",
                {
                    "x": x,
                    "y": y,
                    "w": w,
                    "h": h,
                    "fill": fill,
                    "stroke": stroke,
                    "line_width": line_width,
                    "radius": radius,
                },
            )
        )

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: str,
        width: float = 1.0,
    ) -> None:
        self.ops.append(
            DrawOp("line", {"x1": x1, "y1": y1, "x2": x2, "y2": y2, "color": color, "width": width})
        )

    def polyline(
        self,
        points: list[tuple[float, float]],
        *,
        color: str,
        width: float = 1.0,
    ) -> None:
        self.ops.append(
            DrawOp("polyline", {"points": list(points), "color": color, "width": width})
        )

    def text(
        self,
        x: float,
        y: float,
        value: str,
        *,
        font: str = FONT,
        size: float = 9,
        color: str = "#000000",
        align: str = "left",
    ) -> None:
        """Record one line of text whose line box starts at *y*.

        *align* is ``left`` (x is the left edge), ``right`` (x is the right
        edge) or ``center`` (x is the centre).
        """
        self.ops.append(
            DrawOp(
                "text",
                {
                    "x": x,
                    "y": y,
                    "value": value,
                    "font": font,
                    "size": size,
                    "color": color,
                    "align": align,
                },
            )
        )

    def image(self, data: bytes, x: float, y: float, w: float, h: float) -> None:
        self.ops.append(DrawOp("image", {"data": data, "x": x, "y": y, "w": w, "h": h}))

    # -- inspection -----------------------------------------------------------

    def texts(self) -> list[str]:
        return [op.params["value"] for op in self.ops if op.kind == "text"]

    def ops_of(self, kind: str) -> list[DrawOp]:
        return [op for op in self.ops if op.kind == kind]

    # -- replay ---------------------------------------------------------------

    def replay(self, c: Canvas, page_h: float) -> None:
        for op in self.ops:
            _REPLAYERS[op.kind](c, op.params, page_h)


def _replay_rect(c: Canvas, p: dict[str, Any], page_h: float) -> None:
    fill = p["fill"]
    stroke = p["stroke"]
    if fill is None and stroke is None:
        return
    c.saveState()
    if fill is not None:
        c.setFillColor(_hex(fill))
    if stroke is not None:
        c.setStrokeColor(_hex(stroke))
        c.setLineWidth(p["line_width"])
    bottom = page_h - p["y"] - p["h"]
    if p["radius"] > 0:
        c.roundRect(
            p["x"],
            bottom,
            p["w"],
            p["h"],
            p["radius"],
            stroke=int(stroke is not None),
            fill=int(fill is not None),
        )
    else:
        c.rect(
            p["x"],
            bottom,
            p["w"],
            p["h"],
            stroke=int(stroke is not None),
            fill=int(fill is not None),
        )
    c.restoreState()


def _replay_line(c: Canvas, p: dict[str, Any], page_h: float) -> None:
    c.saveState()
    c.setStrokeColor(_hex(p["color"]))
    c.setLineWidth(p["width"])
    c.line(p["x1"], page_h - p["y1"], p["x2"], page_h - p["y2"])
    c.restoreState()


def _replay_polyline(c: Canvas, p: dict[str, Any], page_h: float) -> None:
    points = p["points"]
    if len(points) < 2:
        return
    c.saveState()
    c.setStrokeColor(_hex(p["color"]))
    c.setLineWidth(p["width"])
    c.setLineCap(1)
    c.setLineJoin(1)
    path = c.beginPath()
    path.moveTo(points[0][0], page_h - points[0][1])
    for x, y in points[1:]:
        path.lineTo(x, page_h - y)
    c.drawPath(path, stroke=1, fill=0)
    c.restoreState()


def _replay_text(c: Canvas, p: dict[str, Any], page_h: float) -> None:
    font = p["font"]
    size = p["size"]
    baseline = page_h - (p["y"] + pdfmetrics.getAscent(font, size))
    c.saveState()
    c.setFont(font, size)
    c.setFillColor(_hex(p["color"]))
    if p["align"] == "right":
        c.drawRightString(p["x"], baseline, p["value"])
    elif p["align"] == "center":
        c.drawCentredString(p["x"], baseline, p["value"])
    else:
        c.drawString(p["x"], baseline, p["value"])
    c.restoreState()


def _replay_image(c: Canvas, p: dict[str, Any], page_h: float) -> None:
    c.drawImage(
        ImageReader(BytesIO(p["data"])),
        p["x"],
        page_h - p["y"] - p["h"],
        width=p["w"],
        height=p["h"],
        mask="auto",
    )


_REPLAYERS: dict[str, Callable[[Canvas, dict[str, Any], float], None]] = {
    "rect": _replay_rect,
    "line": _replay_line,
    "polyline": _replay_polyline,
    "text": _replay_text,
    "image": _replay_image,
}


class BufferedDocument:
    """An ordered list of :class:`PageBuffer` objects, serialised at the end."""

    def __init__(
        self,
        *,
        page_size: tuple[float, float] = A4,
        title: str = "",
        author: str = "",
    ) -> None:
        self.page_size = page_size
        self.title = title
        self.author = author
        self.pages: list[PageBuffer] = []
        self.add_page()

    @property
    def page_width(self) -> float:
        return self.page_size[0]

    @property
    def page_height(self) -> float:
        return self.page_size[1]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current(self) -> PageBuffer:
        return self.pages[-1]

    def add_page(self) -> PageBuffer:
        page = PageBuffer(index=len(self.pages))
        self.pages.append(page)
        return page

    def render(self) -> bytes:
        """Replay every page onto a reportlab canvas and return the PDF bytes."""
        buf = BytesIO()
        c = Canvas(buf, pagesize=self.page_size, pageCompression=0)
        if self.title:
            c.setTitle(self.title)
        if self.author:
            c.setAuthor(self.author)
        for page in self.pages:
            page.replay(c, self.page_height)
            c.showPage()
        c.save()
        return buf.getvalue()
