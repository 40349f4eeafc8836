"""
SVG draw sink.

Builds an <svg> document with xml.etree; every length is converted from
millimetres to pixels at the configured DPI.
"""

import logging
import sys
import xml.etree.ElementTree as ET
from typing import Optional, TextIO, Union

from .commands import (
    DEFAULT_DPI, DrawBuffer, DrawCommand, LineCommand, CircleCommand, ResizeCommand, mm_to_px,
)

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class SvgOutput(DrawBuffer):
    """
    Render draw commands as SVG.

    Args:
        target: File name or text stream written on flush (stdout if None)
        dpi: Pixels per inch used for the mm -> px conversion
        stroke: Stroke colour for lines and circles
        precision: Decimal places for pixel values; None writes them
            at full precision
    """

    def __init__(self, target: Union[str, TextIO, None] = None,
                 dpi: float = DEFAULT_DPI, stroke: str = "black",
                 precision: Optional[int] = None):
        if dpi <= 0:
            raise ValueError(f"bad dpi: {dpi}")
        if precision is not None and precision < 0:
            raise ValueError(f"bad precision: {precision}")
        self.target = target
        self.dpi = dpi
        self.stroke = stroke
        self.precision = precision
        self.root = self._new_document()

    def __repr__(self):
        return f"an instance of SvgOutput ({len(self.root)} elements)"

    def _new_document(self) -> ET.Element:
        return ET.Element("svg", {"xmlns": SVG_NAMESPACE, "version": "1.1"})

    def _px(self, mm) -> str:
        px = mm_to_px(float(mm), self.dpi)
        if not px:
            px = 0.0  # never "-0"
        if self.precision is None:
            text = repr(px)
        else:
            text = f"{px:.{self.precision}f}"
        if "." in text and "e" not in text:
            text = text.rstrip("0").rstrip(".")
        return text or "0"

    def reset(self) -> None:
        self.root = self._new_document()

    def draw(self, command: DrawCommand) -> None:
        if isinstance(command, LineCommand):
            end = command.end
            ET.SubElement(self.root, "line", {
                "x1": self._px(command.origin.x),
                "y1": self._px(command.origin.y),
                "x2": self._px(end.x),
                "y2": self._px(end.y),
                "stroke": self.stroke,
            })
        elif isinstance(command, CircleCommand):
            ET.SubElement(self.root, "circle", {
                "cx": self._px(command.center.x),
                "cy": self._px(command.center.y),
                "r": self._px(command.radius),
                "stroke": self.stroke,
                "fill": "none",
            })
        elif isinstance(command, ResizeCommand):
            self.root.set("width", self._px(command.width))
            self.root.set("height", self._px(command.height))
        else:
            raise ValueError(f"bad draw command: {command!r}")

    def to_string(self) -> str:
        """The current document as SVG text."""
        return ET.tostring(self.root, encoding="unicode")

    def flush(self) -> None:
        text = self.to_string()
        if isinstance(self.target, str):
            with open(self.target, "w", encoding="utf-8") as f:
                f.write(text + "\n")
            logger.info("wrote %s", self.target)
            return
        stream: Optional[TextIO] = self.target if self.target is not None else sys.stdout
        stream.write(text + "\n")
        stream.flush()
