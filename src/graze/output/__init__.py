"""
Draw sinks for graze.

A Runtime offers every drawable result to a DrawBuffer. Backends:

- MemoryOutput: keeps the commands in a list
- SvgOutput: SVG document, lengths converted to pixels
- DxfOutput: DXF document in millimetres (ezdxf)
"""

import os
from typing import Optional, TextIO, Union

from .commands import (
    DEFAULT_DPI,
    MM_PER_INCH,
    mm_to_px,
    LineCommand,
    CircleCommand,
    ResizeCommand,
    DrawCommand,
    to_draw_command,
    DrawBuffer,
    MemoryOutput,
)
from .svg import SvgOutput
from .dxf import DxfOutput

OUTPUT_FORMAT_ENV = "GRAZE_OUTPUT_FORMAT"
OUTPUT_FORMATS = ("svg", "dxf")


def default_output_format() -> str:
    """Output format from GRAZE_OUTPUT_FORMAT, falling back to svg."""
    fmt = os.environ.get(OUTPUT_FORMAT_ENV, "svg").strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"bad {OUTPUT_FORMAT_ENV} value: {fmt!r}")
    return fmt


def create_output(fmt: Optional[str] = None,
                  target: Union[str, TextIO, None] = None,
                  dpi: float = DEFAULT_DPI) -> DrawBuffer:
    """Build the draw sink for an output format."""
    fmt = fmt or default_output_format()
    if fmt == "svg":
        return SvgOutput(target, dpi=dpi)
    if fmt == "dxf":
        return DxfOutput(target)
    raise ValueError(f"bad output format: {fmt!r}")


__all__ = [
    "DEFAULT_DPI",
    "MM_PER_INCH",
    "mm_to_px",
    "LineCommand",
    "CircleCommand",
    "ResizeCommand",
    "DrawCommand",
    "to_draw_command",
    "DrawBuffer",
    "MemoryOutput",
    "SvgOutput",
    "DxfOutput",
    "OUTPUT_FORMAT_ENV",
    "OUTPUT_FORMATS",
    "default_output_format",
    "create_output",
]
