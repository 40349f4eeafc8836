"""
DXF draw sink built on ezdxf.

Coordinates are written in millimetres, so no unit conversion happens
here.
"""

import logging
import sys
from typing import TextIO, Union

import ezdxf

from .commands import DrawBuffer, DrawCommand, LineCommand, CircleCommand, ResizeCommand

logger = logging.getLogger(__name__)


class DxfOutput(DrawBuffer):
    """
    Render draw commands into an ezdxf document.

    Args:
        target: File name or text stream written on flush (stdout if None)
        layer: Layer that receives every entity
    """

    def __init__(self, target: Union[str, TextIO, None] = None, layer: str = "0"):
        self.target = target
        self.layer = layer
        self._new_document()

    def __repr__(self):
        return 'an instance of DxfOutput'

    def _new_document(self) -> None:
        # setup=False keeps the default SOLID blocks out of the file
        self.doc = ezdxf.new(dxfversion='R2010', setup=False)
        self.doc.header['$MEASUREMENT'] = 1  # metric
        self.doc.header['$INSUNITS'] = 4  # millimeters
        if self.layer != "0":
            self.doc.layers.add(self.layer)
        self.msp = self.doc.modelspace()

    def reset(self) -> None:
        self._new_document()

    def draw(self, command: DrawCommand) -> None:
        attribs = {'layer': self.layer}
        if isinstance(command, LineCommand):
            start, end = command.origin, command.end
            self.msp.add_line((float(start.x), float(start.y)),
                              (float(end.x), float(end.y)),
                              dxfattribs=attribs)
        elif isinstance(command, CircleCommand):
            self.msp.add_circle((float(command.center.x), float(command.center.y)),
                                float(command.radius),
                                dxfattribs=attribs)
        elif isinstance(command, ResizeCommand):
            self.doc.header['$LIMMIN'] = (0.0, 0.0)
            self.doc.header['$LIMMAX'] = (float(command.width), float(command.height))
        else:
            raise ValueError(f"bad draw command: {command!r}")

    def flush(self) -> None:
        if isinstance(self.target, str):
            self.doc.saveas(self.target)
            logger.info("wrote %s", self.target)
            return
        stream = self.target if self.target is not None else sys.stdout
        self.doc.write(stream)
        stream.flush()
