"""
Draw commands and the draw-sink interface.

Values produced by the runtime are turned into DrawCommands, which are
then handed to a DrawBuffer. All lengths are millimetres; backends that
render in pixels convert with `mm_to_px`.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ..geom import Point, Vector, Line

logger = logging.getLogger(__name__)

DEFAULT_DPI = 96.0
MM_PER_INCH = 25.4


def mm_to_px(mm: float, dpi: float = DEFAULT_DPI) -> float:
    """Convert millimetres to pixels at the given resolution."""
    return mm * dpi / MM_PER_INCH


@dataclass(frozen=True)
class LineCommand:
    """A straight segment from `origin` along `direction`."""
    origin: Point
    direction: Vector

    @property
    def end(self) -> Point:
        return self.origin + self.direction


@dataclass(frozen=True)
class CircleCommand:
    center: Point
    radius: float


@dataclass(frozen=True)
class ResizeCommand:
    """Resize the drawing surface to width x height millimetres."""
    width: float
    height: float


DrawCommand = Union[LineCommand, CircleCommand, ResizeCommand]


def to_draw_command(value) -> Optional[DrawCommand]:
    """
    Convert a runtime value (or raw geometry) into a draw command.

    Only lines are drawable; anything else yields None.
    """
    data = getattr(value, "data", value)
    if isinstance(data, Line):
        return LineCommand(data.origin, data.direction)
    return None


class DrawBuffer:
    """
    Base class for draw sinks.

    Subclasses override `draw` to render individual commands and `flush`
    to emit the finished drawing.
    """

    def reset(self) -> None:
        """Discard everything drawn so far."""

    def draw(self, command: DrawCommand) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} cannot draw")

    def flush(self) -> None:
        """Emit the drawing. The default does nothing."""

    def __repr__(self) -> str:
        return f"an instance of {self.__class__.__name__}"


class MemoryOutput(DrawBuffer):
    """Draw sink that records commands in a list."""

    def __init__(self):
        self.commands: List[DrawCommand] = []
        self.flushed = False

    def reset(self) -> None:
        self.commands = []
        self.flushed = False

    def draw(self, command: DrawCommand) -> None:
        logger.debug("draw %r", command)
        self.commands.append(command)

    def flush(self) -> None:
        self.flushed = True

    @property
    def lines(self) -> List[LineCommand]:
        return [c for c in self.commands if isinstance(c, LineCommand)]
