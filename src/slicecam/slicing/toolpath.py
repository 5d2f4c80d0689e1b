"""
Toolpath data structures for milling output.

A toolpath is an append-only sequence of instructions (moves and comment
lines) that renders one-to-one to G-code lines.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union


class MoveType(Enum):
    """G-code motion word."""

    RAPID = "G0"  # Non-cutting positioning
    LINEAR = "G1"  # Cutting feed (and plunge)
    ARC_CW = "G2"  # Clockwise arc, centre given by I/J
    ARC_CCW = "G3"  # Counter-clockwise arc


def format_number(value: float) -> str:
    """Fixed three-decimal G-code number; negative zero prints as ``0.000``."""
    text = f"{value:.3f}"
    if text == "-0.000":
        return "0.000"
    return text


@dataclass(frozen=True)
class Move:
    """
    A single motion instruction.

    Coordinates left as None are modal: the controller keeps its current
    value. ``i``/``j`` are arc centre offsets relative to the start point.
    """

    type: MoveType
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    i: Optional[float] = None
    j: Optional[float] = None
    feedrate: Optional[float] = None

    @property
    def is_arc(self) -> bool:
        return self.type in (MoveType.ARC_CW, MoveType.ARC_CCW)

    def to_gcode(self) -> str:
        words = [self.type.value]
        for letter, value in (
            ("X", self.x),
            ("Y", self.y),
            ("Z", self.z),
            ("I", self.i),
            ("J", self.j),
            ("F", self.feedrate),
        ):
            if value is not None:
                words.append(f"{letter}{format_number(value)}")
        return " ".join(words)


@dataclass(frozen=True)
class Comment:
    """Full-line ``;`` comment."""

    text: str

    def to_gcode(self) -> str:
        return f"; {self.text}"


Instruction = Union[Move, Comment]


class ToolpathPoint(NamedTuple):
    """Resolved tool position after a move."""

    x: float
    y: float
    z: float
    feedrate: Optional[float]
    kind: MoveType


@dataclass
class Toolpath:
    """
    Complete milling toolpath.

    Attributes:
        instructions: Moves and comments in emission order
        levels: Z level of every layer, in emission order
        metadata: Additional toolpath metadata
    """

    instructions: List[Instruction] = field(default_factory=list)
    levels: List[float] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    def add(self, instruction: Instruction) -> None:
        self.instructions.append(instruction)

    def extend(self, instructions: Iterable[Instruction]) -> None:
        self.instructions.extend(instructions)

    def comment(self, text: str) -> None:
        self.instructions.append(Comment(text))

    def begin_level(self, z: float) -> None:
        """Start a new Z level: records it and adds its header comment."""
        self.levels.append(z)
        self.comment(f"Z Level: {format_number(z)}")

    def append_toolpath(self, other: "Toolpath") -> None:
        """Append another toolpath's instructions and levels."""
        self.instructions.extend(other.instructions)
        self.levels.extend(other.levels)

    @property
    def moves(self) -> List[Move]:
        return [inst for inst in self.instructions if isinstance(inst, Move)]

    @property
    def comments(self) -> List[str]:
        return [inst.text for inst in self.instructions if isinstance(inst, Comment)]

    def _resolve(self) -> Iterator[Tuple[Move, ToolpathPoint]]:
        x = y = z = None
        feedrate = None
        for move in self.moves:
            x = move.x if move.x is not None else x
            y = move.y if move.y is not None else y
            z = move.z if move.z is not None else z
            if move.feedrate is not None:
                feedrate = move.feedrate
            if x is None or y is None or z is None:
                continue
            rate = None if move.type == MoveType.RAPID else feedrate
            yield move, ToolpathPoint(x, y, z, rate, move.type)

    def points(self) -> List[ToolpathPoint]:
        """
        Resolve modal coordinates into absolute tool positions.

        Moves issued before X, Y and Z are all known yield no point.
        """
        return [point for _, point in self._resolve()]

    def get_total_length(self) -> float:
        """
        Total travelled distance, rapids included.

        An arc contributes the length of its swept angle; one ending where it
        started is a full circle.
        """
        total = 0.0
        previous: Optional[ToolpathPoint] = None
        for move, point in self._resolve():
            if move.is_arc:
                total += _arc_length(previous, point, move)
            elif previous is not None:
                total += math.dist(
                    (previous.x, previous.y, previous.z), (point.x, point.y, point.z)
                )
            previous = point
        return total

    def to_gcode(self) -> str:
        """Render one G-code line per instruction."""
        return "\n".join(inst.to_gcode() for inst in self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)


def _arc_length(start: Optional[ToolpathPoint], end: ToolpathPoint, move: Move) -> float:
    i, j = move.i or 0.0, move.j or 0.0
    radius = math.hypot(i, j)
    if start is None:
        return 2 * math.pi * radius

    cx, cy = start.x + i, start.y + j
    a0 = math.atan2(start.y - cy, start.x - cx)
    a1 = math.atan2(end.y - cy, end.x - cx)
    if move.type == MoveType.ARC_CCW:
        sweep = (a1 - a0) % (2 * math.pi)
    else:
        sweep = (a0 - a1) % (2 * math.pi)
    if sweep < 1e-9:
        sweep = 2 * math.pi
    return radius * sweep
