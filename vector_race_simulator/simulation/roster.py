"""
Roster files: one racer per line as ``Type;Name;#RRGGBB[;strategy code]``.

``Type`` is ``Human`` or ``Bot`` (any case). The optional code picks the bot
strategy: ``1`` for BFS, ``2`` for A*. Other codes and a missing code fall back
to BFS. Blank lines and lines starting with ``#`` are skipped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Annotated

import msgspec

from vector_race_simulator.core.types import STRATEGY_CODES, RacerKind, StrategyName

logger = logging.getLogger("vector_race.simulation")

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
_COLOR_RE = re.compile(COLOR_PATTERN)


class RacerEntry(msgspec.Struct):
    """Everything needed to put one racer on the grid, minus its start cell."""

    name: str
    kind: RacerKind = "bot"
    color: Annotated[str, msgspec.Meta(pattern=COLOR_PATTERN)] = "#FF0000"
    strategy: StrategyName = "bfs"


class RosterParseError(ValueError):
    def __init__(self, line_no: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_no}: {reason} ({line!r})")
        self.line_no: int = line_no
        self.line: str = line


class InvalidFormatError(RosterParseError):
    pass


class InvalidRacerTypeError(RosterParseError):
    pass


class InvalidColorError(RosterParseError):
    pass


class InvalidStrategyError(RosterParseError):
    pass


def parse_roster_line(line: str, line_no: int = 1) -> RacerEntry:
    parts = [part.strip() for part in line.split(";")]
    if len(parts) < 3 or not parts[1]:
        raise InvalidFormatError(line_no, line, "expected Type;Name;#RRGGBB[;code]")

    kind_raw, name, color = parts[0], parts[1], parts[2]

    match kind_raw.lower():
        case "human":
            kind: RacerKind = "human"
        case "bot":
            kind = "bot"
        case _:
            raise InvalidRacerTypeError(line_no, line, f"unknown racer type '{kind_raw}'")

    if not _COLOR_RE.match(color):
        raise InvalidColorError(line_no, line, f"color '{color}' is not #RRGGBB")

    strategy: StrategyName = "bfs"
    if kind == "bot":
        if len(parts) > 3 and parts[3]:
            try:
                code = int(parts[3])
            except ValueError as e:
                raise InvalidStrategyError(
                    line_no,
                    line,
                    f"strategy code '{parts[3]}' is not a number",
                ) from e
            if code not in STRATEGY_CODES:
                logger.warning("Line %d: unknown strategy code %d for %s, using BFS", line_no, code, name)
            strategy = STRATEGY_CODES.get(code, "bfs")
        else:
            logger.info("Line %d: no strategy for bot %s, using BFS", line_no, name)

    return RacerEntry(name=name, kind=kind, color=color.upper(), strategy=strategy)


def parse_roster(text: str) -> list[RacerEntry]:
    entries: list[RacerEntry] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(parse_roster_line(line, line_no))
    return entries


def load_roster(path: str | Path) -> list[RacerEntry]:
    entries = parse_roster(Path(path).read_text(encoding="utf-8"))
    if not entries:
        raise InvalidFormatError(0, str(path), "roster file lists no racers")
    return entries
