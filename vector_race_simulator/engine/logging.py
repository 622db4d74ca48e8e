from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, override

from rich.logging import RichHandler

if TYPE_CHECKING:
    from vector_race_simulator.core.state import LogContext
    from vector_race_simulator.engine.race_engine import RaceEngine


# Precompiled regex patterns for highlighting
RACER_PATTERN = re.compile(r"(?<![\[\w])(\d+:[A-Za-z_][\w-]*)")
POSITION_PATTERN = re.compile(r"(?<!\[)(\(-?\d+, -?\d+\))")


# Simple color theme for Rich
COLOR = {
    "move": "bold green",
    "collision": "bold red",
    "blocked": "bold magenta",
    "checkpoint": "bold blue",
    "finish": "bold yellow",
    "warning": "bold red",
    "racer": "yellow",
    "position": "cyan",
    "prefix": "dim",
}

KEYWORD_STYLES = {
    "Move": COLOR["move"],
    "Collision": COLOR["collision"],
    "Blocked": COLOR["blocked"],
    "Checkpoint": COLOR["checkpoint"],
    "Finish": COLOR["finish"],
}
KEYWORD_PATTERN = re.compile(rf"\b({'|'.join(KEYWORD_STYLES)})\b")


class ContextFilter(logging.Filter):
    """Inject per-engine runtime context into every log record."""

    def __init__(self, engine: RaceEngine, name: str = "") -> None:
        super().__init__(name)
        self.engine: RaceEngine = engine

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        logctx: LogContext = self.engine.log_context
        record.total_turn = logctx.total_turn
        record.turn_log_count = logctx.turn_log_count
        record.racer_repr = logctx.current_racer_repr
        record.engine_id = logctx.engine_id
        logctx.inc_log_count()
        return True


class RichMarkupFormatter(logging.Formatter):
    @override
    def format(self, record: logging.LogRecord) -> str:
        total_turn = getattr(record, "total_turn", 0)
        turn_log_count = getattr(record, "turn_log_count", 0)
        racer_repr = getattr(record, "racer_repr", "_")
        engine_id = getattr(record, "engine_id", 0)
        prefix = f"{engine_id} {total_turn}.{racer_repr}.{turn_log_count}"

        # Escape literal brackets (checkpoint numbers, reprs) before adding markup
        styled = record.getMessage().replace("[", r"\[")

        styled = KEYWORD_PATTERN.sub(
            lambda m: f"[{KEYWORD_STYLES[m.group(1)]}]{m.group(1)}[/{KEYWORD_STYLES[m.group(1)]}]",
            styled,
        )
        styled = RACER_PATTERN.sub(rf"[{COLOR['racer']}]\1[/{COLOR['racer']}]", styled)
        styled = POSITION_PATTERN.sub(
            rf"[{COLOR['position']}]\1[/{COLOR['position']}]",
            styled,
        )

        if record.levelno >= logging.WARNING:
            styled = f"[{COLOR['warning']}]{styled}[/{COLOR['warning']}]"

        return f"[{COLOR['prefix']}]{prefix}[/{COLOR['prefix']}]  {styled}"


def configure_logging(level: int = logging.INFO) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)
    handler = RichHandler(markup=True, show_path=False, show_time=False)
    handler.setFormatter(RichMarkupFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)


def silence_engine_logs() -> None:
    """Batch runs only want the summary lines."""
    logging.getLogger("vector_race.engine").setLevel(logging.CRITICAL)
