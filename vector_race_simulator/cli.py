"""Command-line interface for running races."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import cappa
import msgspec
from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text
from tqdm import tqdm

from vector_race_simulator.core.geometry import Position, Vector
from vector_race_simulator.core.types import CellKind, is_acceleration
from vector_race_simulator.engine.logging import configure_logging, silence_engine_logs
from vector_race_simulator.engine.validation import legal_accelerations
from vector_race_simulator.simulation.config import RaceConfig, RacerEntry
from vector_race_simulator.simulation.roster import load_roster
from vector_race_simulator.simulation.runner import run_single_race
from vector_race_simulator.tracks import load_track

if TYPE_CHECKING:
    from vector_race_simulator.core.agent import DecisionContext
    from vector_race_simulator.core.events import RaceNotice, TurnOutcome
    from vector_race_simulator.core.state import RaceState
    from vector_race_simulator.engine.race_engine import RaceEngine

console = Console()

DEFAULT_RACERS = [
    RacerEntry(name="Breadth", color="#FF0000", strategy="bfs"),
    RacerEntry(name="Star", color="#0000FF", strategy="astar"),
]

_CELL_GLYPHS = {
    CellKind.WALL: ("#", "grey50"),
    CellKind.ROAD: (".", "grey23"),
    CellKind.START: ("S", "green"),
    CellKind.FINISH: ("*", "bold yellow"),
}


def render_grid(state: RaceState) -> Text:
    """Track with every racer drawn as its index in its own color."""
    track = state.track
    occupants = {r.position: r for r in state.racers}
    text = Text()
    for y, row in enumerate(track.rows):
        for x, kind in enumerate(row):
            pos = Position(x, y)
            racer = occupants.get(pos)
            if racer is not None:
                text.append(str(racer.idx % 10), style=f"bold {racer.color}")
            elif kind is CellKind.CHECKPOINT:
                text.append(str(track.checkpoint_number(pos)), style="bold blue")
            else:
                glyph, style = _CELL_GLYPHS[kind]
                text.append(glyph, style=style)
        text.append("\n")
    return text


@dataclass
class GridRenderer:
    """Observer that redraws the grid after every turn."""

    delay: float = 0.0

    def on_notice(self, engine: RaceEngine, notice: RaceNotice) -> None:
        _ = engine, notice

    def on_turn_end(self, engine: RaceEngine, outcome: TurnOutcome) -> None:
        racer = engine.state.get_racer(outcome.racer_idx)
        console.print(render_grid(engine.state))
        console.print(
            f"turn {outcome.turn}: {racer.repr} {outcome.status} "
            f"{outcome.start} -> {outcome.end}, velocity {outcome.velocity}",
        )
        if self.delay > 0:
            time.sleep(self.delay)


def prompt_acceleration(ctx: DecisionContext) -> Vector:
    """Ask the player at the keyboard for ``dx dy``; the legal choices are listed."""
    racer = ctx.racer
    legal = legal_accelerations(ctx.state, racer)
    console.print(render_grid(ctx.state))
    console.print(
        f"[bold]{racer.name}[/bold] at {racer.position}, velocity {racer.velocity}, "
        f"next checkpoint {racer.next_checkpoint}",
    )
    console.print("Legal accelerations: " + " ".join(str(acc) for acc in legal))

    while True:
        raw = Prompt.ask("Acceleration (dx dy)", default="0 0", console=console)
        parts = raw.replace(",", " ").split()
        try:
            acceleration = Vector(int(parts[0]), int(parts[1]))
        except (ValueError, IndexError):
            console.print("[red]Enter two integers, e.g. '1 -1'[/red]")
            continue
        if not is_acceleration(acceleration):
            console.print("[red]Components must be -1, 0 or 1[/red]")
            continue
        return acceleration


@dataclass
class Args:
    """Run vector races between bots and players at the keyboard."""

    config: Annotated[Path | None, cappa.Arg(short="-c", long=True)] = None
    """Path to a TOML configuration file"""

    track: Annotated[
        list[str],
        cappa.Arg(short="-t", long=True, action=cappa.ArgAction.append),
    ] = field(default_factory=list)
    """Bundled track name or track file; repeat to race several tracks"""

    roster: Annotated[Path | None, cappa.Arg(short="-r", long=True)] = None
    """Override: roster file (Type;Name;#RRGGBB[;code] per line)"""

    max_turns: Annotated[int | None, cappa.Arg(long=True)] = None
    """Override: abort races exceeding this many racer turns"""

    show_grid: Annotated[bool, cappa.Arg(long=True)] = False
    """Draw the track after every turn"""

    delay: Annotated[float, cappa.Arg(long=True)] = 0.0
    """Seconds to pause after each drawn turn"""

    verbose: Annotated[bool, cappa.Arg(short="-v", long=True)] = False
    """Log search details"""

    def __call__(self) -> int:
        """Load configuration, then race every track in turn."""
        try:
            config = self._load_config()
            entries = self._resolve_racers(config)
            tracks = [(name, load_track(name)) for name in (self.track or config.tracks)]
        except (ValueError, OSError, msgspec.DecodeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        configure_logging(logging.DEBUG if self.verbose else logging.INFO)
        if len(tracks) > 1 and not self.show_grid:
            silence_engine_logs()

        max_turns = self.max_turns or config.max_turns
        has_humans = any(entry.kind == "human" for entry in entries)
        observers = [GridRenderer(self.delay)] if self.show_grid else []

        completed = 0
        aborted = 0
        with tqdm(total=len(tracks), desc="Racing", unit="race") as pbar:
            for name, track in tracks:
                try:
                    result = run_single_race(
                        name,
                        track,
                        entries,
                        settings=config.search,
                        max_turns=max_turns,
                        observers=observers,
                        human_input=prompt_acceleration if has_humans else None,
                    )
                except ValueError as e:
                    print(f"Error: {name}: {e}", file=sys.stderr)
                    return 1

                if result.aborted:
                    aborted += 1
                else:
                    completed += 1

                status = "ABORTED" if result.aborted else f"WON by {result.winner}"
                tqdm.write(
                    f"[{name}] {status} "
                    f"in {result.execution_time_ms:.2f}ms "
                    f"({result.turn_count} turns)",
                )
                for metric in result.metrics:
                    tqdm.write(
                        f"  {metric.racer_name} ({metric.strategy or 'human'}): "
                        f"turns={metric.turns_taken}, moves={metric.moves}, "
                        f"collisions={metric.collisions}, blocked={metric.blocked_turns}, "
                        f"checkpoints={metric.checkpoints_passed}, "
                        f"cells={metric.cells_travelled}",
                    )
                pbar.update(1)

        print(f"\nCompleted: {completed}")
        print(f"Aborted:   {aborted}")
        return 0

    def _load_config(self) -> RaceConfig:
        if self.config is None:
            return RaceConfig()
        if not self.config.exists():
            raise ValueError(f"Config file not found: {self.config}")
        return RaceConfig.from_toml(self.config)

    def _resolve_racers(self, config: RaceConfig) -> list[RacerEntry]:
        if self.roster is not None:
            return load_roster(self.roster)
        base_dir = self.config.parent if self.config is not None else None
        return config.resolve_racers(base_dir) or list(DEFAULT_RACERS)


def main() -> int:
    """Entry point for CLI."""
    return cappa.invoke(Args)


if __name__ == "__main__":
    sys.exit(main())
