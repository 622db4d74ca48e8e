from unittest.mock import MagicMock

import pytest

from vector_race_simulator.ai.astar import AStarSearch
from vector_race_simulator.ai.bfs import BreadthFirstSearch
from vector_race_simulator.ai.evaluation import smoothed_chebyshev
from vector_race_simulator.ai.search import SearchResult
from vector_race_simulator.ai.smart_agent import BotAgent
from vector_race_simulator.ai.strategies import (
    STRATEGY_CLASSES,
    STUCK_THRESHOLD,
    AStarStrategy,
    BFSStrategy,
)
from vector_race_simulator.core.agent import DecisionContext, HumanAgent
from vector_race_simulator.core.geometry import ZERO, Position, Vector
from vector_race_simulator.core.state import RacerState, RaceState
from vector_race_simulator.engine.checkpoints import CheckpointTracker
from vector_race_simulator.tracks import parse_track


def _context(track_text: str, *racers: RacerState) -> DecisionContext:
    track = parse_track(track_text)
    state = RaceState(track=track, racers=list(racers))
    return DecisionContext(state=state, racer=racers[0], checkpoints=CheckpointTracker(track))


def _racer(idx: int, pos: tuple[int, int], velocity: tuple[int, int] = (0, 0)) -> RacerState:
    return RacerState(
        idx,
        f"bot{idx}",
        position=Position(*pos),
        agent=HumanAgent(),
        velocity=Vector(*velocity),
    )


def test_registry_names():
    assert STRATEGY_CLASSES == {"bfs": BFSStrategy, "astar": AStarStrategy}


def test_strategy_configuration():
    bfs = BFSStrategy(max_speed=3)
    assert isinstance(bfs.engine, BreadthFirstSearch)
    assert bfs.engine.max_speed == 3

    astar = AStarStrategy(max_speed=6, max_expansions=1000, smoothing=True)
    assert isinstance(astar.engine, AStarSearch)
    assert astar.engine.max_speed == 6
    assert astar.engine.max_expansions == 1000
    assert astar.engine.heuristic is smoothed_chebyshev


def test_no_target_returns_zero_without_searching():
    ctx = _context("S....", _racer(0, (0, 0)))
    strategy = BFSStrategy()
    strategy._engine = MagicMock()  # pyright: ignore[reportPrivateUsage]

    assert strategy.next_acceleration(ctx) == ZERO
    strategy.engine.search.assert_not_called()


def test_search_failure_returns_zero():
    ctx = _context("..1..", _racer(0, (0, 0)))
    strategy = AStarStrategy()
    strategy._engine = MagicMock()  # pyright: ignore[reportPrivateUsage]
    strategy.engine.search.return_value = SearchResult.not_found(42)

    assert strategy.next_acceleration(ctx) == ZERO
    strategy.engine.search.assert_called_once_with(
        ctx.state.track,
        Position(0, 0),
        ZERO,
        Position(2, 0),
    )


@pytest.mark.parametrize("strategy_cls", [BFSStrategy, AStarStrategy])
def test_first_move_heads_for_checkpoint(strategy_cls):
    ctx = _context("..1..", _racer(0, (0, 0)))
    assert strategy_cls().next_acceleration(ctx) == Vector(1, 0)


def test_first_move_blocked_by_parked_opponent():
    ctx = _context("..1..", _racer(0, (0, 0)), _racer(1, (1, 0)))
    assert BFSStrategy().next_acceleration(ctx) == ZERO


def test_stuck_racer_drops_its_target():
    ctx = _context("..1..", _racer(0, (0, 0)), _racer(1, (1, 0)))
    strategy = BFSStrategy()
    racer = ctx.racer

    for turn in range(1, STUCK_THRESHOLD):
        assert strategy.next_acceleration(ctx) == ZERO
        assert racer.memory.stuck_turns == turn
        assert ctx.checkpoints.cached_target(racer) == Position(2, 0)

    assert strategy.next_acceleration(ctx) == ZERO
    assert racer.memory.stuck_turns == 0
    assert racer.memory.last_target is None
    assert racer.memory.avoid == {Position(2, 0)}
    assert ctx.checkpoints.cached_target(racer) is None

    # The only cell of the group is still the target
    assert strategy.next_acceleration(ctx) == ZERO
    assert ctx.checkpoints.cached_target(racer) == Position(2, 0)


def test_stuck_racer_switches_to_another_group_cell():
    ctx = _context("1.S.1", _racer(0, (2, 0)), _racer(1, (1, 0)))
    strategy = BFSStrategy()
    racer = ctx.racer

    for _ in range(STUCK_THRESHOLD):
        assert strategy.next_acceleration(ctx) == ZERO
    assert ctx.checkpoints.cached_target(racer) is None

    assert strategy.next_acceleration(ctx) == Vector(1, 0)
    assert ctx.checkpoints.cached_target(racer) == Position(4, 0)


def test_memory_tracks_direction_and_target():
    ctx = _context("....1....", _racer(0, (1, 0), velocity=(1, 0)))
    strategy = BFSStrategy()

    strategy.next_acceleration(ctx)

    assert ctx.racer.memory.last_direction == Vector(1, 0)
    assert ctx.racer.memory.last_target == Position(4, 0)
    assert ctx.racer.memory.stuck_turns == 0


def test_strategy_never_moves_the_racer():
    ctx = _context("..1..", _racer(0, (0, 0)))
    BFSStrategy().next_acceleration(ctx)
    assert ctx.racer.position == Position(0, 0)
    assert ctx.racer.velocity == ZERO


def test_bot_agent_delegates():
    strategy = MagicMock()
    strategy.next_acceleration.return_value = Vector(0, 1)
    ctx = _context("..1..", _racer(0, (0, 0)))

    assert BotAgent(strategy).choose_acceleration(ctx) == Vector(0, 1)
    strategy.next_acceleration.assert_called_once_with(ctx)


# ---------- Human input ----------


def test_human_selection_is_consumed():
    ctx = _context("..1..", _racer(0, (0, 0)))
    human = HumanAgent()

    assert human.choose_acceleration(ctx) == ZERO
    human.select(Vector(1, 1))
    assert human.choose_acceleration(ctx) == Vector(1, 1)
    assert human.choose_acceleration(ctx) == ZERO


def test_human_selection_can_be_reset():
    ctx = _context("..1..", _racer(0, (0, 0)))
    human = HumanAgent()
    human.select(Vector(-1, 0))
    human.reset_selection()
    assert human.choose_acceleration(ctx) == ZERO


@pytest.mark.parametrize("bad", [Vector(2, 0), Vector(0, -2), Vector(3, 3)])
def test_human_rejects_out_of_range_acceleration(bad):
    with pytest.raises(ValueError, match="-1, 0, 1"):
        HumanAgent().select(bad)


def test_human_input_source_is_asked_when_nothing_pending():
    ctx = _context("..1..", _racer(0, (0, 0)))
    source = MagicMock(return_value=Vector(1, 0))
    human = HumanAgent(source)

    assert human.choose_acceleration(ctx) == Vector(1, 0)
    source.assert_called_once_with(ctx)

    human.select(Vector(0, 1))
    assert human.choose_acceleration(ctx) == Vector(0, 1)
    assert source.call_count == 1
