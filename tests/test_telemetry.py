from vector_race_simulator.core.events import CheckpointNotice, CollisionNotice
from vector_race_simulator.simulation.telemetry import (
    MetricsAggregator,
    SnapshotPolicy,
    SnapshotRecorder,
)
from tests.test_utils import RacerConfig

LANE = """
.......
..1...*
.......
"""


def test_metrics_count_every_outcome(scenario):
    game = scenario(
        [
            RacerConfig(0, "Ada", (0, 1), moves=[(1, 0), (1, 0), (1, 0)]),
            RacerConfig(1, "Bob", (0, 0), velocity=(-1, 0), moves=[(0, 0), (1, 0)]),
        ],
        track=LANE,
    )
    metrics = MetricsAggregator()
    metrics.initialize_racers(game.engine)
    game.engine.add_observer(metrics)

    game.run_turns(5)

    ada, bob = metrics.finalize_metrics()
    assert ada.racer_name == "Ada"
    assert ada.strategy is None
    assert ada.turns_taken == 3
    assert ada.moves == 3
    assert ada.checkpoints_passed == 1
    assert ada.cells_travelled == 1 + 2 + 3
    assert ada.finished
    assert bob.turns_taken == 2
    assert bob.collisions == 1
    assert bob.moves == 1
    assert not bob.finished
    assert [r.status for r in metrics.turn_history] == [
        "moved",
        "collision",
        "moved",
        "moved",
        "moved",
    ]


def test_bot_strategy_is_recorded(scenario):
    game = scenario([RacerConfig(0, "Ada", (0, 0), strategy="astar")])
    metrics = MetricsAggregator()
    metrics.initialize_racers(game.engine)

    assert metrics.finalize_metrics()[0].strategy == "astar"


def test_blocked_turns_are_counted(scenario):
    game = scenario(
        [
            RacerConfig(0, "Ada", (0, 0), moves=[(1, 0)]),
            RacerConfig(1, "Bob", (1, 0), velocity=(0, 1), moves=[(0, 0)]),
        ],
    )
    metrics = MetricsAggregator()
    metrics.initialize_racers(game.engine)
    game.engine.add_observer(metrics)

    game.run_turn()

    assert metrics.results[0].blocked_turns == 1
    assert metrics.results[0].moves == 0


def test_snapshots_on_turn_end(scenario):
    game = scenario(
        [
            RacerConfig(0, "Ada", (0, 0), moves=[(1, 1)]),
            RacerConfig(1, "Bob", (6, 6), moves=[(-1, 0)]),
        ],
    )
    recorder = SnapshotRecorder()
    game.engine.add_observer(recorder)

    game.run_turns(2)

    assert [s.event_name for s in recorder.step_history] == ["TurnEnd", "TurnEnd"]
    first, second = recorder.step_history
    assert first.positions == [(1, 1), (6, 6)]
    assert first.current_racer == 1
    assert second.positions == [(1, 1), (5, 6)]
    assert second.velocities == [(1, 1), (-1, 0)]
    assert second.names == ["Ada", "Bob"]
    assert recorder.turn_map == {1: [0], 2: [1]}


def test_snapshots_on_selected_notices(scenario):
    game = scenario(
        [
            RacerConfig(0, "Ada", (0, 0), velocity=(-1, 0), moves=[(0, 0)]),
            RacerConfig(1, "Bob", (0, 1), moves=[(1, 0)]),
        ],
        track=LANE,
    )
    recorder = SnapshotRecorder(
        SnapshotPolicy(
            snapshot_notice_types=(CollisionNotice, CheckpointNotice),
            snapshot_on_turn_end=False,
        ),
    )
    game.engine.add_observer(recorder)

    game.run_turns(2)

    assert [s.event_name for s in recorder.step_history] == ["CollisionNotice"]
    assert recorder.step_history[0].turn_index == 1
