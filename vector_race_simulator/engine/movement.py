from __future__ import annotations

from typing import TYPE_CHECKING

from vector_race_simulator.core.events import (
    BlockedNotice,
    CheckpointNotice,
    CollisionNotice,
    TurnOutcome,
    VictoryNotice,
)
from vector_race_simulator.engine.validation import is_legal_move

if TYPE_CHECKING:
    from vector_race_simulator.core.geometry import Vector
    from vector_race_simulator.core.state import RacerState
    from vector_race_simulator.engine.race_engine import RaceEngine


def resolve_move(engine: RaceEngine, racer: RacerState, acceleration: Vector) -> TurnOutcome:
    """
    Apply one acceleration to ``racer`` and commit the result.

    Illegal segments and occupied destinations both stop the racer in place.
    Only a committed move can pass checkpoints or reach the finish.
    """
    state = engine.state
    start = racer.position
    new_velocity = racer.velocity + acceleration
    end = start.move(new_velocity)
    turn = state.turn_count

    # 1. Walls and parked opponents along the path
    if not is_legal_move(state.track, start, end, mover=racer, racers=state.racers):
        racer.stop()
        engine.log_info(f"Collision: {racer.repr} {start}->{end} hits an obstacle, velocity reset")
        engine.notify(
            CollisionNotice(
                racer_idx=racer.idx,
                racer_name=racer.name,
                start=start,
                attempted_end=end,
            ),
        )
        return TurnOutcome(
            turn=turn,
            racer_idx=racer.idx,
            acceleration=acceleration,
            start=start,
            end=start,
            velocity=racer.velocity,
            status="collision",
        )

    # 2. Destination held by a moving opponent
    occupant = state.racer_at(end, except_idx=racer.idx) if end != start else None
    if occupant is not None:
        racer.stop()
        engine.log_info(f"Blocked: {racer.repr} cannot enter {end}, occupied by {occupant.repr}")
        engine.notify(
            BlockedNotice(
                racer_idx=racer.idx,
                racer_name=racer.name,
                destination=end,
                occupant_idx=occupant.idx,
            ),
        )
        return TurnOutcome(
            turn=turn,
            racer_idx=racer.idx,
            acceleration=acceleration,
            start=start,
            end=start,
            velocity=racer.velocity,
            status="blocked",
        )

    # 3. Commit
    racer.commit_move(end, new_velocity)
    engine.log_info(f"Move: {racer.repr} {start}->{end} velocity {new_velocity}")

    # 4. Checkpoints crossed on the way
    crossed = engine.checkpoints.record_crossings(racer, start, end)
    for checkpoint in crossed:
        number = state.track.checkpoint_number(checkpoint)
        assert number is not None
        engine.log_info(f"Checkpoint: {racer.repr} passed #{number} at {checkpoint}")
        engine.notify(
            CheckpointNotice(
                racer_idx=racer.idx,
                racer_name=racer.name,
                checkpoint=checkpoint,
                number=number,
            ),
        )

    finished = check_finish(engine, racer)
    return TurnOutcome(
        turn=turn,
        racer_idx=racer.idx,
        acceleration=acceleration,
        start=start,
        end=end,
        velocity=new_velocity,
        status="moved",
        checkpoints_passed=tuple(crossed),
        finished=finished,
    )


def check_finish(engine: RaceEngine, racer: RacerState) -> bool:
    state = engine.state
    if state.finished or not state.track.is_finish(racer.position):
        return False

    state.declare_winner(racer)
    engine.log_info(f"Finish: {racer.repr} wins at {racer.position} on turn {state.turn_count}")
    engine.notify(
        VictoryNotice(
            racer_idx=racer.idx,
            racer_name=racer.name,
            position=racer.position,
            turn=state.turn_count,
        ),
    )
    return True
