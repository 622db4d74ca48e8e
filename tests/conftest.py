import logging
from typing import Callable

import pytest

from vector_race_simulator.core.track import Track
from tests.test_utils import OPEN_TRACK, RaceScenario, RacerConfig


@pytest.fixture
def scenario() -> Callable[..., RaceScenario]:
    """Factory fixture to create scenarios."""

    def _builder(racers_config: list[RacerConfig], track: str | Track = OPEN_TRACK) -> RaceScenario:
        return RaceScenario(racers_config, track)

    return _builder


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI reconfigures the root logger; undo it so caplog keeps working."""
    root = logging.getLogger()
    engine_logger = logging.getLogger("vector_race.engine")
    handlers, level, engine_level = list(root.handlers), root.level, engine_logger.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    engine_logger.setLevel(engine_level)
