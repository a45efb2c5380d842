import random

import pytest

from scenepath.geo import interpolate
from scenepath.logger import Logger
from scenepath.models import Coordinate, NavigationInstruction

BEIJING_START = Coordinate(39.9042, 116.4074)
BEIJING_END = Coordinate(39.9142, 116.4174)


@pytest.fixture
def logger():
    return Logger()


@pytest.fixture
def rng():
    return random.Random(42)


def make_instructions(count: int, start: Coordinate = BEIJING_START,
                      end: Coordinate = BEIJING_END) -> list[NavigationInstruction]:
    return [
        NavigationInstruction(
            instruction_text=f"step {i}",
            distance_text="100m",
            icon_key="arrow.up",
            coordinate=interpolate(start, end, i / max(count - 1, 1)),
        )
        for i in range(count)
    ]
