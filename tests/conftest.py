import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from kinetic_control import KineticState


@pytest.fixture
def origin():
    return KineticState()
