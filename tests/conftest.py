import pytest

from roofkit.topology import RoofType, initialize_from_polygon


WIDTH = 8000.0
DEPTH = 6000.0


@pytest.fixture
def rectangle():
    """8 m x 6 m footprint in millimetres, counter-clockwise."""
    return [(0.0, 0.0), (WIDTH, 0.0), (WIDTH, DEPTH), (0.0, DEPTH)]


@pytest.fixture
def l_shape():
    return [(0.0, 0.0), (4.0, 0.0), (4.0, 2.0), (2.0, 2.0), (2.0, 4.0), (0.0, 4.0)]


@pytest.fixture
def flat_topology(rectangle):
    return initialize_from_polygon(rectangle, 0.0, RoofType.FLAT)


@pytest.fixture
def gable_topology(rectangle):
    return initialize_from_polygon(rectangle, 0.0, RoofType.GABLE)
