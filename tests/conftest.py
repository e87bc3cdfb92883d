"""Pytest configuration and shared fixtures for anchorroute tests."""

import pytest

from anchorroute import (
    BOX,
    Connector,
    ConnectorEndpointSpec,
    Shape,
    ShapeGeometry,
    parse_scene,
)
from anchorroute.board import Board


@pytest.fixture
def box_geometry():
    """100x50 box at the origin."""
    return ShapeGeometry(0, 0, 100, 50)


@pytest.fixture
def side_by_side_lookups():
    """Two 100x60 boxes on one row, 200 units apart."""
    geometry = {
        "a": ShapeGeometry(0, 0, 100, 60),
        "b": ShapeGeometry(300, 0, 100, 60),
    }
    kinds = {"a": BOX, "b": BOX}
    return geometry, kinds


@pytest.fixture
def a_to_b():
    """Connector from shape 'a' to shape 'b' with no preferred anchors."""
    return Connector("c1", ConnectorEndpointSpec("a"), ConnectorEndpointSpec("b"))


@pytest.fixture
def simple_scene_text():
    """Scene with three shapes and three connectors."""
    return """
    # three shapes in a row
    shape A box 0 0 100 60
    shape B ellipse 300 0 100 60
    shape C star 600 0 100 100 rot=30

    connector c1 A -> B
    connector c2 B:right -> C:left
    connector c3 C -> 900,300
    """


@pytest.fixture
def simple_board(simple_scene_text):
    """Board built from simple_scene_text."""
    return parse_scene(simple_scene_text).to_board()


@pytest.fixture
def scene_file(tmp_path, simple_scene_text):
    """simple_scene_text written to a file."""
    path = tmp_path / "scene.txt"
    path.write_text(simple_scene_text)
    return path


@pytest.fixture
def two_box_board():
    """Board with boxes 'a' and 'b' joined by connector 'c1'."""
    board = Board()
    board.add_shape(Shape("a", ShapeGeometry(0, 0, 100, 60)))
    board.add_shape(Shape("b", ShapeGeometry(300, 0, 100, 60)))
    board.add_connector(
        Connector("c1", ConnectorEndpointSpec("a"), ConnectorEndpointSpec("b"))
    )
    return board
