"""Unit tests for the Board model."""

from anchorroute.board import FREE_NODE_PREFIX, Board
from anchorroute.models import (
    ELLIPSE,
    Connector,
    ConnectorEndpointSpec,
    Shape,
    ShapeGeometry,
)


def _chain_board():
    board = Board()
    for shape_id, x in (("a", 0), ("b", 300), ("c", 600)):
        board.add_shape(Shape(shape_id, ShapeGeometry(x, 0, 100, 60)))
    board.add_connector(
        Connector("ab", ConnectorEndpointSpec("a"), ConnectorEndpointSpec("b"))
    )
    board.add_connector(
        Connector("bc", ConnectorEndpointSpec("b"), ConnectorEndpointSpec("c"))
    )
    return board


class TestBoardShapes:
    """Tests for shape bookkeeping."""

    def test_lookups(self):
        board = Board()
        board.add_shape(Shape("e", ShapeGeometry(0, 0, 10, 10), ELLIPSE))
        assert board.geometry_lookup == {"e": ShapeGeometry(0, 0, 10, 10)}
        assert board.kind_lookup == {"e": ELLIPSE}

    def test_move_shape_keeps_kind(self):
        board = Board()
        board.add_shape(Shape("e", ShapeGeometry(0, 0, 10, 10), ELLIPSE))
        board.move_shape("e", ShapeGeometry(50, 50, 10, 10))
        assert board.shapes["e"].geometry.x == 50
        assert board.shapes["e"].kind == ELLIPSE

    def test_remove_isolated_shape(self):
        board = Board()
        board.add_shape(Shape("a", ShapeGeometry(0, 0, 10, 10)))
        board.remove_shape("a")
        assert "a" not in board.shapes
        assert "a" not in board.graph

    def test_remove_connected_shape_keeps_connectors(self):
        board = _chain_board()
        board.remove_shape("b")
        assert "b" not in board.geometry_lookup
        assert set(board.connectors) == {"ab", "bc"}
        assert board.graph.nodes["b"]["kind"] == "missing"
        assert board.connectors_touching(["b"]) == {"ab", "bc"}


class TestBoardConnectors:
    """Tests for connector bookkeeping."""

    def test_connectors_touching(self):
        board = _chain_board()
        assert board.connectors_touching(["a"]) == {"ab"}
        assert board.connectors_touching(["b"]) == {"ab", "bc"}
        assert board.connectors_touching(["a", "c"]) == {"ab", "bc"}
        assert board.connectors_touching(["unknown"]) == set()

    def test_free_endpoints_get_placeholder_nodes(self):
        board = Board()
        board.add_connector(
            Connector("c1", ConnectorEndpointSpec(), ConnectorEndpointSpec())
        )
        free_nodes = [n for n in board.graph if str(n).startswith(FREE_NODE_PREFIX)]
        assert len(free_nodes) == 2

    def test_remove_connector_drops_edges_and_free_nodes(self):
        board = _chain_board()
        board.add_connector(
            Connector("dangling", ConnectorEndpointSpec("a"), ConnectorEndpointSpec())
        )
        board.remove_connector("dangling")
        assert "dangling" not in board.connectors
        assert board.connectors_touching(["a"]) == {"ab"}
        assert not any(str(n).startswith(FREE_NODE_PREFIX) for n in board.graph)

    def test_replace_connector(self):
        board = _chain_board()
        board.add_connector(
            Connector("ab", ConnectorEndpointSpec("a"), ConnectorEndpointSpec("c"))
        )
        assert board.connectors_touching(["b"]) == {"bc"}
        assert board.connectors_touching(["c"]) == {"ab", "bc"}
        assert board.graph.number_of_edges() == 2

    def test_connector_to_undeclared_shape(self):
        board = Board()
        board.add_connector(
            Connector("c1", ConnectorEndpointSpec("ghost"), ConnectorEndpointSpec())
        )
        assert board.graph.nodes["ghost"]["kind"] == "missing"
        assert board.connectors_touching(["ghost"]) == {"c1"}
