"""
Board model using networkx for shape/connector bookkeeping.

Shapes and connectors are stored independently by id. A networkx
MultiDiGraph mirrors the connections so that questions such as "which
connectors touch these shapes?" are answered without scanning every
connector. Routing never holds on to a Board between calls; it only reads
the lookups it needs.
"""

from typing import Dict, Iterable, Optional, Set

import networkx as nx

from .models import Connector, Shape, ShapeGeometry, ShapeKind

# Prefix for graph nodes standing in for free (unbound) endpoints
FREE_NODE_PREFIX = "__free__"


class Board:
    """
    Id-indexed arena of shapes and connectors.

    Attributes:
        shapes: Shape id -> Shape
        connectors: Connector id -> Connector
        graph: MultiDiGraph with shapes as nodes and one keyed edge per
            connector (free endpoints get a placeholder node per connector)
    """

    def __init__(self):
        self.shapes: Dict[str, Shape] = {}
        self.connectors: Dict[str, Connector] = {}
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()

    def add_shape(self, shape: Shape) -> None:
        """Add or replace a shape."""
        self.shapes[shape.shape_id] = shape
        self.graph.add_node(shape.shape_id, kind="shape")

    def move_shape(self, shape_id: str, geometry: ShapeGeometry) -> None:
        """Replace a shape's geometry, keeping its kind."""
        shape = self.shapes[shape_id]
        self.shapes[shape_id] = Shape(shape_id, geometry, shape.kind)

    def remove_shape(self, shape_id: str) -> None:
        """
        Remove a shape.

        Connectors bound to it stay on the board; their endpoint lookups
        miss and they fall back to free points.
        """
        self.shapes.pop(shape_id, None)
        if shape_id not in self.graph:
            return
        if self.graph.degree(shape_id) == 0:
            self.graph.remove_node(shape_id)
        else:
            self.graph.nodes[shape_id]["kind"] = "missing"

    def add_connector(self, connector: Connector) -> None:
        """Add or replace a connector."""
        if connector.connector_id in self.connectors:
            self.remove_connector(connector.connector_id)
        self.connectors[connector.connector_id] = connector
        source = self._graph_node(connector.source.object_id, connector, "from")
        target = self._graph_node(connector.target.object_id, connector, "to")
        self.graph.add_edge(source, target, key=connector.connector_id)

    def remove_connector(self, connector_id: str) -> None:
        connector = self.connectors.pop(connector_id, None)
        if connector is None:
            return
        for u, v, key in list(self.graph.edges(keys=True)):
            if key == connector_id:
                self.graph.remove_edge(u, v, key=key)
        for endpoint in ("from", "to"):
            free_node = self._free_node(connector_id, endpoint)
            if free_node in self.graph:
                self.graph.remove_node(free_node)

    def _free_node(self, connector_id: str, endpoint: str) -> str:
        return f"{FREE_NODE_PREFIX}{connector_id}:{endpoint}"

    def _graph_node(
        self, object_id: Optional[str], connector: Connector, endpoint: str
    ) -> str:
        if object_id is None:
            node = self._free_node(connector.connector_id, endpoint)
            self.graph.add_node(node, kind="free")
            return node
        if object_id not in self.graph:
            # Dangling reference; kept so the edge survives until the shape appears
            self.graph.add_node(object_id, kind="missing")
        return object_id

    @property
    def geometry_lookup(self) -> Dict[str, ShapeGeometry]:
        return {shape_id: shape.geometry for shape_id, shape in self.shapes.items()}

    @property
    def kind_lookup(self) -> Dict[str, ShapeKind]:
        return {shape_id: shape.kind for shape_id, shape in self.shapes.items()}

    def connectors_touching(self, shape_ids: Iterable[str]) -> Set[str]:
        """Ids of connectors with at least one endpoint on any of ``shape_ids``."""
        touching: Set[str] = set()
        for shape_id in shape_ids:
            if shape_id not in self.graph:
                continue
            for _, _, key in self.graph.out_edges(shape_id, keys=True):
                touching.add(key)
            for _, _, key in self.graph.in_edges(shape_id, keys=True):
                touching.add(key)
        return touching
