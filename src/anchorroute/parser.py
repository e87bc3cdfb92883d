"""
Parser for the scene text format.

A scene lists shapes and connectors, one statement per line:

    # comments and blank lines are ignored
    shape A box 100 100 120 80
    shape B ellipse 400 100 120 80 rot=30
    connector c1 A:right -> B:left
    connector c2 A -> 520,300

Shape kinds: box (alias rect, sticky, text), ellipse (alias circle),
triangle, star. Endpoints are ``<shape>``, ``<shape>:<side>`` or ``<x>,<y>``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .board import Board
from .models import (
    BOX,
    ELLIPSE,
    STAR,
    TRIANGLE,
    AnchorSide,
    Connector,
    ConnectorEndpointSpec,
    Shape,
    ShapeGeometry,
    ShapeKind,
)


class SceneError(ValueError):
    """Raised when scene parsing fails."""

    def __init__(self, message: str, line_num: Optional[int] = None):
        self.line_num = line_num
        if line_num is not None:
            message = f"Line {line_num}: {message}"
        super().__init__(message)


SHAPE_KINDS: Dict[str, ShapeKind] = {
    "box": BOX,
    "rect": BOX,
    "sticky": BOX,
    "text": BOX,
    "ellipse": ELLIPSE,
    "circle": ELLIPSE,
    "triangle": TRIANGLE,
    "star": STAR,
}


@dataclass
class Scene:
    """Result of parsing a scene: shapes and connectors in file order."""

    shapes: List[Shape] = field(default_factory=list)
    connectors: List[Connector] = field(default_factory=list)

    def to_board(self) -> Board:
        board = Board()
        for shape in self.shapes:
            board.add_shape(shape)
        for connector in self.connectors:
            board.add_connector(connector)
        return board


class SceneParser:
    """Parses scene text into shapes and connectors."""

    NUMBER = r"-?\d+(?:\.\d+)?"

    SHAPE_PATTERN = re.compile(
        rf"^shape\s+(\S+)\s+(\w+)\s+({NUMBER})\s+({NUMBER})\s+({NUMBER})\s+({NUMBER})"
        rf"(?:\s+rot=({NUMBER}))?$"
    )
    CONNECTOR_PATTERN = re.compile(r"^connector\s+(\S+)\s+(\S+)\s*->\s*(\S+)$")
    POINT_PATTERN = re.compile(rf"^({NUMBER}),({NUMBER})$")

    def parse(self, text: str) -> Scene:
        """
        Parse scene text.

        Shapes must be declared before the connectors that reference them.

        Args:
            text: Scene source

        Returns:
            Scene with shapes and connectors in file order

        Raises:
            SceneError: On malformed statements, unknown shape kinds or
                sides, duplicate ids, or references to undeclared shapes
        """
        scene = Scene()
        shapes: Dict[str, Shape] = {}
        connector_ids = set()

        for line_num, raw_line in enumerate(text.split("\n"), 1):
            line = raw_line.split("#", 1)[0].strip()
            if not line:
                continue

            if line.startswith("shape"):
                shape = self._parse_shape(line, line_num)
                if shape.shape_id in shapes:
                    raise SceneError(f"Duplicate shape id '{shape.shape_id}'", line_num)
                shapes[shape.shape_id] = shape
                scene.shapes.append(shape)
            elif line.startswith("connector"):
                connector = self._parse_connector(line, line_num, shapes)
                if connector.connector_id in connector_ids:
                    raise SceneError(
                        f"Duplicate connector id '{connector.connector_id}'", line_num
                    )
                connector_ids.add(connector.connector_id)
                scene.connectors.append(connector)
            else:
                raise SceneError(f"Unrecognized statement: '{line}'", line_num)

        return scene

    def _parse_shape(self, line: str, line_num: int) -> Shape:
        match = self.SHAPE_PATTERN.match(line)
        if not match:
            raise SceneError(f"Invalid shape statement: '{line}'", line_num)

        shape_id, kind_name, x, y, width, height, rotation = match.groups()
        kind = SHAPE_KINDS.get(kind_name.lower())
        if kind is None:
            raise SceneError(f"Unknown shape kind '{kind_name}'", line_num)
        if float(width) < 0 or float(height) < 0:
            raise SceneError(f"Shape '{shape_id}' has a negative size", line_num)

        geometry = ShapeGeometry(
            float(x), float(y), float(width), float(height), float(rotation or 0)
        )
        return Shape(shape_id, geometry, kind)

    def _parse_connector(
        self, line: str, line_num: int, shapes: Dict[str, Shape]
    ) -> Connector:
        match = self.CONNECTOR_PATTERN.match(line)
        if not match:
            raise SceneError(f"Invalid connector statement: '{line}'", line_num)

        connector_id, source, target = match.groups()
        return Connector(
            connector_id,
            self._parse_endpoint(source, line_num, shapes),
            self._parse_endpoint(target, line_num, shapes),
        )

    def _parse_endpoint(
        self, token: str, line_num: int, shapes: Dict[str, Shape]
    ) -> ConnectorEndpointSpec:
        point = self.POINT_PATTERN.match(token)
        if point:
            return ConnectorEndpointSpec(
                fallback_x=float(point.group(1)), fallback_y=float(point.group(2))
            )

        shape_id, _, side_name = token.partition(":")
        if shape_id not in shapes:
            raise SceneError(f"Unknown shape '{shape_id}'", line_num)

        anchor = None
        if side_name:
            try:
                anchor = AnchorSide(side_name.lower())
            except ValueError:
                raise SceneError(f"Unknown side '{side_name}'", line_num) from None
        # Free-point fallback if the shape later disappears
        center = shapes[shape_id].geometry.center
        return ConnectorEndpointSpec(
            object_id=shape_id, anchor=anchor, fallback_x=center.x, fallback_y=center.y
        )


def parse_scene(text: str) -> Scene:
    """Convenience function to parse scene text."""
    return SceneParser().parse(text)
