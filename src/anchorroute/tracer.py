"""
Debug tracing infrastructure for anchorroute.

When a RouteTrace is passed to the selector, it records every candidate
pair the selector looked at: which anchors were tried, how each score term
came out, which pairs were skipped, and which pair won.

This is primarily useful for:
1. Understanding why a connector picked a particular pair of anchors
2. Debugging flicker (comparing traces from consecutive frames)
3. Writing targeted tests for scoring decisions

Usage:
    >>> trace = RouteTrace(connector_id="c1")
    >>> result = solve(from_candidates, to_candidates, obstacles, trace=trace)
    >>> print(trace.summary())
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .models import AnchorSide, ResolvedEndpoint


def _describe(endpoint: ResolvedEndpoint) -> str:
    if not endpoint.connected:
        return f"free({endpoint.point.x:.12g},{endpoint.point.y:.12g})"
    side = endpoint.anchor.value if endpoint.anchor else "?"
    return f"{endpoint.bound_object_id}:{side}"


@dataclass
class PairEvaluation:
    """
    Score breakdown for one (from, to) candidate pair.

    Attributes:
        from_anchor: Anchor of the from candidate (None when free)
        to_anchor: Anchor of the to candidate (None when free)
        from_label: Short description of the from candidate
        to_label: Short description of the to candidate
        obstacle_count: Obstacles left after culling for this pair
        route_score: Intersection/bend/length score of the synthesized route
        alignment_penalty: Direction alignment penalty of the pair
        stability_penalty: Penalty for leaving the preferred anchors
        same_object_penalty: Penalty for both ends on one shape
        bends: Bends in the synthesized route
        selected: True if this pair was the best so far when evaluated
    """

    from_anchor: Optional[AnchorSide]
    to_anchor: Optional[AnchorSide]
    from_label: str
    to_label: str
    obstacle_count: int
    route_score: float
    alignment_penalty: float
    stability_penalty: float
    same_object_penalty: float
    bends: int
    selected: bool = False

    @property
    def total(self) -> float:
        return (
            self.route_score
            + self.alignment_penalty
            + self.stability_penalty
            + self.same_object_penalty
        )

    def __str__(self) -> str:
        marker = "*" if self.selected else " "
        return (
            f"{marker} {self.from_label} -> {self.to_label}: "
            f"total={self.total:.1f} route={self.route_score:.1f} "
            f"align={self.alignment_penalty:.1f} "
            f"stability={self.stability_penalty:g} "
            f"same={self.same_object_penalty:g} "
            f"bends={self.bends} obstacles={self.obstacle_count}"
        )


@dataclass
class RouteTrace:
    """
    Complete trace of one selector run.

    Attributes:
        connector_id: Connector being routed (informational)
        evaluations: Every evaluated pair, in evaluation order
        skipped: Pairs skipped as degenerate self-loops
        used_previous: True if no pair was evaluable and the previous
            result was returned
    """

    connector_id: str = ""
    evaluations: List[PairEvaluation] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    used_previous: bool = False

    def add_evaluation(
        self,
        from_endpoint: ResolvedEndpoint,
        to_endpoint: ResolvedEndpoint,
        obstacle_count: int,
        route_score: float,
        alignment_penalty: float,
        stability_penalty: float,
        same_object_penalty: float,
        bends: int,
    ) -> PairEvaluation:
        """Record one evaluated pair and return the record."""
        evaluation = PairEvaluation(
            from_anchor=from_endpoint.anchor,
            to_anchor=to_endpoint.anchor,
            from_label=_describe(from_endpoint),
            to_label=_describe(to_endpoint),
            obstacle_count=obstacle_count,
            route_score=route_score,
            alignment_penalty=alignment_penalty,
            stability_penalty=stability_penalty,
            same_object_penalty=same_object_penalty,
            bends=bends,
        )
        self.evaluations.append(evaluation)
        return evaluation

    def add_skip(self, from_endpoint: ResolvedEndpoint, to_endpoint: ResolvedEndpoint):
        self.skipped.append(f"{_describe(from_endpoint)} -> {_describe(to_endpoint)}")

    def mark_selected(self, evaluation: PairEvaluation) -> None:
        """Mark ``evaluation`` as the current best, clearing any earlier mark."""
        for item in self.evaluations:
            item.selected = False
        evaluation.selected = True

    @property
    def winner(self) -> Optional[PairEvaluation]:
        for evaluation in self.evaluations:
            if evaluation.selected:
                return evaluation
        return None

    def summary(self) -> str:
        """Short human-readable summary of the trace."""
        lines = [
            "=" * 60,
            f"ROUTE TRACE {self.connector_id}".rstrip(),
            "=" * 60,
            f"Pairs evaluated: {len(self.evaluations)}",
            f"Pairs skipped: {len(self.skipped)}",
        ]
        winner = self.winner
        if winner is not None:
            lines.append(f"Selected: {winner.from_label} -> {winner.to_label}")
            lines.append(f"Score: {winner.total:.1f}")
        elif self.used_previous:
            lines.append("Selected: previous result (nothing evaluable)")
        return "\n".join(lines)

    def dump(self) -> str:
        """Summary followed by every evaluation, best marked with '*'."""
        lines = [self.summary(), "", "EVALUATIONS:", "-" * 40]
        lines.extend(str(evaluation) for evaluation in self.evaluations)
        if self.skipped:
            lines.extend(["", "SKIPPED:", "-" * 40])
            lines.extend(self.skipped)
        return "\n".join(lines)
