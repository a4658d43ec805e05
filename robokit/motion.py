"""Motion-planning constraints and configuration with their message form.

Messages are plain dictionaries keyed by the field names of the wire schema.
Resource names, such as the vision services in a :class:`MotionConfiguration`,
are carried as ``ResourceName`` messages and passed through unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

__all__ = [
    "LinearConstraint",
    "OrientationConstraint",
    "AllowedFrameCollisions",
    "CollisionSpecification",
    "Constraints",
    "MotionConfiguration",
]


@dataclass
class LinearConstraint:
    """The moved component should travel in a line to its goal."""

    line_tolerance_mm: float = 0.0
    orientation_tolerance_degs: float = 0.0


@dataclass
class OrientationConstraint:
    """The moved component may not turn beyond a threshold."""

    orientation_tolerance_degs: float = 0.0


@dataclass
class AllowedFrameCollisions:
    """A pair of frames that are allowed to collide."""

    frame1: str = ""
    frame2: str = ""


@dataclass
class CollisionSpecification:
    """Selectively relaxes obstacle avoidance for parts of the robot."""

    allows: List[AllowedFrameCollisions] = field(default_factory=list)


@dataclass
class Constraints:
    """All constraints passed to motion planning."""

    linear_constraints: List[LinearConstraint] = field(default_factory=list)
    orientation_constraints: List[OrientationConstraint] = field(default_factory=list)
    collision_specifications: List[CollisionSpecification] = field(default_factory=list)

    def to_proto(self) -> Dict[str, Any]:
        """Return the ``Constraints`` message for these constraints."""
        return {
            "linear_constraint": [
                {
                    "line_tolerance_mm": lc.line_tolerance_mm,
                    "orientation_tolerance_degs": lc.orientation_tolerance_degs,
                }
                for lc in self.linear_constraints
            ],
            "orientation_constraint": [
                {"orientation_tolerance_degs": oc.orientation_tolerance_degs}
                for oc in self.orientation_constraints
            ],
            "collision_specification": [
                {"allows": [{"frame1": a.frame1, "frame2": a.frame2} for a in cs.allows]}
                for cs in self.collision_specifications
            ],
        }

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "Constraints":
        """Build constraints from a ``Constraints`` message."""
        return Constraints(
            linear_constraints=[
                LinearConstraint(
                    line_tolerance_mm=float(lc.get("line_tolerance_mm", 0.0)),
                    orientation_tolerance_degs=float(lc.get("orientation_tolerance_degs", 0.0)),
                )
                for lc in proto.get("linear_constraint", [])
            ],
            orientation_constraints=[
                OrientationConstraint(
                    orientation_tolerance_degs=float(oc.get("orientation_tolerance_degs", 0.0))
                )
                for oc in proto.get("orientation_constraint", [])
            ],
            collision_specifications=[
                CollisionSpecification(
                    allows=[
                        AllowedFrameCollisions(
                            frame1=a.get("frame1", ""), frame2=a.get("frame2", "")
                        )
                        for a in cs.get("allows", [])
                    ]
                )
                for cs in proto.get("collision_specification", [])
            ],
        )


_OPTIONAL_FIELDS = (
    "position_polling_frequency_hz",
    "obstacle_polling_frequency_hz",
    "plan_deviation_m",
    "linear_m_per_sec",
    "angular_degs_per_sec",
)

_DISPLAY_ORDER = (
    "angular_degs_per_sec",
    "linear_m_per_sec",
    "obstacle_polling_frequency_hz",
    "plan_deviation_m",
    "position_polling_frequency_hz",
)


@dataclass
class MotionConfiguration:
    """Optional settings for motion requests.

    A value of None (or NaN, when encoding) leaves the setting unset.
    """

    vision_services: List[Dict[str, Any]] = field(default_factory=list)
    position_polling_frequency_hz: Optional[float] = None
    obstacle_polling_frequency_hz: Optional[float] = None
    plan_deviation_m: Optional[float] = None
    linear_m_per_sec: Optional[float] = None
    angular_degs_per_sec: Optional[float] = None

    def to_proto(self) -> Dict[str, Any]:
        """Return the ``MotionConfiguration`` message for this configuration."""
        message: Dict[str, Any] = {"vision_services": [dict(n) for n in self.vision_services]}
        for name in _OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None and not math.isnan(value):
                message[name] = value
        return message

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "MotionConfiguration":
        """Build a configuration from a ``MotionConfiguration`` message."""
        settings = {
            name: float(proto[name])
            for name in _OPTIONAL_FIELDS
            if proto.get(name) is not None
        }
        return MotionConfiguration(
            vision_services=[dict(n) for n in proto.get("vision_services", [])],
            **settings,
        )

    def __str__(self) -> str:
        parts = ["{ "]
        if self.vision_services:
            parts.append("\tvision_services: [\n")
            parts.extend(f"\t\t{name},\n" for name in self.vision_services)
            parts.append("\t],\n")
        for name in _DISPLAY_ORDER:
            value = getattr(self, name)
            if value is not None:
                parts.append(f"\t{name}: {value:g},\n")
        parts.append("}")
        return "".join(parts)