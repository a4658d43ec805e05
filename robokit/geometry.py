"""Geometries, poses and geographic obstacles with their message form.

Messages are plain dictionaries keyed by the field names of the wire schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from robokit.orientation import OrientationConfig


class GeometryType(Enum):
    BOX = 0
    SPHERE = 1
    CAPSULE = 2
    POINT = 3
    UNKNOWN = 4


@dataclass(frozen=True)
class Box:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Sphere:
    radius: float = 0.0


@dataclass(frozen=True)
class Capsule:
    radius: float = 0.0
    length: float = 0.0


GeometrySpecifics = Optional[Union[Box, Sphere, Capsule]]


@dataclass(frozen=True)
class Coordinates:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class PoseOrientation:
    o_x: float = 0.0
    o_y: float = 0.0
    o_z: float = 0.0


def _num(proto: Mapping[str, Any], key: str) -> float:
    return float(proto.get(key, 0.0))


@dataclass(frozen=True)
class Pose:
    coordinates: Coordinates = field(default_factory=Coordinates)
    orientation: PoseOrientation = field(default_factory=PoseOrientation)
    theta: float = 0.0

    def to_proto(self) -> Dict[str, float]:
        """Return the ``Pose`` message for this pose."""
        return {
            "x": self.coordinates.x,
            "y": self.coordinates.y,
            "z": self.coordinates.z,
            "o_x": self.orientation.o_x,
            "o_y": self.orientation.o_y,
            "o_z": self.orientation.o_z,
            "theta": self.theta,
        }

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "Pose":
        """Build a pose from a ``Pose`` message."""
        return Pose(
            coordinates=Coordinates(_num(proto, "x"), _num(proto, "y"), _num(proto, "z")),
            orientation=PoseOrientation(_num(proto, "o_x"), _num(proto, "o_y"), _num(proto, "o_z")),
            theta=_num(proto, "theta"),
        )

    def __str__(self) -> str:
        c, o = self.coordinates, self.orientation
        return (
            f"{{ coordinates: {{ x: {c.x:g}, y: {c.y:g}, z: {c.z:g}}},\n"
            f"orientation: {{ o_x: {o.o_x:g}, o_y: {o.o_y:g}, o_z: {o.o_z:g}}},\n"
            f"theta: {self.theta:g}}}"
        )


@dataclass(eq=False)
class GeometryConfig:
    """A labelled geometry placed at a pose."""

    geometry_type: GeometryType = GeometryType.UNKNOWN
    pose: Pose = field(default_factory=Pose)
    specifics: GeometrySpecifics = None
    orientation_config: OrientationConfig = field(default_factory=OrientationConfig)
    label: str = ""

    def __eq__(self, other: object) -> bool:
        # Theta and the orientation config take no part in equality.
        if not isinstance(other, GeometryConfig):
            return NotImplemented
        return (
            self.pose.coordinates == other.pose.coordinates
            and self.pose.orientation == other.pose.orientation
            and self.label == other.label
            and self.geometry_type == other.geometry_type
            and self.specifics == other.specifics
        )

    __hash__ = None  # type: ignore[assignment]

    def sphere_proto(self) -> Dict[str, float]:
        if not isinstance(self.specifics, Sphere):
            raise ValueError(
                "Couldn't convert geometry config to sphere proto; sphere specifics not found"
            )
        return {"radius_mm": self.specifics.radius}

    def box_proto(self) -> Dict[str, Dict[str, float]]:
        if not isinstance(self.specifics, Box):
            raise ValueError(
                "Couldn't convert geometry config to box proto; box specifics not found"
            )
        b = self.specifics
        return {"dims_mm": {"x": b.x, "y": b.y, "z": b.z}}

    def capsule_proto(self) -> Dict[str, float]:
        if not isinstance(self.specifics, Capsule):
            raise ValueError(
                "Couldn't convert geometry config to capsule proto; capsule specifics not found"
            )
        return {"radius_mm": self.specifics.radius, "length_mm": self.specifics.length}

    def pose_proto(self) -> Dict[str, float]:
        return self.pose.to_proto()

    def to_proto(self) -> Dict[str, Any]:
        """Return the ``Geometry`` message for this configuration."""
        message: Dict[str, Any] = {"label": self.label, "center": self.pose_proto()}
        kind = self.geometry_type
        if kind is GeometryType.BOX:
            message["box"] = self.box_proto()
        elif kind is GeometryType.SPHERE:
            message["sphere"] = self.sphere_proto()
        elif kind is GeometryType.POINT:
            message["sphere"] = {"radius_mm": 0.0}
        elif kind is GeometryType.CAPSULE:
            message["capsule"] = self.capsule_proto()
        elif self.pose.coordinates == Coordinates():
            message["box"] = self.box_proto()
        else:
            message["sphere"] = self.sphere_proto()
        return message

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "GeometryConfig":
        """Build a configuration from a ``Geometry`` message."""
        cfg = GeometryConfig(
            pose=Pose.from_proto(proto.get("center") or {}), label=proto.get("label", "")
        )
        if "box" in proto:
            dims = (proto["box"] or {}).get("dims_mm") or {}
            cfg.geometry_type = GeometryType.BOX
            cfg.specifics = Box(_num(dims, "x"), _num(dims, "y"), _num(dims, "z"))
        elif "sphere" in proto:
            radius = _num(proto["sphere"] or {}, "radius_mm")
            cfg.geometry_type = GeometryType.POINT if radius == 0 else GeometryType.SPHERE
            cfg.specifics = Sphere(radius)
        elif "capsule" in proto:
            body = proto["capsule"] or {}
            cfg.geometry_type = GeometryType.CAPSULE
            cfg.specifics = Capsule(_num(body, "radius_mm"), _num(body, "length_mm"))
        else:
            raise ValueError("Geometry type is not supported")
        return cfg

    @staticmethod
    def from_geometries_response(proto: Mapping[str, Any]) -> List["GeometryConfig"]:
        """Build configurations from a ``GetGeometriesResponse`` message."""
        return [GeometryConfig.from_proto(g) for g in proto.get("geometries", [])]


@dataclass(frozen=True)
class GeoPoint:
    longitude: float = 0.0
    latitude: float = 0.0

    def to_proto(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "GeoPoint":
        return GeoPoint(longitude=_num(proto, "longitude"), latitude=_num(proto, "latitude"))

    def __str__(self) -> str:
        return f"{{ latitude: {self.latitude:g}, longitude: {self.longitude:g}}}\n"


@dataclass
class GeoObstacle:
    location: GeoPoint = field(default_factory=GeoPoint)
    geometries: List[GeometryConfig] = field(default_factory=list)

    def to_proto(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_proto(),
            "geometries": [g.to_proto() for g in self.geometries],
        }

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "GeoObstacle":
        return GeoObstacle(
            location=GeoPoint.from_proto(proto.get("location") or {}),
            geometries=[GeometryConfig.from_proto(g) for g in proto.get("geometries", [])],
        )