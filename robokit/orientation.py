"""Orientation representations and their protocol-message form.

Messages are plain dictionaries keyed by the field names of the wire schema.
An ``Orientation`` message carries exactly one of the keys ``axis_angles``,
``euler_angles``, ``quaternion``, ``vector_degrees``, ``vector_radians`` or
``no_orientation``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Union


class OrientationType(Enum):
    """The kinds of orientation an :class:`OrientationConfig` can hold."""

    AXIS_ANGLES = 0
    ORIENTATION_VECTOR = 1
    ORIENTATION_VECTOR_DEGREES = 2
    EULER_ANGLES = 3
    QUATERNION = 4


@dataclass(frozen=True)
class AxisAngles:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class EulerAngles:
    yaw: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0


@dataclass(frozen=True)
class OrientationVector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class OrientationVectorDegrees:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


@dataclass(frozen=True)
class Translation:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_proto(self) -> Dict[str, float]:
        """Return the ``Translation`` message for this translation."""
        return {"x": self.x, "y": self.y, "z": self.z}


Orientation = Union[
    AxisAngles, OrientationVector, OrientationVectorDegrees, EulerAngles, Quaternion
]

_PROTO_KEYS = {
    OrientationType.AXIS_ANGLES: ("axis_angles", AxisAngles),
    OrientationType.ORIENTATION_VECTOR: ("vector_radians", OrientationVector),
    OrientationType.ORIENTATION_VECTOR_DEGREES: ("vector_degrees", OrientationVectorDegrees),
    OrientationType.EULER_ANGLES: ("euler_angles", EulerAngles),
    OrientationType.QUATERNION: ("quaternion", Quaternion),
}

_NO_ORIENTATION_KEY = "no_orientation"


def _identity() -> Quaternion:
    return Quaternion(x=0.0, y=0.0, z=0.0, w=1.0)


def _read(cls: type, body: Mapping[str, Any]) -> Orientation:
    return cls(**{f.name: float(body.get(f.name, 0.0)) for f in fields(cls)})


@dataclass
class OrientationConfig:
    """An orientation together with the kind it is expressed in.

    The default is the identity quaternion, meaning no rotation.
    """

    type: OrientationType = OrientationType.QUATERNION
    value: bytes = b""
    orientation: Orientation = field(default_factory=_identity)

    def to_proto(self) -> Dict[str, Dict[str, float]]:
        """Return the ``Orientation`` message for this configuration."""
        try:
            key, cls = _PROTO_KEYS[self.type]
        except KeyError:
            raise ValueError("orientation type not known") from None
        if not isinstance(self.orientation, cls):
            raise TypeError(
                f"orientation {self.orientation!r} does not match type {self.type.name}"
            )
        return {key: asdict(self.orientation)}

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "OrientationConfig":
        """Build a configuration from an ``Orientation`` message."""
        for kind, (key, cls) in _PROTO_KEYS.items():
            if key in proto:
                return OrientationConfig(type=kind, orientation=_read(cls, proto[key] or {}))
        if _NO_ORIENTATION_KEY in proto:
            return OrientationConfig()
        raise ValueError("orientation type not known")