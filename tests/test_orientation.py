import pytest

from robokit.orientation import (
    AxisAngles,
    EulerAngles,
    OrientationConfig,
    OrientationType,
    OrientationVector,
    OrientationVectorDegrees,
    Quaternion,
    Translation,
)


def test_default_is_identity_quaternion():
    cfg = OrientationConfig()
    assert cfg.type is OrientationType.QUATERNION
    assert cfg.orientation == Quaternion(x=0.0, y=0.0, z=0.0, w=1.0)


def test_default_to_proto_uses_quaternion_key():
    assert OrientationConfig().to_proto() == {
        "quaternion": {"x": 0.0, "y": 0.0, "z": 0.0, "w": 1.0}
    }


@pytest.mark.parametrize(
    "kind, orientation, key",
    [
        (OrientationType.AXIS_ANGLES, AxisAngles(1.0, 2.0, 3.0, 4.0), "axis_angles"),
        (OrientationType.ORIENTATION_VECTOR, OrientationVector(0.5, 0.25, 1.0, 2.0), "vector_radians"),
        (
            OrientationType.ORIENTATION_VECTOR_DEGREES,
            OrientationVectorDegrees(0.0, 0.0, 1.0, 90.0),
            "vector_degrees",
        ),
        (OrientationType.EULER_ANGLES, EulerAngles(yaw=1.0, roll=2.0, pitch=3.0), "euler_angles"),
        (OrientationType.QUATERNION, Quaternion(0.1, 0.2, 0.3, 0.9), "quaternion"),
    ],
)
def test_round_trip(kind, orientation, key):
    cfg = OrientationConfig(type=kind, orientation=orientation)
    proto = cfg.to_proto()
    assert list(proto) == [key]
    back = OrientationConfig.from_proto(proto)
    assert back.type is kind
    assert back.orientation == orientation


def test_euler_fields_in_proto():
    cfg = OrientationConfig(
        type=OrientationType.EULER_ANGLES, orientation=EulerAngles(yaw=1.0, roll=2.0, pitch=3.0)
    )
    assert cfg.to_proto()["euler_angles"] == {"yaw": 1.0, "roll": 2.0, "pitch": 3.0}


def test_no_orientation_gives_identity():
    cfg = OrientationConfig.from_proto({"no_orientation": {}})
    assert cfg.type is OrientationType.QUATERNION
    assert cfg.orientation == Quaternion(w=1.0)


def test_missing_fields_default_to_zero():
    cfg = OrientationConfig.from_proto({"axis_angles": {"theta": 2.0}})
    assert cfg.orientation == AxisAngles(x=0.0, y=0.0, z=0.0, theta=2.0)


def test_unset_type_raises():
    with pytest.raises(ValueError, match="orientation type not known"):
        OrientationConfig.from_proto({})


def test_mismatched_orientation_raises():
    cfg = OrientationConfig(type=OrientationType.AXIS_ANGLES, orientation=Quaternion(w=1.0))
    with pytest.raises(TypeError):
        cfg.to_proto()


def test_translation_to_proto():
    t = Translation(x=1.5, y=-2.0, z=3.25)
    assert t.to_proto() == {"x": 1.5, "y": -2.0, "z": 3.25}