import math

import pytest

from robokit.motion import (
    AllowedFrameCollisions,
    CollisionSpecification,
    Constraints,
    LinearConstraint,
    MotionConfiguration,
    OrientationConstraint,
)


def _sample_constraints():
    return Constraints(
        linear_constraints=[LinearConstraint(1.5, 2.5), LinearConstraint(3.0, 4.0)],
        orientation_constraints=[OrientationConstraint(7.5)],
        collision_specifications=[
            CollisionSpecification(
                allows=[AllowedFrameCollisions("arm", "gripper"), AllowedFrameCollisions("a", "b")]
            ),
            CollisionSpecification(),
        ],
    )


def test_constraints_round_trip():
    original = _sample_constraints()
    assert Constraints.from_proto(original.to_proto()) == original


def test_constraints_message_fields():
    message = _sample_constraints().to_proto()
    assert message["linear_constraint"][0] == {
        "line_tolerance_mm": 1.5,
        "orientation_tolerance_degs": 2.5,
    }
    assert message["orientation_constraint"] == [{"orientation_tolerance_degs": 7.5}]
    assert message["collision_specification"][0]["allows"][0] == {
        "frame1": "arm",
        "frame2": "gripper",
    }
    assert message["collision_specification"][1] == {"allows": []}


def test_constraints_from_empty_message():
    assert Constraints.from_proto({}) == Constraints()


def test_constraints_preserve_order():
    message = _sample_constraints().to_proto()
    restored = Constraints.from_proto(message)
    assert [lc.line_tolerance_mm for lc in restored.linear_constraints] == [1.5, 3.0]


def test_motion_configuration_round_trip():
    config = MotionConfiguration(
        vision_services=[{"namespace": "rdk", "type": "service", "subtype": "vision", "name": "cam"}],
        position_polling_frequency_hz=2.0,
        obstacle_polling_frequency_hz=3.0,
        plan_deviation_m=0.5,
        linear_m_per_sec=1.25,
        angular_degs_per_sec=45.0,
    )
    assert MotionConfiguration.from_proto(config.to_proto()) == config


def test_motion_configuration_omits_unset_and_nan():
    config = MotionConfiguration(plan_deviation_m=math.nan, linear_m_per_sec=2.0)
    message = config.to_proto()
    assert message == {"vision_services": [], "linear_m_per_sec": 2.0}


def test_motion_configuration_from_empty_message():
    config = MotionConfiguration.from_proto({})
    assert config == MotionConfiguration()
    assert config.angular_degs_per_sec is None


def test_motion_configuration_equality_distinguishes_values():
    assert MotionConfiguration(plan_deviation_m=1.0) == MotionConfiguration(plan_deviation_m=1.0)
    assert not (MotionConfiguration(plan_deviation_m=1.0) == MotionConfiguration())


def test_motion_configuration_str_empty():
    assert str(MotionConfiguration()) == "{ }"


def test_motion_configuration_str_fields():
    text = str(MotionConfiguration(angular_degs_per_sec=45.0, linear_m_per_sec=2.0))
    assert text == "{ \tangular_degs_per_sec: 45,\n\tlinear_m_per_sec: 2,\n}"


def test_motion_configuration_str_lists_vision_services():
    text = str(MotionConfiguration(vision_services=[{"name": "cam"}]))
    assert text.startswith("{ \tvision_services: [\n\t\t")
    assert text.endswith("\t],\n}")
    assert "cam" in text


@pytest.mark.parametrize(
    "field_name",
    [
        "position_polling_frequency_hz",
        "obstacle_polling_frequency_hz",
        "plan_deviation_m",
        "linear_m_per_sec",
        "angular_degs_per_sec",
    ],
)
def test_each_optional_field_round_trips(field_name):
    config = MotionConfiguration(**{field_name: 9.0})
    message = config.to_proto()
    assert message[field_name] == 9.0
    assert MotionConfiguration.from_proto(message) == config