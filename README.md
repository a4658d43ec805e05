# robokit

Data types and message encodings for robot services. Every type converts to
and from its message form with `to_proto()` / `from_proto()`; messages are
plain Python dictionaries keyed by the wire schema's field names.

## Modules

- **`robokit.orientation`** – `AxisAngles`, `EulerAngles`,
  `OrientationVector`, `OrientationVectorDegrees`, `Quaternion` and
  `Translation`, plus `OrientationConfig`, which pairs an orientation with its
  `OrientationType` and defaults to the identity quaternion. An
  `Orientation` message with `no_orientation` decodes to that identity; an
  unknown kind raises `ValueError`.
- **`robokit.geometry`** – `Box`, `Sphere`, `Capsule`, `Coordinates`,
  `PoseOrientation`, `Pose`, `GeometryConfig` (with its `GeometryType`),
  `GeoPoint` and `GeoObstacle`. A sphere of radius zero decodes as a
  `POINT`. `GeometryConfig.from_geometries_response` reads the geometries of a
  `GetGeometriesResponse` message.
- **`robokit.motion`** – `Constraints` (built from `LinearConstraint`,
  `OrientationConstraint` and `CollisionSpecification` /
  `AllowedFrameCollisions`) and `MotionConfiguration`, whose optional settings
  are left out of the message when `None` or NaN.
- **`robokit.mlmodel`** – the abstract `MLModelService` with `infer()` and
  `metadata()`, the `Metadata`, `TensorInfo` and `TensorFile` descriptions,
  and the `DataType` and `LabelType` enums. Tensors are numpy arrays.
- **`robokit.tensor_value`** – `tensor_to_value()` turns a tensor into nested
  lists of numbers (`uint8` strides become Base64 strings);
  `value_to_tensor()` decodes them back, checking the shape against a
  `TensorInfo` (a flat buffer is reshaped when it fits, with at most one `-1`
  extent) and raising `TensorDecodeError` otherwise.
- **`robokit.flat_tensor`** – `tensor_to_flat()` and `tensor_from_flat()`
  convert between tensors and `FlatTensor` messages holding one typed buffer.
- **`robokit.mlmodel_server`** – `handle_infer()` and `handle_metadata()`
  answer `InferRequest` and `MetadataRequest` messages against an
  `MLModelService`, or a mapping of names to services, raising `RequestError`
  with a `StatusCode` when a request cannot be served.

## Installation

```
pip install robokit
```

## Example

```python
import numpy as np

from robokit.mlmodel import DataType, TensorInfo
from robokit.tensor_value import tensor_to_value, value_to_tensor

tensor = np.arange(6, dtype=np.float32).reshape(2, 3)
encoded = tensor_to_value(tensor)

info = TensorInfo(name="input", description="", data_type=DataType.FLOAT32, shape=[2, 3])
decoded = value_to_tensor(info, encoded)
assert (decoded == tensor).all()
```

Flat encoding works the same way:

```python
from robokit.flat_tensor import tensor_from_flat, tensor_to_flat

flat = tensor_to_flat(tensor)
assert (tensor_from_flat(flat) == tensor).all()
```

## What it does not do

robokit has no network layer: it opens no connections, runs no RPC server
and has no client that talks to a remote model. The request handlers take and
return dictionaries, and wiring them to a transport is left to the caller.
There is no resource registry, and no motion service interface for moving
components; only the motion constraint and configuration types are provided.

## Tests

```
pip install robokit[test]
pytest
```