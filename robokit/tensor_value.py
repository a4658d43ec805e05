"""Encoding tensors as structured values and decoding them back.

A structured value is the Python form of a ``google.protobuf.Value``:
numbers are ``int`` or ``float``, lists are ``list`` and strings are
``str``. A tensor becomes nested lists, one level per dimension, with
numbers at the innermost level. ``uint8`` tensors are the exception: each
innermost stride is a single Base64 string, so a one-dimensional ``uint8``
tensor becomes just one string.
"""

from __future__ import annotations

import base64
import binascii
from numbers import Real
from typing import Any, List, Sequence

import numpy as np

from robokit.mlmodel import DataType, TensorInfo

__all__ = ["TensorDecodeError", "value_to_tensor", "tensor_to_value"]


class TensorDecodeError(ValueError):
    """A structured value could not be decoded into the tensor it describes."""


def _shape_error(name: str, expected: Sequence[int], actual: Sequence[int]) -> TensorDecodeError:
    prototype = "".join(f"{i}, " for i in expected)
    found = "".join(f"{i}, " for i in actual)
    return TensorDecodeError(
        f"After decoding tensor '{name}', the discovered dimensions do not match the shape "
        f"metadata:prototype [{prototype}], actual [{found}]"
    )


class _Walker:
    """Collects the elements and the discovered shape of a nested value."""

    def __init__(self, info: TensorInfo, accepts_strings: bool) -> None:
        self.info = info
        self.accepts_strings = accepts_strings
        self.shape: List[int] = []
        self.storage: List[float] = []

    def _extent(self, depth: int, size: int) -> None:
        if len(self.shape) == depth:
            self.shape.append(0)
        if self.shape[depth] == 0:
            self.shape[depth] = size
        elif self.shape[depth] != size:
            raise TensorDecodeError(f"Ragged tensor '{self.info.name}' at depth {depth}")

    def walk(self, value: Any, depth: int = 0) -> None:
        if isinstance(value, (list, tuple)):
            self._extent(depth, len(value))
            for child in value:
                self.walk(child, depth + 1)
        elif self.accepts_strings and isinstance(value, str):
            try:
                decoded = base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError):
                raise TensorDecodeError(
                    f"Failed to Base64 decode stride at depth {depth} in tensor "
                    f"'{self.info.name}'"
                ) from None
            self.storage.extend(decoded)
            self._extent(depth, len(decoded))
        elif isinstance(value, Real) and not isinstance(value, bool):
            self.storage.append(float(value))
        else:
            raise TensorDecodeError(
                f"Unsupported Struct type '{type(value).__name__}' in tensor '{self.info.name}'"
            )


def _fit_shape(info: TensorInfo, shape: List[int]) -> List[int]:
    """Check the discovered shape against the metadata, reshaping flat data if needed."""
    expected = [int(s) for s in info.shape]
    if not expected:
        return shape

    if len(shape) != len(expected):
        # A flat buffer may stand for structured data; nothing more complex is repaired.
        if len(shape) != 1:
            raise _shape_error(info.name, expected, shape)
        unbounded = expected.count(-1)
        if unbounded > 1:
            raise _shape_error(info.name, expected, shape)
        product = 1
        for extent in expected:
            product *= extent
        if unbounded:
            product = -product
        if unbounded == 0:
            if product < 0 or shape[0] != product:
                raise _shape_error(info.name, expected, shape)
            shape = list(expected)
        else:
            if product <= 0 or shape[0] % product != 0:
                raise _shape_error(info.name, expected, shape)
            extent = shape[0] // product
            shape = [extent if s == -1 else s for s in expected]

    def matches(spec: int, real: int) -> bool:
        if spec < 0 and spec != -1:
            return False
        if real < 1:
            return False
        return spec == -1 or spec == real

    if len(shape) != len(expected) or not all(map(matches, expected, shape)):
        raise _shape_error(info.name, expected, shape)
    return shape


def value_to_tensor(info: TensorInfo, value: Any) -> np.ndarray:
    """Decode ``value`` into a tensor of the type and shape ``info`` describes.

    Raises :class:`TensorDecodeError` if the value is ragged, holds something
    other than numbers (or Base64 strings for ``uint8``), or does not fit the
    shape in ``info``.
    """
    data_type = info.data_type
    if not isinstance(data_type, DataType):
        raise TensorDecodeError(
            f"Called [Infer] with unsupported tensor `data_type` of `{data_type}`"
        )
    walker = _Walker(info, accepts_strings=data_type is DataType.UINT8)
    walker.walk(value)
    shape = _fit_shape(info, walker.shape)
    if not shape:
        raise _shape_error(info.name, info.shape, shape)
    flat = np.array(walker.storage, dtype=np.float64)
    with np.errstate(invalid="ignore", over="ignore"):
        elements = flat.astype(data_type.numpy_dtype, casting="unsafe")
    try:
        return elements.reshape(shape)
    except ValueError:
        raise _shape_error(info.name, info.shape, shape) from None


def _encode_bytes(array: np.ndarray) -> Any:
    if array.ndim == 1:
        return base64.b64encode(np.ascontiguousarray(array).tobytes()).decode("ascii")
    return [_encode_bytes(sub) for sub in array]


def tensor_to_value(tensor: np.ndarray) -> Any:
    """Encode ``tensor`` as a structured value.

    A zero-dimensional tensor has no structured form and gives None.
    """
    array = np.asarray(tensor)
    data_type = DataType.of_tensor(array)
    if array.ndim == 0:
        return None
    if data_type is DataType.UINT8:
        return _encode_bytes(array)
    return array.astype(np.float64).tolist()