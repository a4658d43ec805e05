"""Conversion between tensors and the ``FlatTensor`` message.

A ``FlatTensor`` message is a dictionary holding a ``shape`` list and
exactly one typed payload such as ``{"float_tensor": {"data": [...]}}``.
``int8`` and ``uint8`` payloads are ``bytes``. ``int16`` and ``uint16``
payloads are lists of 32-bit words, each holding two little-endian
elements, zero filled when the element count is odd. All other payloads are
plain lists of numbers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

import numpy as np

from robokit.mlmodel import DataType

__all__ = ["tensor_to_flat", "tensor_from_flat"]

_SIZE_MAX = 2**64 - 1

_PAYLOAD_KEYS: Tuple[Tuple[str, DataType], ...] = (
    ("int8_tensor", DataType.INT8),
    ("uint8_tensor", DataType.UINT8),
    ("int16_tensor", DataType.INT16),
    ("uint16_tensor", DataType.UINT16),
    ("int32_tensor", DataType.INT32),
    ("uint32_tensor", DataType.UINT32),
    ("int64_tensor", DataType.INT64),
    ("uint64_tensor", DataType.UINT64),
    ("float_tensor", DataType.FLOAT32),
    ("double_tensor", DataType.FLOAT64),
)
_KEY_FOR_TYPE = {data_type: key for key, data_type in _PAYLOAD_KEYS}

_BYTE_TYPES = {DataType.INT8, DataType.UINT8}
_SHORT_TYPES = {DataType.INT16, DataType.UINT16}


def _little_endian(data_type: DataType) -> np.dtype:
    return data_type.numpy_dtype.newbyteorder("<")


def _encode_payload(data_type: DataType, elements: np.ndarray) -> Any:
    if data_type in _BYTE_TYPES:
        return elements.tobytes()
    if data_type in _SHORT_TYPES:
        raw = elements.astype(_little_endian(data_type)).tobytes()
        word_count = (elements.size + 1) * 2 // 4
        raw = raw.ljust(word_count * 4, b"\x00")
        return np.frombuffer(raw, dtype="<u4").tolist()
    return elements.tolist()


def _decode_payload(data_type: DataType, data: Any) -> np.ndarray:
    if data_type in _BYTE_TYPES:
        return np.frombuffer(bytes(data), dtype=data_type.numpy_dtype).copy()
    if data_type in _SHORT_TYPES:
        words = np.array(list(data), dtype="<u4")
        return np.frombuffer(words.tobytes(), dtype=_little_endian(data_type)).astype(
            data_type.numpy_dtype
        )
    return np.array(list(data), dtype=data_type.numpy_dtype)


def tensor_to_flat(tensor: np.ndarray) -> Dict[str, Any]:
    """Return the ``FlatTensor`` message holding ``tensor``."""
    array = np.asarray(tensor)
    data_type = DataType.of_tensor(array)
    elements = np.ascontiguousarray(array).reshape(-1)
    return {
        "shape": [int(s) for s in array.shape],
        _KEY_FOR_TYPE[data_type]: {"data": _encode_payload(data_type, elements)},
    }


def _build(data_type: DataType, data: Any, shape: List[int]) -> np.ndarray:
    elements = _decode_payload(data_type, data)
    size = elements.size
    if size == 0 or not shape:
        raise ValueError("Empty or zero length data or shape")

    expected = 1
    for extent in shape:
        expected *= extent
        if expected > _SIZE_MAX:
            raise OverflowError(
                "Provided shape information exceeds bounds of size_t when linearized"
            )

    # An odd number of 16-bit elements arrives with one zero element of padding.
    if data_type in _SHORT_TYPES and expected == size - 1:
        size -= 1
        elements = elements[:size]

    if size != expected:
        raise ValueError("Number of provided data elements does not match provided shape")
    return elements.reshape(shape)


def tensor_from_flat(flat: Mapping[str, Any]) -> np.ndarray:
    """Build a tensor from a ``FlatTensor`` message.

    Raises ValueError for an empty payload or shape, for a payload whose size
    does not match the shape, or for a message without a known payload, and
    OverflowError for a shape too large to linearize.
    """
    shape = [int(s) for s in flat.get("shape", [])]
    for key, data_type in _PAYLOAD_KEYS:
        if key in flat:
            payload = flat[key] or {}
            return _build(data_type, payload.get("data", b"" if data_type in _BYTE_TYPES else []), shape)
    raise ValueError("Unsupported tensor data type")