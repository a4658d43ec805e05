import numpy as np
import pytest

from robokit.flat_tensor import tensor_from_flat, tensor_to_flat

BASE_TYPES = [
    np.int8,
    np.uint8,
    np.int16,
    np.uint16,
    np.int32,
    np.uint32,
    np.int64,
    np.uint64,
    np.float32,
    np.float64,
]

SHAPES = [
    (4096,),
    (64, 64),
    (16, 16, 16),
    (8, 8, 8, 8),
    (1, 4096),
    (4096, 1),
    (1, 1, 4096),
    (1, 4096, 1),
    (4096, 1, 1),
    (1, 64, 64),
    (64, 1, 64),
    (64, 64, 1),
]


@pytest.mark.parametrize("dtype", BASE_TYPES)
def test_scalar_round_trip(dtype):
    tensor = np.array([42], dtype=dtype)
    result = tensor_from_flat(tensor_to_flat(tensor))
    assert result.dtype == np.dtype(dtype)
    assert result.shape == tensor.shape
    assert np.array_equal(result, tensor)


@pytest.mark.parametrize("dtype", BASE_TYPES)
@pytest.mark.parametrize("shape", SHAPES)
def test_shape_round_trip(dtype, shape):
    assert int(np.prod(shape)) == 4096
    data = np.arange(4096).astype(dtype)
    tensor = data.reshape(shape)
    result = tensor_from_flat(tensor_to_flat(tensor))
    assert result.dtype == np.dtype(dtype)
    assert result.shape == tensor.shape
    assert np.array_equal(result, tensor)


def test_int16_packs_into_words():
    flat = tensor_to_flat(np.array([1, 2, 3], dtype=np.int16))
    assert flat == {"shape": [3], "int16_tensor": {"data": [131073, 3]}}


def test_odd_uint16_count_decodes():
    flat = {"shape": [3], "uint16_tensor": {"data": [131073, 3]}}
    result = tensor_from_flat(flat)
    assert result.dtype == np.uint16
    assert result.tolist() == [1, 2, 3]


def test_negative_int16_round_trip():
    tensor = np.array([-1, -32768, 32767], dtype=np.int16)
    assert tensor_from_flat(tensor_to_flat(tensor)).tolist() == [-1, -32768, 32767]


def test_uint8_payload_is_bytes():
    flat = tensor_to_flat(np.array([[1, 2], [3, 255]], dtype=np.uint8))
    assert flat == {"shape": [2, 2], "uint8_tensor": {"data": b"\x01\x02\x03\xff"}}


def test_float_payload_key():
    flat = tensor_to_flat(np.array([0.5, 1.5], dtype=np.float32))
    assert flat == {"shape": [2], "float_tensor": {"data": [0.5, 1.5]}}


def test_double_payload_key():
    flat = tensor_to_flat(np.array([2.25], dtype=np.float64))
    assert flat == {"shape": [1], "double_tensor": {"data": [2.25]}}


def test_empty_data_rejected():
    with pytest.raises(ValueError, match="Empty or zero length"):
        tensor_from_flat({"shape": [1], "float_tensor": {"data": []}})


def test_empty_shape_rejected():
    with pytest.raises(ValueError, match="Empty or zero length"):
        tensor_from_flat({"shape": [], "int32_tensor": {"data": [1]}})


def test_size_mismatch_rejected():
    with pytest.raises(ValueError, match="does not match provided shape"):
        tensor_from_flat({"shape": [2, 2], "int32_tensor": {"data": [1, 2, 3]}})


def test_overflowing_shape_rejected():
    with pytest.raises(OverflowError):
        tensor_from_flat({"shape": [2**32, 2**32, 2], "int32_tensor": {"data": [1]}})


def test_missing_payload_rejected():
    with pytest.raises(ValueError, match="Unsupported tensor data type"):
        tensor_from_flat({"shape": [1]})