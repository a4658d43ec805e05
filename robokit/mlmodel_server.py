"""Serving side of the machine-learning model service.

Requests and responses are plain dictionaries keyed by the field names of the
wire schema. An ``InferRequest`` carries ``name``, an optional ``extra`` map
and exactly one of ``input_data`` (a mapping of tensor names to structured
values) or ``input_tensors`` (``{"tensors": {name: FlatTensor}}``). A
``MetadataRequest`` carries ``name`` and an optional ``extra`` map.

The ``service`` argument of the handlers is either the model service itself
or a mapping from resource names to services, looked up by the request's
``name``.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from robokit.flat_tensor import tensor_from_flat, tensor_to_flat
from robokit.mlmodel import AttributeMap, DataType, MLModelService, NamedTensors
from robokit.tensor_value import TensorDecodeError, tensor_to_value, value_to_tensor

__all__ = ["StatusCode", "RequestError", "handle_infer", "handle_metadata"]

ServiceSource = Union[MLModelService, Mapping[str, MLModelService], None]


class StatusCode(Enum):
    """Status codes a failed request is reported with."""

    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    INTERNAL = 13


class RequestError(Exception):
    """A request could not be served; ``code`` says why."""

    def __init__(self, code: StatusCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@contextmanager
def _guard(method: str) -> Iterator[None]:
    try:
        yield
    except RequestError:
        raise
    except Exception as ex:
        raise RequestError(
            StatusCode.INTERNAL, f"[{method}]: Failed with exception: {ex}"
        ) from ex


def _check_request(method: str, request: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if request is None:
        raise RequestError(StatusCode.INVALID_ARGUMENT, f"Called [{method}] without a request")
    return request


def _resolve(service: ServiceSource, name: str) -> MLModelService:
    found: Optional[MLModelService]
    if isinstance(service, Mapping):
        found = service.get(name)
    else:
        found = service
    if found is None:
        raise RequestError(StatusCode.UNKNOWN, f"resource not found: {name}")
    return found


def _extra(request: Mapping[str, Any]) -> Optional[AttributeMap]:
    extra = request.get("extra")
    return dict(extra) if extra is not None else None


def _decode_values(
    model: MLModelService, fields: Mapping[str, Any], extra: Optional[AttributeMap]
) -> NamedTensors:
    inputs: NamedTensors = {}
    # Inputs the metadata does not describe cannot be decoded and are skipped.
    for info in model.metadata(extra).inputs:
        if info.name not in fields:
            continue
        if not isinstance(info.data_type, DataType):
            raise RequestError(
                StatusCode.INVALID_ARGUMENT,
                f"Called [Infer] with unsupported tensor `data_type` of `{info.data_type}`",
            )
        try:
            inputs[info.name] = value_to_tensor(info, fields[info.name])
        except TensorDecodeError as ex:
            raise RequestError(StatusCode.INTERNAL, str(ex)) from ex
    return inputs


def _decode_flat(
    model: MLModelService, tensors: Mapping[str, Any], extra: Optional[AttributeMap]
) -> NamedTensors:
    inputs: NamedTensors = {}
    for info in model.metadata(extra).inputs:
        if info.name not in tensors:
            continue
        tensor = tensor_from_flat(tensors[info.name])
        found = DataType.of_tensor(tensor)
        if found != info.data_type:
            expected = getattr(info.data_type, "value", info.data_type)
            raise RequestError(
                StatusCode.INVALID_ARGUMENT,
                f"Tensor input `{info.name}` was the wrong type; expected type "
                f"{expected} but got type {found.value}",
            )
        inputs[info.name] = tensor
    return inputs


def handle_infer(service: ServiceSource, request: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Serve an ``InferRequest`` and return the ``InferResponse``.

    Outputs are returned in the same form the inputs came in. Raises
    :class:`RequestError` when the request is malformed, the resource is
    missing, an input cannot be decoded or the model fails.
    """
    with _guard("Infer"):
        request = _check_request("Infer", request)
        model = _resolve(service, request.get("name", ""))

        has_data = request.get("input_data") is not None
        has_tensors = request.get("input_tensors") is not None
        if has_data and has_tensors:
            raise RequestError(
                StatusCode.INVALID_ARGUMENT, "Called [Infer] with both forms of input"
            )
        if not has_data and not has_tensors:
            raise RequestError(StatusCode.INVALID_ARGUMENT, "Called [Infer] with no inputs")

        extra = _extra(request)
        if has_data:
            inputs = _decode_values(model, request["input_data"], extra)
            outputs = model.infer(inputs, extra)
            return {
                "output_data": {name: tensor_to_value(t) for name, t in outputs.items()}
            }

        tensors = request["input_tensors"].get("tensors") or {}
        inputs = _decode_flat(model, tensors, extra)
        outputs = model.infer(inputs, extra)
        return {
            "output_tensors": {
                "tensors": {name: tensor_to_flat(t) for name, t in outputs.items()}
            }
        }


def handle_metadata(
    service: ServiceSource, request: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Serve a ``MetadataRequest`` and return the ``MetadataResponse``.

    Raises :class:`RequestError` when the request is missing, the resource is
    not found, or the model reports metadata that cannot be encoded.
    """
    with _guard("Metadata"):
        request = _check_request("Metadata", request)
        model = _resolve(service, request.get("name", ""))
        metadata = model.metadata(_extra(request))
        try:
            message = metadata.to_proto()
        except ValueError as ex:
            raise RequestError(StatusCode.INTERNAL, str(ex)) from ex
        return {"metadata": message}