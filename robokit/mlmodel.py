"""The machine-learning model service: tensor metadata and the service interface.

Tensors are ``numpy`` arrays. Messages are plain dictionaries keyed by the
field names of the wire schema.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

AttributeMap = Dict[str, Any]
NamedTensors = Dict[str, np.ndarray]


class DataType(Enum):
    """Element types a tensor may have."""

    INT8 = 0
    UINT8 = 1
    INT16 = 2
    UINT16 = 3
    INT32 = 4
    UINT32 = 5
    INT64 = 6
    UINT64 = 7
    FLOAT32 = 8
    FLOAT64 = 9

    @property
    def text(self) -> str:
        """The wire name of this data type, such as ``"float32"``."""
        return self.name.lower()

    @property
    def numpy_dtype(self) -> np.dtype:
        """The ``numpy`` dtype holding elements of this type."""
        return np.dtype(self.text)

    @staticmethod
    def from_string(text: str) -> Optional["DataType"]:
        """Return the data type with wire name ``text``, or None if there is none."""
        return _BY_TEXT.get(text)

    @staticmethod
    def of_tensor(tensor: np.ndarray) -> "DataType":
        """Return the data type of the elements of ``tensor``."""
        dtype = np.asarray(tensor).dtype
        try:
            return _BY_KIND[(dtype.kind, dtype.itemsize)]
        except KeyError:
            raise TypeError(f"unsupported tensor element type {dtype}") from None


_BY_TEXT: Dict[str, DataType] = {member.text: member for member in DataType}

_BY_KIND: Dict[Tuple[str, int], DataType] = {
    ("i", 1): DataType.INT8,
    ("u", 1): DataType.UINT8,
    ("i", 2): DataType.INT16,
    ("u", 2): DataType.UINT16,
    ("i", 4): DataType.INT32,
    ("u", 4): DataType.UINT32,
    ("i", 8): DataType.INT64,
    ("u", 8): DataType.UINT64,
    ("f", 4): DataType.FLOAT32,
    ("f", 8): DataType.FLOAT64,
}


class LabelType(Enum):
    """How the labels in an associated file relate to a tensor."""

    TENSOR_VALUE = 0
    TENSOR_AXIS = 1


_LABEL_TO_PROTO = {
    LabelType.TENSOR_VALUE: "LABEL_TYPE_TENSOR_VALUE",
    LabelType.TENSOR_AXIS: "LABEL_TYPE_TENSOR_AXIS",
}
_LABEL_FROM_PROTO = {text: label for label, text in _LABEL_TO_PROTO.items()}
_LABEL_UNSPECIFIED = "LABEL_TYPE_UNSPECIFIED"


@dataclass
class TensorFile:
    """A file associated with a tensor, such as a label list."""

    name: str = ""
    description: str = ""
    label_type: LabelType = LabelType.TENSOR_VALUE


@dataclass
class TensorInfo:
    """Description of one input or output tensor of a model.

    A shape entry of ``-1`` marks an extent of unknown size.
    """

    name: str = ""
    description: str = ""
    data_type: DataType = DataType.INT8
    shape: List[int] = field(default_factory=list)
    associated_files: List[TensorFile] = field(default_factory=list)
    extra: Optional[AttributeMap] = None

    def _to_proto(self) -> Dict[str, Any]:
        if not isinstance(self.data_type, DataType):
            raise ValueError(
                "Served MLModelService returned an unknown data type with value "
                f"`{self.data_type}` in its metadata"
            )
        message: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "data_type": self.data_type.text,
            "shape": [int(s) for s in self.shape],
            "associated_files": [
                {
                    "name": f.name,
                    "description": f.description,
                    "label_type": _LABEL_TO_PROTO.get(f.label_type, _LABEL_UNSPECIFIED),
                }
                for f in self.associated_files
            ],
        }
        if self.extra is not None:
            message["extra"] = dict(self.extra)
        return message

    @staticmethod
    def _from_proto(proto: Mapping[str, Any]) -> "TensorInfo":
        raw_type = proto.get("data_type", "")
        data_type = DataType.from_string(raw_type)
        if data_type is None:
            raise ValueError(
                "Failed to deserialize returned Metadata.TensorInfo.data_type field with value "
                f"`{raw_type}` to one of the known tensor data types"
            )
        files = []
        for af in proto.get("associated_files", []):
            raw_label = af.get("label_type", _LABEL_UNSPECIFIED)
            label = _LABEL_FROM_PROTO.get(raw_label)
            if label is None:
                raise ValueError(
                    "Failed to deserialize returned Metadata.TensorInfo.File.label_type field "
                    f"with value `{raw_label}` to one of the known label types"
                )
            files.append(
                TensorFile(
                    name=af.get("name", ""),
                    description=af.get("description", ""),
                    label_type=label,
                )
            )
        extra = proto.get("extra")
        return TensorInfo(
            name=proto.get("name", ""),
            description=proto.get("description", ""),
            data_type=data_type,
            shape=[int(s) for s in proto.get("shape", [])],
            associated_files=files,
            extra=dict(extra) if extra is not None else None,
        )


@dataclass
class Metadata:
    """Description of a model and of its input and output tensors."""

    name: str = ""
    type: str = ""
    description: str = ""
    inputs: List[TensorInfo] = field(default_factory=list)
    outputs: List[TensorInfo] = field(default_factory=list)

    def to_proto(self) -> Dict[str, Any]:
        """Return the ``Metadata`` message for this description."""
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "input_info": [info._to_proto() for info in self.inputs],
            "output_info": [info._to_proto() for info in self.outputs],
        }

    @staticmethod
    def from_proto(proto: Mapping[str, Any]) -> "Metadata":
        """Build a description from a ``Metadata`` message."""
        return Metadata(
            name=proto.get("name", ""),
            type=proto.get("type", ""),
            description=proto.get("description", ""),
            inputs=[TensorInfo._from_proto(p) for p in proto.get("input_info", [])],
            outputs=[TensorInfo._from_proto(p) for p in proto.get("output_info", [])],
        )


class MLModelService(ABC):
    """A trained machine-learning model that runs inference on named tensors."""

    api: Tuple[str, str, str] = ("rdk", "service", "mlmodel")
    resource_type: str = "service"

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def infer(self, inputs: NamedTensors, extra: Optional[AttributeMap] = None) -> NamedTensors:
        """Run the model on ``inputs`` and return the named output tensors."""

    @abstractmethod
    def metadata(self, extra: Optional[AttributeMap] = None) -> Metadata:
        """Return the description of the model's inputs and outputs."""