"""Orientation, geometry and motion types plus ML model tensor encodings and request handlers."""

__version__ = "0.1.0"

__all__ = [
    "orientation",
    "geometry",
    "mlmodel",
    "tensor_value",
    "flat_tensor",
    "motion",
    "mlmodel_server",
]