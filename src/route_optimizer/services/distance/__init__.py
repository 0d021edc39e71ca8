"""Distance/time matrix providers."""

from .base import DistanceCell, DistanceMatrix, MatrixProvider
from .dispatcher import get_matrix_provider
from .google import GoogleMatrixProvider
from .haversine import HaversineMatrixProvider

__all__ = [
    "DistanceCell",
    "DistanceMatrix",
    "GoogleMatrixProvider",
    "HaversineMatrixProvider",
    "MatrixProvider",
    "get_matrix_provider",
]
