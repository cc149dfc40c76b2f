"""Checks shared by the vector and graph stores."""

from typing import Sequence

from ragraph.exceptions import DimensionMismatchError


def check_dimension(vector: Sequence[float], dimension: int, what: str = "embedding") -> None:
    """
    Refuse vectors whose length differs from the store's dimensionality.

    Raises:
        DimensionMismatchError: If len(vector) != dimension
    """
    if len(vector) != dimension:
        raise DimensionMismatchError(expected=dimension, actual=len(vector), what=what)
