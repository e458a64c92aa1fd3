"""Validation utilities for the ambient energy harvester."""

import math
from typing import Any, Callable, Optional, Tuple, Type, Union

from .exceptions import ValidationError, ValidationTypeError, ValidationRangeError

class Validator:
    """Base validator class."""

    @staticmethod
    def validate_type(value: Any, expected_type: Union[Type, Tuple[Type, ...]]) -> None:
        """Validate value type."""
        if isinstance(value, bool) or not isinstance(value, expected_type):
            name = getattr(expected_type, "__name__", None) or "/".join(t.__name__ for t in expected_type)
            raise ValidationTypeError(
                f"Expected type {name}, got {type(value).__name__}"
            )

    @staticmethod
    def validate_range(
        value: Union[int, float],
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None
    ) -> None:
        """Validate numeric range."""
        if not math.isfinite(value):
            raise ValidationRangeError(f"Value {value} is not finite")

        if min_value is not None and value < min_value:
            raise ValidationRangeError(f"Value {value} is below minimum {min_value}")

        if max_value is not None and value > max_value:
            raise ValidationRangeError(f"Value {value} exceeds maximum {max_value}")

class SourceValidator(Validator):
    """Validator for harvesting source and storage parameters."""

    @staticmethod
    def validate_positive(value: float) -> None:
        """Validate a strictly positive physical quantity (area, capacity, resistance)."""
        Validator.validate_type(value, (int, float))
        Validator.validate_range(value, min_value=0)
        if value == 0:
            raise ValidationRangeError("Value must be positive, got 0")

    @staticmethod
    def validate_non_negative(value: float) -> None:
        """Validate a non-negative quantity (costs, rates)."""
        Validator.validate_type(value, (int, float))
        Validator.validate_range(value, min_value=0)

    @staticmethod
    def validate_efficiency(efficiency: float) -> None:
        """Validate efficiency value."""
        Validator.validate_type(efficiency, (int, float))
        Validator.validate_range(efficiency, min_value=0, max_value=1)

class LocationValidator(Validator):
    """Validator for installation location data."""

    @staticmethod
    def validate_latitude(lat: float) -> None:
        """Validate latitude in degrees."""
        Validator.validate_type(lat, (int, float))
        Validator.validate_range(lat, min_value=-90, max_value=90)

    @staticmethod
    def validate_longitude(lon: float) -> None:
        """Validate longitude in degrees."""
        Validator.validate_type(lon, (int, float))
        Validator.validate_range(lon, min_value=-180, max_value=180)

def check(check_fn: Callable[[Any], None], value: Any, label: str) -> Optional[str]:
    """Run a validator and return a labelled error message instead of raising."""
    try:
        check_fn(value)
    except ValidationError as e:
        return f"{label}: {e}"
    return None
