"""
Base Validation Components for Mycelia

This module provides the foundational validation components used throughout the package.
It includes the ValidationResult class for reporting validation outcomes, a small hierarchy
of ValidationRule classes, and the validate_dataclass decorator that adds runtime type
checking to the node, edge and configuration dataclasses.

The module implements:
- Validation results with errors, warnings, and context
- Numeric range validation
- Dataclass field validation, including Union-typed fields such as the node sum type
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Type,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)


@dataclass
class ValidationResult:
    """
    Container for validation results.

    Attributes:
        valid (bool): Whether the validation passed (no errors)
        errors (List[str]): Validation error messages
        warnings (List[str]): Validation warning messages
        context (Optional[Dict[str, Any]]): Additional context about the validation
    """

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-compatible dictionary."""
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


class ValidationRule:
    """
    Base class for all validation rules.

    Subclasses override validate() to implement specific validation logic.

    Attributes:
        error_message (str): Message to display when validation fails
    """

    def __init__(self, error_message: str):
        self.error_message = error_message

    def validate(self, value: Any) -> bool:
        """
        Validate a value against the rule.

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Validation rules must implement validate()")


class RangeRule(ValidationRule):
    """
    Rule for validating numeric ranges.

    Either min_value or max_value can be None to create an open-ended range.
    """

    def __init__(
        self,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        error_message: str = "",
    ):
        super().__init__(error_message)
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True


class DataclassRule(ValidationRule):
    """
    Rule for validating dataclass fields.

    This rule ensures that fields in a dataclass instance match their type hints.

    Attributes:
        dataclass_type: The dataclass type to validate against
    """

    def __init__(self, dataclass_type: Type, error_message: str = ""):
        super().__init__(error_message or f"Invalid value for {dataclass_type.__name__}")
        self.dataclass_type = dataclass_type
        self.type_hints = get_type_hints(dataclass_type)

    def _validate_type(self, value: Any, expected_type: Any) -> bool:
        """Validate a value against its expected type."""
        if expected_type is Any:
            return True

        origin = get_origin(expected_type)

        # Optional[X] and the node sum type both arrive here
        if origin is Union:
            return any(self._validate_type(value, option) for option in get_args(expected_type))

        if expected_type is type(None):
            return value is None

        if value is None:
            return False

        if expected_type is datetime:
            return isinstance(value, datetime)

        if origin is list:
            if not isinstance(value, list):
                return False
            args = get_args(expected_type)
            if not args:
                return True
            return all(self._validate_type(item, args[0]) for item in value)
        elif origin is dict:
            if not isinstance(value, dict):
                return False
            args = get_args(expected_type)
            if len(args) != 2:
                return True
            key_type, val_type = args
            return all(
                self._validate_type(k, key_type) and self._validate_type(v, val_type)
                for k, v in value.items()
            )
        elif origin is not None:
            try:
                return isinstance(value, origin)
            except TypeError:
                return True
        else:
            try:
                return isinstance(value, expected_type)
            except TypeError:
                return True

    def invalid_fields(self, value: Any) -> List[str]:
        """Return the names of fields whose values do not match their type hints."""
        return [
            field_name
            for field_name, field_type in self.type_hints.items()
            if not self._validate_type(getattr(value, field_name), field_type)
        ]

    def validate(self, value: Any) -> bool:
        if not isinstance(value, self.dataclass_type):
            return False
        return not self.invalid_fields(value)


def validate_dataclass(cls: Type[Any]) -> Type[Any]:
    """
    Decorator that adds runtime type checking to dataclass fields.

    Example:
        >>> @validate_dataclass
        ... @dataclass
        ... class Example:
        ...     name: str
        ...     count: int
    """
    original_post_init = getattr(cls, "__post_init__", None)
    rules: Dict[Type, DataclassRule] = {}

    def validated_post_init(self):
        """Validate all fields after initialization."""
        if original_post_init:
            original_post_init(self)

        rule = rules.get(cls)
        if rule is None:
            rule = rules[cls] = DataclassRule(cls)
        invalid = rule.invalid_fields(self)
        if invalid:
            raise TypeError(f"Invalid field types in {cls.__name__}: {', '.join(invalid)}")

    cls.__post_init__ = validated_post_init
    return cls
