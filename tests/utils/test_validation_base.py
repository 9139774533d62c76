"""
Tests for the validation base components.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import pytest

from mycelia.utils.validation import (
    DataclassRule,
    RangeRule,
    ValidationResult,
    validate_dataclass,
)


@validate_dataclass
@dataclass
class Sample:
    name: str
    count: int = 0
    tags: List[str] = field(default_factory=list)
    extra: Optional[Dict[str, int]] = None
    value: Union[int, str] = 0


def test_valid_dataclass():
    """Test a correctly typed instance passes."""
    sample = Sample(name="x", count=2, tags=["a"], extra={"k": 1}, value="v")
    assert sample.value == "v"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": 1},
        {"name": "x", "tags": [1]},
        {"name": "x", "extra": {"k": "v"}},
        {"name": "x", "value": 1.5},
    ],
)
def test_invalid_dataclass(kwargs):
    """Test mistyped fields raise TypeError."""
    with pytest.raises(TypeError, match="Invalid field types in Sample"):
        Sample(**kwargs)


def test_dataclass_rule_reports_fields():
    """Test the rule lists offending fields."""
    sample = Sample(name="x")
    sample.count = "many"
    rule = DataclassRule(Sample)
    assert rule.invalid_fields(sample) == ["count"]
    assert not rule.validate(sample)
    assert not rule.validate("not a sample")


def test_range_rule():
    """Test numeric range validation."""
    rule = RangeRule(min_value=1, max_value=10)
    assert rule.validate(5)
    assert not rule.validate(0)
    assert not rule.validate(11)
    assert not rule.validate(True)
    assert not rule.validate("5")
    assert RangeRule(min_value=0).validate(10**6)


def test_validation_result_to_dict():
    """Test result serialization."""
    result = ValidationResult(valid=False, errors=["e"], warnings=["w"])
    assert result.to_dict() == {"valid": False, "errors": ["e"], "warnings": ["w"]}
