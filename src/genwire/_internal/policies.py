from enum import Enum


class ParameterPassing(str, Enum):
    """Policy for turning a raw value's natural type into a type argument."""

    BY_VALUE = "by_value"
    """Decay the natural type: drop qualifiers and references, arrays become pointers."""

    BY_REFERENCE = "by_reference"
    """Keep the natural type as-is apart from collapsing the outer reference."""
