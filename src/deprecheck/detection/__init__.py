"""Class-usage detection: patterns, registry and detector."""

from deprecheck.detection.builtin_patterns import BUILTIN_PATTERNS, NgClassPattern
from deprecheck.detection.detector import ClassDetector, is_in_class_context, split_classes
from deprecheck.detection.patterns import (
    ClassPattern,
    PatternMatch,
    RegexClassPattern,
    regex_pattern,
)
from deprecheck.detection.registry import PatternRegistry

__all__ = [
    "BUILTIN_PATTERNS",
    "ClassDetector",
    "ClassPattern",
    "NgClassPattern",
    "PatternMatch",
    "PatternRegistry",
    "RegexClassPattern",
    "is_in_class_context",
    "regex_pattern",
    "split_classes",
]
