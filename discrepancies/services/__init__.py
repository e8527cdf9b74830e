"""
Discrepancy detection services.
Every finding is traceable to literal values in both documents.
"""

from .value_extractor import (
    extract,
    ExtractedDocument,
    ExtractionRule,
    RegexValueExtractor,
    ValueCategory,
    ValueExtractor,
)
from .normalizer import (
    normalize_date,
    parse_amount,
    edit_distance,
)
from .comparator import (
    detect,
    compare_documents,
    group_findings,
    DiscrepancyFinding,
    DiscrepancyType,
    FindingGroup,
    Severity,
)
from .parallel import (
    detect_concurrently,
    BatchResult,
    DetectionError,
    DetectionTimeout,
)

__all__ = [
    'extract',
    'ExtractedDocument',
    'ExtractionRule',
    'RegexValueExtractor',
    'ValueCategory',
    'ValueExtractor',
    'normalize_date',
    'parse_amount',
    'edit_distance',
    'detect',
    'compare_documents',
    'group_findings',
    'DiscrepancyFinding',
    'DiscrepancyType',
    'FindingGroup',
    'Severity',
    'detect_concurrently',
    'BatchResult',
    'DetectionError',
    'DetectionTimeout',
]
