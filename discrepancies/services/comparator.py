"""
Comparison service for discrepancy detection.
Compares extracted documents pairwise and generates findings.

Every finding cites the value from both documents. Severity is fixed
per category and does not depend on how large the difference is.
"""

import logging
import threading
from dataclasses import dataclass, field
from itertools import combinations
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple
from enum import Enum

from .normalizer import edit_distance, normalize_date, parse_amount
from .value_extractor import ExtractedDocument, ValueCategory

logger = logging.getLogger(__name__)

ENTITY_DISTANCE_RATIO = 0.3
AMOUNT_RELATIVE_TOLERANCE = 0.05


class DiscrepancyType(str, Enum):
    DATE = 'date'
    ENTITY = 'entity'
    AMOUNT = 'amount'


class Severity(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'


@dataclass(frozen=True)
class DiscrepancyFinding:
    """
    One disagreement between two documents for one value pair.
    """
    kind: DiscrepancyType
    source_file: str
    source_value: str
    comparison_file: str
    comparison_value: str
    severity: Severity

    def to_dict(self) -> dict:
        return {
            'type': self.kind.value,
            'fileA': self.source_file,
            'valueA': self.source_value,
            'fileB': self.comparison_file,
            'valueB': self.comparison_value,
            'severity': self.severity.value,
        }


@dataclass
class FindingGroup:
    """Findings that share a category and the same pair of values."""
    kind: DiscrepancyType
    source_value: str
    comparison_value: str
    severity: Severity
    file_pairs: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.file_pairs)

    def to_dict(self) -> dict:
        return {
            'type': self.kind.value,
            'valueA': self.source_value,
            'valueB': self.comparison_value,
            'severity': self.severity.value,
            'count': self.count,
            'files': [{'fileA': a, 'fileB': b} for a, b in self.file_pairs],
        }


def are_similar_dates(date_a: str, date_b: str) -> bool:
    """Same calendar date written two different ways."""
    return date_a != date_b and normalize_date(date_a) == normalize_date(date_b)


def are_similar_entities(entity_a: str, entity_b: str) -> bool:
    """Near-duplicate spellings: some edits, but at most 30% of the longer string."""
    distance = edit_distance(entity_a, entity_b)
    max_length = max(len(entity_a), len(entity_b))
    return 0 < distance <= max_length * ENTITY_DISTANCE_RATIO


def are_similar_amounts(amount_a: str, amount_b: str) -> bool:
    """Different raw amounts whose values are within 5% of each other."""
    if amount_a == amount_b:
        return False

    num_a = parse_amount(amount_a)
    num_b = parse_amount(amount_b)
    # zero has no relative difference
    if not num_a or not num_b:
        return False

    diff = abs(num_a - num_b) / max(num_a, num_b)
    return diff < AMOUNT_RELATIVE_TOLERANCE


@dataclass(frozen=True)
class ComparisonRule:
    kind: DiscrepancyType
    category: ValueCategory
    predicate: Callable[[str, str], bool]
    severity: Severity


# Evaluated in this order for every document pair
COMPARISON_RULES: Tuple[ComparisonRule, ...] = (
    ComparisonRule(DiscrepancyType.DATE, ValueCategory.DATE, are_similar_dates, Severity.HIGH),
    ComparisonRule(DiscrepancyType.ENTITY, ValueCategory.ENTITY, are_similar_entities, Severity.MEDIUM),
    ComparisonRule(DiscrepancyType.AMOUNT, ValueCategory.AMOUNT, are_similar_amounts, Severity.CRITICAL),
)

SEVERITY_BY_TYPE: Dict[DiscrepancyType, Severity] = {
    rule.kind: rule.severity for rule in COMPARISON_RULES
}


def compare_documents(
    doc_a: ExtractedDocument,
    doc_b: ExtractedDocument,
    cancel_event: Optional[threading.Event] = None
) -> List[DiscrepancyFinding]:
    """
    Compare two documents across every category.

    Every value of doc_a is checked against every value of doc_b; each
    matching combination becomes its own finding.

    Args:
        doc_a: Source document
        doc_b: Comparison document
        cancel_event: Optional event; once set, comparison stops and the
            findings gathered so far are returned

    Returns:
        Findings in category order: date, entity, amount
    """
    discrepancies = []

    for rule in COMPARISON_RULES:
        values_a = doc_a.values_for(rule.category)
        values_b = doc_b.values_for(rule.category)

        for value_a in values_a:
            if cancel_event is not None and cancel_event.is_set():
                return discrepancies
            for value_b in values_b:
                if rule.predicate(value_a, value_b):
                    discrepancies.append(DiscrepancyFinding(
                        kind=rule.kind,
                        source_file=doc_a.filename,
                        source_value=value_a,
                        comparison_file=doc_b.filename,
                        comparison_value=value_b,
                        severity=rule.severity,
                    ))

    return discrepancies


def iter_document_pairs(
    documents: Sequence[ExtractedDocument]
) -> Iterator[Tuple[ExtractedDocument, ExtractedDocument]]:
    """Unordered document pairs (i, j) with i < j, in input order."""
    return combinations(documents, 2)


def detect(documents: Sequence[ExtractedDocument]) -> List[DiscrepancyFinding]:
    """
    Detect discrepancies across every pair of documents.

    Args:
        documents: Extracted documents in input order

    Returns:
        All findings, ordered by document pair then category.
        Empty for zero or one document.
    """
    all_discrepancies = []

    for doc_a, doc_b in iter_document_pairs(documents):
        all_discrepancies.extend(compare_documents(doc_a, doc_b))

    return all_discrepancies


def group_findings(findings: Sequence[DiscrepancyFinding]) -> List[FindingGroup]:
    """
    Collapse findings with the same category and values into groups.

    Grouping is a separate step; detect() output is never changed by it.

    Returns:
        Groups in order of first appearance
    """
    groups: Dict[Tuple[DiscrepancyType, str, str], FindingGroup] = {}

    for finding in findings:
        key = (finding.kind, finding.source_value, finding.comparison_value)
        group = groups.get(key)
        if group is None:
            group = FindingGroup(
                kind=finding.kind,
                source_value=finding.source_value,
                comparison_value=finding.comparison_value,
                severity=finding.severity,
            )
            groups[key] = group
        group.file_pairs.append((finding.source_file, finding.comparison_file))

    return list(groups.values())
