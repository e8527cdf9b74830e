"""
Value extraction service for discrepancy detection.
Rule-based extraction of entities, dates and amounts from document text.

Extraction is a pure function of the text:
- Every value is a literal substring of the document
- Values are deduplicated by exact match, never case folded
- Rules are independent; one substring may land in several categories
"""

import re
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple
from enum import Enum

logger = logging.getLogger(__name__)


class ValueCategory(str, Enum):
    ENTITY = 'entity'
    DATE = 'date'
    AMOUNT = 'amount'


MONTH_PATTERN = r'(?:January|February|March|April|May|June|July|August|September|October|November|December)'


@dataclass(frozen=True)
class ExtractedValues:
    """Value-sets pulled out of one document, in first-seen order."""
    entities: Tuple[str, ...] = ()
    dates: Tuple[str, ...] = ()
    amounts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractedDocument:
    """
    A document reduced to the values the comparator looks at.
    Created once per uploaded document and never mutated.
    """
    filename: str
    content: str
    entities: Tuple[str, ...] = ()
    dates: Tuple[str, ...] = ()
    amounts: Tuple[str, ...] = ()

    def values_for(self, category: ValueCategory) -> Tuple[str, ...]:
        if category == ValueCategory.ENTITY:
            return self.entities
        if category == ValueCategory.DATE:
            return self.dates
        return self.amounts

    def to_dict(self) -> dict:
        return {
            'filename': self.filename,
            'entities': list(self.entities),
            'dates': list(self.dates),
            'amounts': list(self.amounts),
        }


@dataclass
class ExtractionRule:
    """
    Definition of a value extraction rule.
    """
    category: ValueCategory
    label: str
    patterns: List[Pattern] = field(default_factory=list)


# re.ASCII keeps \b and \d on plain ASCII word characters
EXTRACTION_RULES: List[ExtractionRule] = [
    # Entities
    ExtractionRule(
        category=ValueCategory.ENTITY,
        label='Person Name',
        patterns=[re.compile(r'\b[A-Z][a-z]+ [A-Z][a-z]+\b', re.ASCII)],
    ),
    ExtractionRule(
        category=ValueCategory.ENTITY,
        label='Company Name',
        patterns=[re.compile(r'\b[A-Z][a-z]+ (?:Inc|LLC|Corp|Corporation|Ltd|Limited)\b', re.ASCII)],
    ),
    ExtractionRule(
        category=ValueCategory.ENTITY,
        label='Acronym',
        patterns=[re.compile(r'\b[A-Z]{2,}\b', re.ASCII)],
    ),

    # Dates
    ExtractionRule(
        category=ValueCategory.DATE,
        label='Numeric Date',
        patterns=[
            re.compile(r'\b\d{1,2}/\d{1,2}/\d{4}\b', re.ASCII),  # MM/DD/YYYY
            re.compile(r'\b\d{4}/\d{1,2}/\d{1,2}\b', re.ASCII),  # YYYY/MM/DD
            re.compile(r'\b\d{1,2}-\d{1,2}-\d{4}\b', re.ASCII),  # MM-DD-YYYY
            re.compile(r'\b\d{4}-\d{1,2}-\d{1,2}\b', re.ASCII),  # YYYY-MM-DD
        ],
    ),
    ExtractionRule(
        category=ValueCategory.DATE,
        label='Long Date',
        patterns=[re.compile(r'\b' + MONTH_PATTERN + r'\s+\d{1,2},?\s+\d{4}\b', re.ASCII)],
    ),

    # Amounts
    ExtractionRule(
        category=ValueCategory.AMOUNT,
        label='Currency',
        patterns=[re.compile(r'\$\d{1,3}(?:,\d{3})*(?:\.\d{2})?', re.ASCII)],
    ),
    ExtractionRule(
        category=ValueCategory.AMOUNT,
        label='Written Currency',
        patterns=[re.compile(r'\b\d{1,3}(?:,\d{3})*(?:\.\d{2})?\s*(?:dollars?|USD)\b', re.ASCII | re.IGNORECASE)],
    ),
    ExtractionRule(
        category=ValueCategory.AMOUNT,
        label='Percentage',
        patterns=[re.compile(r'\b\d+(?:\.\d+)?%', re.ASCII)],
    ),
    ExtractionRule(
        category=ValueCategory.AMOUNT,
        label='Number',
        patterns=[re.compile(r'\b\d{1,3}(?:,\d{3})*(?:\.\d+)?\b', re.ASCII)],
    ),
]


class ValueExtractor(ABC):
    """
    Strategy for turning document text into value-sets.

    The comparator only sees ExtractedDocument, so rule-based,
    statistical or model-backed extractors can be swapped in freely.
    """

    @abstractmethod
    def extract_values(self, text: str) -> ExtractedValues:
        raise NotImplementedError


class RegexValueExtractor(ValueExtractor):
    """Extract values with a list of ExtractionRule regexes."""

    def __init__(self, rules: Optional[List[ExtractionRule]] = None):
        self.rules = EXTRACTION_RULES if rules is None else rules

    def extract_values(self, text: str) -> ExtractedValues:
        # dict keys give exact-match dedup while keeping first-seen order
        found: Dict[ValueCategory, Dict[str, None]] = {
            category: {} for category in ValueCategory
        }

        for rule in self.rules:
            bucket = found[rule.category]
            for pattern in rule.patterns:
                for match in pattern.finditer(text or ''):
                    value = match.group(0).strip()
                    if value:
                        bucket.setdefault(value, None)

        return ExtractedValues(
            entities=tuple(found[ValueCategory.ENTITY]),
            dates=tuple(found[ValueCategory.DATE]),
            amounts=tuple(found[ValueCategory.AMOUNT]),
        )


default_extractor = RegexValueExtractor()


def extract(
    filename: str,
    content: str,
    extractor: Optional[ValueExtractor] = None
) -> ExtractedDocument:
    """
    Parse one document into its entity, date and amount value-sets.

    Never raises on any text; a document with no matches has empty sets.

    Args:
        filename: Opaque document identifier
        content: Decoded plain text of the document
        extractor: Optional strategy, defaults to the regex rules

    Returns:
        ExtractedDocument holding the raw content and the value-sets
    """
    if extractor is None:
        extractor = default_extractor

    values = extractor.extract_values(content)
    logger.debug(
        f"Extracted from {filename}: {len(values.entities)} entities, "
        f"{len(values.dates)} dates, {len(values.amounts)} amounts"
    )

    return ExtractedDocument(
        filename=filename,
        content=content,
        entities=values.entities,
        dates=values.dates,
        amounts=values.amounts,
    )
