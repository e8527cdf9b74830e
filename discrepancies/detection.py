"""
Discrepancy detection orchestrator.
Coordinates value extraction and pairwise comparison for a batch of
already-decoded documents.

This module is the main entry point for callers. It does not read files,
store findings or render anything.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .conf import EngineConfig, load_config
from .services.comparator import (
    DiscrepancyFinding,
    DiscrepancyType,
    FindingGroup,
    Severity,
    group_findings,
)
from .services.parallel import detect_concurrently
from .services.value_extractor import ExtractedDocument, ValueExtractor, extract

logger = logging.getLogger(__name__)


@dataclass
class DetectionReport:
    """Findings for one detection run plus counts for the caller."""
    findings: List[DiscrepancyFinding] = field(default_factory=list)
    document_count: int = 0
    pair_count: int = 0
    truncated: bool = False

    @property
    def by_severity(self) -> Dict[str, int]:
        counts = Counter(f.severity.value for f in self.findings)
        return {s.value: counts[s.value] for s in Severity if counts[s.value]}

    @property
    def by_type(self) -> Dict[str, int]:
        counts = Counter(f.kind.value for f in self.findings)
        return {t.value: counts[t.value] for t in DiscrepancyType if counts[t.value]}

    def groups(self) -> List[FindingGroup]:
        return group_findings(self.findings)

    def to_dict(self, include_groups: bool = False) -> Dict[str, Any]:
        data = {
            'discrepancies': [f.to_dict() for f in self.findings],
            'summary': {
                'total': len(self.findings),
                'bySeverity': self.by_severity,
                'byType': self.by_type,
            },
            'documentCount': self.document_count,
            'pairCount': self.pair_count,
            'truncated': self.truncated,
        }
        if include_groups:
            data['groups'] = [g.to_dict() for g in self.groups()]
        return data


def parse_documents(
    documents: Iterable[Tuple[str, str]],
    extractor: Optional[ValueExtractor] = None
) -> List[ExtractedDocument]:
    """Extract value-sets from (filename, text) pairs, keeping input order."""
    return [extract(filename, content, extractor) for filename, content in documents]


def run_detection(
    documents: Iterable[Tuple[str, str]],
    config: Optional[EngineConfig] = None,
    extractor: Optional[ValueExtractor] = None
) -> DetectionReport:
    """
    Run discrepancy detection over a batch of decoded documents.

    Args:
        documents: (filename, plaintext) pairs, one per decoded upload
        config: Engine limits, defaults to load_config()
        extractor: Optional extraction strategy

    Returns:
        DetectionReport with findings ordered by document pair, then
        category (date, entity, amount)

    Raises:
        DetectionTimeout: if comparison exceeds config.timeout_seconds
    """
    if config is None:
        config = load_config()

    parsed = parse_documents(documents, extractor)
    batch = detect_concurrently(parsed, config)

    report = DetectionReport(
        findings=batch.findings,
        document_count=len(parsed),
        pair_count=batch.pair_count,
        truncated=batch.truncated,
    )

    logger.info(
        f"Detection run over {report.document_count} documents found "
        f"{len(report.findings)} discrepancies {report.by_severity}"
    )
    return report
