"""
Bounded, concurrent discrepancy detection.

Document pairs are spread over a thread pool and their partial finding
lists are merged back in pair order, so the output matches detect()
unless the batch is truncated. A wall-clock deadline covers the whole
batch; when it passes, in-flight comparisons are told to stop and
DetectionTimeout is raised.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..conf import EngineConfig
from .comparator import DiscrepancyFinding, compare_documents, iter_document_pairs
from .value_extractor import ExtractedDocument

logger = logging.getLogger(__name__)


class DetectionError(Exception):
    """Base error for the bounded detection path."""


class DetectionTimeout(DetectionError):
    def __init__(self, timeout_seconds: float, completed_pairs: int, total_pairs: int):
        self.timeout_seconds = timeout_seconds
        self.completed_pairs = completed_pairs
        self.total_pairs = total_pairs
        super().__init__(
            f'Discrepancy detection exceeded {timeout_seconds}s '
            f'({completed_pairs}/{total_pairs} document pairs compared)'
        )


@dataclass
class BatchResult:
    findings: List[DiscrepancyFinding] = field(default_factory=list)
    pair_count: int = 0
    truncated: bool = False


def detect_concurrently(
    documents: Sequence[ExtractedDocument],
    config: Optional[EngineConfig] = None
) -> BatchResult:
    """
    Detect discrepancies with a worker pool, an output cap and a deadline.

    Args:
        documents: Extracted documents in input order
        config: Worker count, timeout and finding limit

    Returns:
        BatchResult with findings in document-pair order

    Raises:
        DetectionTimeout: if the batch does not finish in time
    """
    if config is None:
        config = EngineConfig()

    pairs = list(iter_document_pairs(documents))
    if not pairs:
        return BatchResult()

    workers = min(config.max_workers, len(pairs))
    cancel_event = threading.Event()
    executor = ThreadPoolExecutor(
        max_workers=workers,
        thread_name_prefix='discrepancy-worker',
    )
    futures = [
        executor.submit(compare_documents, doc_a, doc_b, cancel_event)
        for doc_a, doc_b in pairs
    ]

    deadline = time.monotonic() + config.timeout_seconds
    result = BatchResult(pair_count=len(pairs))
    completed = 0

    try:
        for future in futures:
            remaining = max(deadline - time.monotonic(), 0)
            try:
                partial = future.result(timeout=remaining)
            except FutureTimeoutError as exc:
                logger.warning(
                    f"Detection timed out after {config.timeout_seconds}s "
                    f"with {completed}/{len(pairs)} pairs compared"
                )
                raise DetectionTimeout(config.timeout_seconds, completed, len(pairs)) from exc

            completed += 1
            result.findings.extend(partial)

            if len(result.findings) > config.max_findings:
                del result.findings[config.max_findings:]
                result.truncated = True
                logger.warning(
                    f"Finding limit {config.max_findings} reached after "
                    f"{completed}/{len(pairs)} pairs; output truncated"
                )
                break
    finally:
        cancel_event.set()
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info(
        f"Compared {completed} document pairs with {workers} workers, "
        f"{len(result.findings)} findings"
    )
    return result
