"""
Engine Runner

Orchestrates the matching pipeline:
1. Accepts StudentProfile
2. Fetches programs via adapter
3. Runs matching engine
4. Attaches advisory verdicts from the external matcher (when configured)

This is a pure orchestration layer - NO scoring, NO business rules.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from .adapter import fetch_programs
from .contracts import StudentProfile, MatchingResults, AdvisoryVerdict, AdvisorySummary
from .constants import EligibilityStatus
from .engine import MatchingEngine

logger = logging.getLogger(__name__)


def _program_keys(entry: Dict[str, Any]) -> List[str]:
    """Keys an advisory entry can be matched on: id and program code."""
    data = entry.get("program_object") or entry
    keys = []
    if data.get("id") is not None:
        keys.append(f"id:{data['id']}")
    if data.get("program_code"):
        keys.append(f"code:{str(data['program_code']).strip().lower()}")
    return keys


def _index_verdicts(advisory: Dict[str, Any]) -> Dict[str, Tuple[bool, Dict[str, Any]]]:
    index: Dict[str, Tuple[bool, Dict[str, Any]]] = {}
    for eligible, bucket in ((True, "eligible_programs"), (False, "alternative_programs")):
        for entry in advisory.get(bucket) or []:
            if not isinstance(entry, dict):
                continue
            for key in _program_keys(entry):
                index.setdefault(key, (eligible, entry))
    return index


def merge_advisory(results: MatchingResults, advisory: Dict[str, Any]) -> MatchingResults:
    """
    Attach advisory verdicts to local matches without changing them.

    Args:
        results: Authoritative local results
        advisory: Raw response from the matching service

    Returns:
        The same results with `advisory` set on matched programs and an
        advisory summary
    """
    index = _index_verdicts(advisory)
    disagreements = 0

    for match in results.matches:
        program = match.program
        found = index.get(f"id:{program.id}")
        if found is None and program.program_code:
            found = index.get(f"code:{program.program_code.strip().lower()}")
        if found is None:
            continue

        eligible, entry = found
        local_eligible = match.eligibility_status == EligibilityStatus.ELIGIBLE.value
        agrees = eligible == local_eligible
        if not agrees:
            disagreements += 1

        missing = entry.get("missing_requirements") or []
        if isinstance(missing, str):
            missing = [missing]
        match.advisory = AdvisoryVerdict(
            eligible=eligible,
            similarity_score=entry.get("similarity_score"),
            message=entry.get("eligibility_message"),
            missing_requirements=[str(m) for m in missing],
            agrees=agrees,
        )

    results.advisory_summary = AdvisorySummary(
        eligible_count=len(advisory.get("eligible_programs") or []),
        alternative_count=len(advisory.get("alternative_programs") or []),
        disagreements=disagreements,
    )
    if disagreements:
        logger.info(f"Advisory matcher disagrees on {disagreements} programs")
    return results


def run_matching(
    db: Session,
    profile: StudentProfile,
    matching_service: Optional[Any] = None,
    engine: Optional[MatchingEngine] = None,
) -> MatchingResults:
    """
    Main entry point for the matching pipeline.

    Args:
        db: SQLAlchemy session
        profile: Student profile
        matching_service: Optional advisory client with `enabled` and
            `fetch_verdicts(profile)`; failures propagate
        engine: Optional engine instance

    Returns:
        MatchingResults
    """
    engine = engine or MatchingEngine()

    programs = fetch_programs(db)
    # Hand the pooled connection back before any outbound call
    db.commit()

    results = engine.match(profile, programs)

    if matching_service is not None and matching_service.enabled:
        advisory = matching_service.fetch_verdicts(profile)
        results = merge_advisory(results, advisory)

    return results
