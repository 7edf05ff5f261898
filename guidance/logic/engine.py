"""
Matching Engine

Main orchestrator that combines eligibility rules, scoring and output
assembly into a single pipeline. Pure function of (profile, programs):
no DB access, no AI/LLM usage.
"""

import logging
from typing import List, Optional, Dict

from .contracts import (
    StudentProfile,
    UniversityProgram,
    ProgramMatch,
    Recommendations,
    MatchingResults,
)
from .constants import EligibilityStatus, MAX_TOP_MATCHES, MAX_ALTERNATIVE_OPTIONS
from .grading import calculate_total_points
from .eligibility import (
    check_program_requirements,
    general_eligibility_map,
    diploma_eligibility_map,
)
from .scoring import calculate_interest_alignment, points_ratio, classify, calculate_match_score
from .output_assembler import build_recommendation_reason, build_improvement_suggestions, build_warnings

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Matches a student profile against the program catalogue.

    Pipeline flow:
    1. Recompute total points (best 5 subjects)
    2. General and diploma eligibility per institution
    3. Filter programs to the preferred universities
    4. Score each program
    5. Sort by score (desc), then program name
    6. Select top matches and alternatives
    7. Build suggestions and warnings
    """

    def __init__(self):
        self.version = "1.0.0"

    def score_program(
        self,
        profile: StudentProfile,
        program: UniversityProgram,
        general_eligibility: Dict[str, bool],
    ) -> ProgramMatch:
        """
        Score a single program for a student.

        Args:
            profile: Student profile with recomputed total points
            program: Program to score
            general_eligibility: Institution -> general admission verdict

        Returns:
            ProgramMatch
        """
        eligible, missing = check_program_requirements(profile, program)
        general_ok = general_eligibility.get(program.institution, False)
        if eligible and not general_ok:
            missing.append(f"General admission requirements for {program.institution} not met")

        alignment = calculate_interest_alignment(profile.interests, program.interest_categories)
        ratio = points_ratio(profile.total_points, program.min_points)
        status = classify(eligible, general_ok, missing, ratio)

        return ProgramMatch(
            program=program,
            match_score=calculate_match_score(status, alignment, ratio),
            eligibility_status=status,
            missing_requirements=missing,
            interest_alignment=alignment,
            recommendation_reason=build_recommendation_reason(program, status.value, alignment, missing),
        )

    def match(
        self,
        profile: StudentProfile,
        programs: List[UniversityProgram],
    ) -> MatchingResults:
        """
        Run the matching pipeline.

        Args:
            profile: Student's subjects, interests and preferences
            programs: Program catalogue

        Returns:
            MatchingResults
        """
        # Step 1: never trust a client-sent total
        profile = profile.model_copy(update={"total_points": calculate_total_points(profile.subjects)})

        # Step 2: institution-level admission
        general = general_eligibility_map(profile)
        diploma = diploma_eligibility_map(profile)

        # Step 3: preferred universities (all when none given)
        preferred = set(profile.preferred_universities)
        relevant = [p for p in programs if not preferred or p.institution in preferred]

        # Step 4 & 5: score and sort
        matches = [self.score_program(profile, program, general) for program in relevant]
        matches.sort(key=lambda m: (-m.match_score, m.program.program_name))

        # Step 6: select
        top_matches = [m for m in matches if m.eligibility_status == EligibilityStatus.ELIGIBLE.value]
        alternatives = [m for m in matches if m.eligibility_status == EligibilityStatus.BORDERLINE.value]
        top_matches = top_matches[:MAX_TOP_MATCHES]
        alternatives = alternatives[:MAX_ALTERNATIVE_OPTIONS]

        # Step 7: suggestions and warnings
        suggestions = build_improvement_suggestions(profile, general, top_matches, alternatives)
        warnings = build_warnings(profile, len(programs), len(relevant))

        logger.info(
            f"Matched {len(relevant)}/{len(programs)} programs: "
            f"{len(top_matches)} top, {len(alternatives)} alternatives, total={profile.total_points}"
        )

        return MatchingResults(
            matches=matches,
            general_eligibility=general,
            diploma_eligibility=diploma,
            recommendations=Recommendations(
                top_matches=top_matches,
                alternative_options=alternatives,
                improvement_suggestions=suggestions,
            ),
            total_points=profile.total_points,
            warnings=warnings,
        )


# Convenience function for simple usage
def match_programs(
    profile: StudentProfile,
    programs: List[UniversityProgram],
    engine: Optional[MatchingEngine] = None,
) -> MatchingResults:
    engine = engine or MatchingEngine()
    return engine.match(profile, programs)
