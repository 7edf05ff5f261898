"""
Career Advisor

Turns match results into the AI recommendations envelope: an LLM-written
analysis wrapped in a fixed structure the frontend renders.
"""

import logging
from typing import Dict, Any, List, Optional

from .llm_client import llm, LLMClient
from .prompt_builder import build_recommendations_prompt, top_matches_from
from .safety_rules import (
    DEFAULT_PERSONALIZED_MESSAGE,
    DEFAULT_PROGRAM_REASONING,
    DEFAULT_IMPROVEMENT_SUGGESTION,
    CAREER_INSIGHTS,
)

logger = logging.getLogger(__name__)

MAX_TOP_RECOMMENDATIONS = 3

# Keyword -> area label for improvement suggestions
_SUGGESTION_AREAS = [
    ("english", "English Language"),
    ("mathematics", "Mathematics"),
    ("science", "Science Subjects"),
    ("points", "Total Points"),
    ("diploma", "Study Pathway"),
]


class CareerAdvisor:
    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client or llm
        self.max_tokens = 1000
        self.temperature = 0.7

    def build_recommendations(
        self,
        student_profile: Dict[str, Any],
        matches: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Generate AI recommendations for a student.

        Args:
            student_profile: StudentProfile in wire (camelCase) form
            matches: MatchingResults in wire form (or {topMatches: [...]})

        Returns:
            Envelope with personalizedMessage, fullAnalysis, topRecommendations,
            improvementSuggestions and careerInsights

        Raises:
            LLMNotConfiguredError, LLMServiceError
        """
        prompt = build_recommendations_prompt(student_profile, matches)
        text = self.client.generate(prompt, max_tokens=self.max_tokens, temperature=self.temperature)
        logger.info(f"Generated AI recommendations ({len(text)} chars)")

        return {
            "personalizedMessage": _first_line(text) or DEFAULT_PERSONALIZED_MESSAGE,
            "fullAnalysis": text,
            "topRecommendations": self._top_recommendations(student_profile, matches),
            "improvementSuggestions": self._improvement_suggestions(matches),
            "careerInsights": CAREER_INSIGHTS,
        }

    def _top_recommendations(self, student_profile: Dict[str, Any], matches: Dict[str, Any]) -> List[Dict[str, Any]]:
        interests = (student_profile.get("interests") or [])[:2]
        recommendations = []
        for match in top_matches_from(matches)[:MAX_TOP_RECOMMENDATIONS]:
            program = match.get("program") or {}
            recommendations.append({
                "program": program.get("programName"),
                "university": program.get("institution"),
                "matchScore": match.get("matchScore"),
                "reasoning": match.get("recommendationReason") or DEFAULT_PROGRAM_REASONING,
                "careerProspects": (program.get("careerPossibilities") or [])[:3],
                "strengthsAlignment": interests,
            })
        return recommendations

    def _improvement_suggestions(self, matches: Dict[str, Any]) -> List[Dict[str, str]]:
        recommendations = matches.get("recommendations") if isinstance(matches, dict) else None
        suggestions = (recommendations or {}).get("improvementSuggestions") or []
        if not suggestions:
            return [DEFAULT_IMPROVEMENT_SUGGESTION]
        return [
            {
                "area": _suggestion_area(text),
                "suggestion": text,
                "impact": DEFAULT_IMPROVEMENT_SUGGESTION["impact"],
            }
            for text in suggestions
        ]


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _suggestion_area(text: str) -> str:
    lowered = text.lower()
    for keyword, area in _SUGGESTION_AREAS:
        if keyword in lowered:
            return area
    return DEFAULT_IMPROVEMENT_SUGGESTION["area"]


# Singleton instance
advisor = CareerAdvisor()
