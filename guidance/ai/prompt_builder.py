from typing import Dict, Any, List
import json
from .safety_rules import SAFETY_RULES, SYSTEM_ROLE_DEFINITION


def build_system_prompt() -> str:
    """Constructs the static counsellor system prompt."""
    rules_str = "\n".join([f"- {rule}" for rule in SAFETY_RULES])

    return f"""{SYSTEM_ROLE_DEFINITION}
GUIDELINES:
{rules_str}

If asked about specific programs or requirements, provide accurate information based on current Namibian university standards.
"""


def build_recommendations_prompt(
    student_profile: Dict[str, Any],
    matches: Dict[str, Any],
    limit: int = 5,
) -> str:
    """
    Constructs the AI recommendations prompt from profile and match results.
    Truncates top matches to save tokens.
    """
    subjects = [
        f"{s.get('subject') or s.get('name')} ({s.get('level', '')} {s.get('grade', '')})".strip()
        for s in student_profile.get("subjects", [])
    ]
    interests = student_profile.get("interests") or []
    universities = student_profile.get("preferredUniversities") or []

    top_matches = top_matches_from(matches)[:limit]

    return f"""{build_system_prompt()}
Student Profile:
- Academic Results: {", ".join(subjects) or "Not provided"}
- Total Points: {student_profile.get("totalPoints")}
- Interests: {", ".join(interests) or "Not specified"}
- Preferred Universities: {", ".join(universities) or "Any"}

Program Matches Found:
{json.dumps(_minimize_matches(top_matches), indent=2)}

Please provide a comprehensive career guidance response that includes:

1. A personalized, encouraging message for the student (first line)
2. Top program recommendations with detailed reasoning
3. Specific improvement suggestions if needed
4. Current career market insights for Namibia
"""


def build_document_analysis_prompt(subjects: List[Dict[str, Any]], total_points: int) -> str:
    results = ", ".join(f"{s['name']}: {s['grade']} ({s['points']} points)" for s in subjects)
    return f"""As an expert in Namibian education, analyze these extracted academic results and provide insights:

Subjects and Grades: {results}
Total Points: {total_points}

Provide a brief analysis of the student's academic strengths and areas for improvement based on these results."""


def top_matches_from(matches: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Top matches from either full MatchingResults or a bare {topMatches: [...]}."""
    if not isinstance(matches, dict):
        return []
    recommendations = matches.get("recommendations") or {}
    return recommendations.get("topMatches") or matches.get("topMatches") or []


def _minimize_matches(matches: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Helper to reduce match dict size for prompt."""
    minimized = []
    for m in matches:
        program = m.get("program") or {}
        minimized.append({
            "program": program.get("programName"),
            "university": program.get("institution"),
            "faculty": program.get("faculty"),
            "score": m.get("matchScore"),
            "status": m.get("eligibilityStatus"),
            "careers": (program.get("careerPossibilities") or [])[:3],
        })
    return minimized
