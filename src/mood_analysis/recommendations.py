"""Advisory messages derived from detected patterns."""

from typing import List, Sequence

from .episode_detector import DetectedPattern, PatternSeverity, PatternType

HYPOMANIC_ADVICE = "Consider discussing high-energy periods with a healthcare provider."
HYPOMANIC_HIGH_RISK_ADVICE = (
    "Consider discussing your high-energy periods with a healthcare provider, "
    "especially since they involved risky behaviors."
)
DEPRESSIVE_ADVICE = "Your data shows periods of low mood. Reach out to your support system."
DEPRESSIVE_SEVERE_ADVICE = (
    "Your data shows periods of significant low mood and functional impairment. "
    "Please reach out to a mental health professional."
)
KEEP_TRACKING_ADVICE = "Keep tracking to build more comprehensive data for analysis."
DISCLAIMER = (
    "Remember: This tool provides insights but not medical diagnoses. "
    "Always consult with healthcare providers for proper evaluation."
)


def generate_recommendations(patterns: Sequence[DetectedPattern]) -> List[str]:
    """
    Map detected patterns to advice. Every applicable rule fires and the
    disclaimer is always last.
    """
    recommendations = []

    hypomanic = [p for p in patterns if p.pattern_type == PatternType.HYPOMANIC]
    depressive = [p for p in patterns if p.pattern_type == PatternType.DEPRESSIVE]

    if hypomanic:
        if any(p.severity == PatternSeverity.HIGH for p in hypomanic):
            recommendations.append(HYPOMANIC_HIGH_RISK_ADVICE)
        else:
            recommendations.append(HYPOMANIC_ADVICE)

    if depressive:
        if any(p.severity == PatternSeverity.SEVERE for p in depressive):
            recommendations.append(DEPRESSIVE_SEVERE_ADVICE)
        else:
            recommendations.append(DEPRESSIVE_ADVICE)

    if not patterns:
        recommendations.append(KEEP_TRACKING_ADVICE)

    recommendations.append(DISCLAIMER)
    return recommendations
