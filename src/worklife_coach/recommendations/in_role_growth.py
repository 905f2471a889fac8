"""
In-Role Growth Advice

Growth options for users who want to advance without leaving their current
role: concrete opportunities, skills their employer is likely to value, an
honest read on whether the role has stalled, and, only when it has,
alternative paths.
"""

from typing import Optional

from ..models.core import CareerPath, ChallengeType, UserProfile
from ..models.recommendations import (
    GrowthOpportunity,
    InRoleGrowthAnalysis,
    SkillRecommendation,
    StagnationAssessment,
)
from .career_paths import slugify

HIGH_STAGNATION_SEVERITY = 7
MEDIUM_STAGNATION_SEVERITY = 4
LONG_TENURE_YEARS = 5
LOW_MOTIVATION = 0.3

HONEST_ASSESSMENTS = {
    "high": (
        "Based on your profile, it appears your current role has significant growth "
        "limitations. While there may be some opportunities to expand your "
        "responsibilities, you may need to consider alternative paths to achieve "
        "your career goals."
    ),
    "medium": (
        "Your current role shows some signs of stagnation. There are likely "
        "opportunities to grow within your position, but they may be limited. It's "
        "worth exploring both in-role advancement and alternative options."
    ),
    "low": (
        "While you may be experiencing some challenges, there appear to be "
        "opportunities for growth in your current role. Focus on the identified "
        "opportunities while staying open to other possibilities."
    ),
}


def _has_skill(profile: UserProfile, skill: str) -> bool:
    target = skill.lower()
    return any(
        name == target or target in name or name in target
        for name in (s.name.lower() for s in profile.skills.current)
    )


def identify_opportunities(profile: UserProfile) -> list[GrowthOpportunity]:
    years = profile.personal_info.years_of_experience
    opportunities: list[GrowthOpportunity] = []

    if years >= 2:
        opportunities.append(
            GrowthOpportunity(
                type="responsibility",
                description="Lead a small project or initiative within your team",
                estimated_impact="high",
            )
        )
    if years >= 3 and len(profile.skills.current) >= 3:
        opportunities.append(
            GrowthOpportunity(
                type="responsibility",
                description="Mentor junior team members or new hires",
                estimated_impact="medium",
            )
        )

    opportunities.append(
        GrowthOpportunity(
            type="visibility",
            description="Present your work at team meetings or company all-hands",
            estimated_impact="medium",
        )
    )
    if years >= 2:
        opportunities.append(
            GrowthOpportunity(
                type="visibility",
                description="Volunteer for cross-functional projects to expand your network",
                estimated_impact="high",
            )
        )

    if profile.skills.learning:
        names = ", ".join(s.name for s in profile.skills.learning)
        opportunities.append(
            GrowthOpportunity(
                type="skill_development",
                description=f"Complete your current learning goals: {names}",
                estimated_impact="high",
            )
        )
    opportunities.append(
        GrowthOpportunity(
            type="skill_development",
            description="Identify and learn skills that are valued by your current employer",
            estimated_impact="high",
        )
    )

    if years >= 4:
        opportunities.append(
            GrowthOpportunity(
                type="leadership",
                description="Take ownership of a key area or process within your team",
                estimated_impact="high",
            )
        )
    return opportunities


def recommend_employer_valued_skills(profile: UserProfile) -> list[SkillRecommendation]:
    """Skills the current employer likely rewards, highest priority first."""
    role = (profile.personal_info.current_role or "").lower()
    candidates: list[SkillRecommendation] = []

    if "engineer" in role or "developer" in role:
        candidates.append(
            SkillRecommendation(
                skill="Testing",
                priority=0.85,
                reasoning=(
                    "Testing skills are highly valued by employers and improve code "
                    "quality in your current role"
                ),
                learning_resources=[
                    "Jest documentation",
                    "Testing Library",
                    "Test-Driven Development book",
                ],
                estimated_time="2-3 months",
            )
        )
        candidates.append(
            SkillRecommendation(
                skill="System Design",
                priority=0.9,
                reasoning=(
                    "System design expertise is critical for senior engineering roles "
                    "and demonstrates technical leadership"
                ),
                learning_resources=[
                    "System Design Primer",
                    "Designing Data-Intensive Applications",
                ],
                estimated_time="6-8 months",
                dependencies=["programming"],
            )
        )

    if "product" in role:
        candidates.append(
            SkillRecommendation(
                skill="Stakeholder Management",
                priority=0.9,
                reasoning=(
                    "Stakeholder management is essential for product roles and "
                    "increases your influence within the organization"
                ),
                learning_resources=["Crucial Conversations book", "Leadership courses"],
                estimated_time="3-4 months",
            )
        )
        candidates.append(
            SkillRecommendation(
                skill="Analytics",
                priority=0.8,
                reasoning="Data-driven decision making is highly valued in product management",
                learning_resources=["Google Analytics Academy", "Mixpanel guides"],
                estimated_time="3-4 months",
            )
        )

    if "design" in role:
        candidates.append(
            SkillRecommendation(
                skill="User Research",
                priority=0.85,
                reasoning=(
                    "User research skills are highly valued in design roles and "
                    "demonstrate strategic thinking"
                ),
                learning_resources=["Nielsen Norman Group", "Just Enough Research book"],
                estimated_time="3-4 months",
            )
        )

    if profile.personal_info.years_of_experience >= 2:
        candidates.append(
            SkillRecommendation(
                skill="Communication",
                priority=0.85,
                reasoning=(
                    "Strong communication skills are valued across all roles and "
                    "essential for career advancement"
                ),
                learning_resources=["Toastmasters", "Business writing courses"],
                estimated_time="4-6 months",
            )
        )

    recommendations = [c for c in candidates if not _has_skill(profile, c.skill)]
    recommendations.sort(key=lambda r: r.priority, reverse=True)
    return recommendations


def assess_stagnation(profile: UserProfile) -> Optional[StagnationAssessment]:
    """
    Decide whether the current role has stalled.

    A role counts as stalled when the user reports feeling stuck, when a
    direction struggle meets five or more years of experience, or when three
    or more years of experience come with little recorded progress.

    Returns:
        The assessment, or None when the role has not stalled
    """
    years = profile.personal_info.years_of_experience
    struggles = profile.career_info.struggles
    stagnation = next((c for c in struggles if c.type == ChallengeType.STAGNATION), None)
    has_direction = any(c.type == ChallengeType.DIRECTION for c in struggles)
    completed_milestones = sum(1 for m in profile.progress.milestones if m.completed)
    low_progress = len(profile.progress.completed_actions) < 3 and completed_milestones < 2
    long_tenure = years >= LONG_TENURE_YEARS

    if not (
        stagnation is not None
        or (has_direction and long_tenure)
        or (low_progress and years >= 3)
    ):
        return None

    severity = "low"
    reasons: list[str] = []
    limitations: list[str] = []

    if stagnation is not None:
        if stagnation.severity >= HIGH_STAGNATION_SEVERITY:
            severity = "high"
        elif stagnation.severity >= MEDIUM_STAGNATION_SEVERITY:
            severity = "medium"
        reasons.append("You have explicitly identified feeling stuck in your current role")

    if long_tenure and low_progress:
        if severity != "high":
            severity = "medium"
        reasons.append("Limited recent progress despite significant experience")
        limitations.append("Few advancement opportunities in current position")

    if has_direction:
        reasons.append("Lack of clear direction may indicate limited growth path in current role")
        limitations.append("Unclear career progression within current organization")

    if profile.mindset.motivation_level < LOW_MOTIVATION:
        reasons.append("Low motivation suggests your current work is no longer engaging you")

    if not reasons and low_progress:
        reasons.append("Limited progress in completing actions and milestones")
        limitations.append("May need to increase engagement with growth activities")

    return StagnationAssessment(
        is_stagnant=True,
        severity=severity,
        reasons=reasons,
        honest_assessment=HONEST_ASSESSMENTS[severity],
        growth_limitations=limitations,
    )


def generate_alternative_paths(profile: UserProfile) -> list[CareerPath]:
    role = profile.personal_info.current_role
    industry = profile.personal_info.industry
    interests = profile.career_info.interests
    current = [s.name for s in profile.skills.current]
    paths: list[CareerPath] = []

    if industry:
        paths.append(
            CareerPath(
                id=f"path-internal-transfer-{slugify(industry)}",
                title=f"Internal Transfer within {industry}",
                description=(
                    "Explore opportunities in different teams or departments within "
                    "your current organization"
                ),
                reasoning=(
                    "Internal transfers allow you to leverage your existing knowledge "
                    "of the company while finding new growth opportunities"
                ),
                fit_score=0.75,
                required_skills=list(current),
                time_to_transition="3-6 months",
                growth_potential=0.7,
            )
        )
    if role:
        paths.append(
            CareerPath(
                id=f"path-external-{slugify(role)}",
                title=f"{role} at a Different Company",
                description=(
                    "Seek similar roles at companies with better growth opportunities "
                    "or culture fit"
                ),
                reasoning=(
                    "Moving to a new company in a similar role can provide fresh "
                    "challenges and advancement opportunities"
                ),
                fit_score=0.8,
                required_skills=list(current),
                time_to_transition="2-4 months",
                growth_potential=0.75,
            )
        )
    if interests:
        interest = interests[0]
        paths.append(
            CareerPath(
                id=f"path-adjacent-{slugify(interest)}",
                title=f"Transition to {interest}-focused Role",
                description=(
                    f"Pivot to a role that aligns more closely with your interests in {interest}"
                ),
                reasoning=(
                    f"Your interest in {interest} suggests this could be a more "
                    "fulfilling career direction"
                ),
                fit_score=0.7,
                required_skills=[*current, interest],
                time_to_transition="6-12 months",
                growth_potential=0.8,
            )
        )
    if profile.personal_info.years_of_experience >= LONG_TENURE_YEARS:
        paths.append(
            CareerPath(
                id="path-leadership-track",
                title="Leadership or Management Track",
                description="Transition into a leadership role managing teams or projects",
                reasoning="Your experience level positions you well for leadership opportunities",
                fit_score=0.65,
                required_skills=[*current, "Leadership", "Communication", "Mentoring"],
                time_to_transition="6-12 months",
                growth_potential=0.85,
            )
        )
    return paths


def analyze_in_role_growth(profile: UserProfile) -> InRoleGrowthAnalysis:
    """Opportunities, employer-valued skills, and a stagnation check for the current role."""
    assessment = assess_stagnation(profile)
    return InRoleGrowthAnalysis(
        opportunities=identify_opportunities(profile),
        skill_recommendations=recommend_employer_valued_skills(profile),
        stagnation_assessment=assessment,
        alternative_paths=generate_alternative_paths(profile) if assessment else [],
    )
