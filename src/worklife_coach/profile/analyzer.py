"""
Profile Analyzer

Pure, stateless analysis of a profile snapshot: strengths and weaknesses,
challenge categorization, skill gaps against a career path, readiness for a
goal, progress over a time window, and profile completeness.
"""

from typing import Optional

from ..models.analysis import (
    CareerStage,
    GapPriority,
    ProfileAnalysis,
    ProfileCompleteness,
    ProgressReport,
    ReadinessFactors,
    ReadinessScore,
    SkillGap,
    TimeRange,
)
from ..models.core import CareerPath, ChallengeType, Goal, GoalType, Skill, UserProfile
from ..utils.rules import Rule, RuleTable


PROFICIENT_LEVEL = 7
WEAK_LEVEL = 4
HIGH_CONFIDENCE = 0.7
LOW_CONFIDENCE = 0.5
LOW_MOTIVATION = 0.5
LOW_SKILL_ALIGNMENT = 0.5
EXPERIENCED_YEARS = 5
EARLY_CAREER_YEARS = 3
JUNIOR_YEARS = 2

# Used when no challenge keyword matches. A product assumption, not a
# verified requirement; change here if the policy changes.
DEFAULT_CHALLENGE_TYPE = ChallengeType.DIRECTION

CHALLENGE_RULES: RuleTable[ChallengeType] = RuleTable(
    [
        Rule(
            ChallengeType.DIRECTION,
            keywords=(
                "lost",
                "direction",
                "confused",
                "unclear",
                "don't know what",
                "unsure about path",
            ),
        ),
        Rule(
            ChallengeType.SKILLS,
            keywords=("skill", "learn", "knowledge", "technical", "don't know how"),
        ),
        Rule(
            ChallengeType.CONFIDENCE,
            keywords=(
                "confidence",
                "confident",
                "doubt",
                "imposter",
                "not good enough",
                "afraid",
                "anxious",
            ),
        ),
        Rule(
            ChallengeType.OVERWHELM,
            keywords=("overwhelm", "too much", "stressed", "burned out", "can't handle"),
        ),
        Rule(
            ChallengeType.TRANSITION,
            keywords=(
                "transition",
                "change career",
                "switch",
                "move to",
                "different field",
            ),
        ),
        Rule(
            ChallengeType.STAGNATION,
            keywords=("stagnant", "stuck", "not growing", "plateau", "same place"),
        ),
    ],
    default=DEFAULT_CHALLENGE_TYPE,
    name="challenge_rules",
)

MISSING_SKILL_ESTIMATE = "3-6 months"

BLOCKER_SKILL_GAPS = "Significant skill gaps exist"
BLOCKER_LOW_MOTIVATION = "Low motivation level"
RECOMMEND_FOUNDATIONS = "Focus on acquiring foundational skills first"
RECOMMEND_MOTIVATION = 'Work on clarifying your "why" and building intrinsic motivation'
RECOMMEND_MILESTONES = "Consider breaking this long-term goal into smaller milestones"


def categorize_challenge(description: str) -> ChallengeType:
    """Map free text to a challenge type; every input yields a valid type."""
    return CHALLENGE_RULES.classify(description or "")


def estimate_learning_time(current_level: int, target_level: int) -> str:
    gap = target_level - current_level
    if gap <= 2:
        return "1-2 months"
    if gap <= 4:
        return "3-4 months"
    if gap <= 6:
        return "5-6 months"
    return "6+ months"


def find_skill(skills: list[Skill], name: str) -> Optional[Skill]:
    """Case-insensitive exact name lookup."""
    name_lower = name.lower()
    return next((s for s in skills if s.name.lower() == name_lower), None)


class ProfileAnalyzer:
    """Analyzes user profiles, identifies gaps, assesses readiness, and tracks progress."""

    def analyze_profile(self, profile: UserProfile) -> ProfileAnalysis:
        return ProfileAnalysis(
            strengths=self._identify_strengths(profile),
            weaknesses=self._identify_weaknesses(profile),
            interests=list(profile.career_info.interests),
            career_stage=self._determine_career_stage(profile),
            confidence_level=profile.mindset.confidence_level,
            primary_challenges=list(profile.career_info.struggles),
        )

    def categorize_challenge(self, description: str) -> ChallengeType:
        return categorize_challenge(description)

    def identify_gaps(self, profile: UserProfile, target_path: CareerPath) -> list[SkillGap]:
        """
        Compare current skills with the skills a career path requires.

        Missing skills are high-priority gaps from level 0; skills below
        proficiency are high priority under level 4, medium otherwise.
        """
        gaps: list[SkillGap] = []

        for required in target_path.required_skills:
            current = find_skill(profile.skills.current, required)

            if current is None:
                gaps.append(
                    SkillGap(
                        skill=required,
                        current_level=0,
                        target_level=PROFICIENT_LEVEL,
                        priority=GapPriority.HIGH,
                        estimated_learning_time=MISSING_SKILL_ESTIMATE,
                    )
                )
            elif current.level < PROFICIENT_LEVEL:
                gaps.append(
                    SkillGap(
                        skill=required,
                        current_level=current.level,
                        target_level=PROFICIENT_LEVEL,
                        priority=(
                            GapPriority.HIGH
                            if current.level < WEAK_LEVEL
                            else GapPriority.MEDIUM
                        ),
                        estimated_learning_time=estimate_learning_time(
                            current.level, PROFICIENT_LEVEL
                        ),
                    )
                )

        return gaps

    def assess_readiness(self, profile: UserProfile, goal: Goal) -> ReadinessScore:
        """
        Score readiness for a goal in [0, 1].

        score = 0.4 * skill alignment + 0.3 * experience + 0.3 * motivation
        """
        skill_alignment = self._skill_alignment(profile)
        experience_level = min(profile.personal_info.years_of_experience / 10, 1.0)
        motivation_level = profile.mindset.motivation_level

        score = skill_alignment * 0.4 + experience_level * 0.3 + motivation_level * 0.3

        blockers: list[str] = []
        recommendations: list[str] = []

        if skill_alignment < LOW_SKILL_ALIGNMENT:
            blockers.append(BLOCKER_SKILL_GAPS)
            recommendations.append(RECOMMEND_FOUNDATIONS)

        if motivation_level < LOW_MOTIVATION:
            blockers.append(BLOCKER_LOW_MOTIVATION)
            recommendations.append(RECOMMEND_MOTIVATION)

        if (
            profile.personal_info.years_of_experience < JUNIOR_YEARS
            and goal.type == GoalType.LONG_TERM
        ):
            recommendations.append(RECOMMEND_MILESTONES)

        return ReadinessScore(
            score=min(score, 1.0),
            factors=ReadinessFactors(
                skill_alignment=skill_alignment,
                experience_level=experience_level,
                motivation_level=motivation_level,
            ),
            blockers=blockers,
            recommendations=recommendations,
        )

    def track_progress(self, profile: UserProfile, timeframe: TimeRange) -> ProgressReport:
        completed_milestones = sum(
            1
            for m in profile.progress.milestones
            if m.completed
            and m.completed_date is not None
            and timeframe.start <= m.completed_date <= timeframe.end
        )
        goals_achieved = sum(
            1
            for g in profile.career_info.goals
            if g.target_date is not None and g.target_date <= timeframe.end
        )
        total_milestones = len(profile.progress.milestones)

        return ProgressReport(
            user_id=profile.user_id,
            timeframe=timeframe,
            completed_actions=len(profile.progress.completed_actions),
            completed_milestones=completed_milestones,
            skills_acquired=[
                s.name for s in profile.skills.current if s.level >= PROFICIENT_LEVEL
            ],
            goals_achieved=goals_achieved,
            overall_progress=(
                completed_milestones / total_milestones if total_milestones else 0.0
            ),
        )

    def check_profile_completeness(self, profile: UserProfile) -> ProfileCompleteness:
        missing: list[str] = []

        if not profile.personal_info.current_role:
            missing.append("current_role")
        if not profile.personal_info.education:
            missing.append("education")
        if not profile.career_info.goals:
            missing.append("goals")
        if not profile.career_info.interests:
            missing.append("interests")
        if not profile.career_info.struggles:
            missing.append("struggles")

        return ProfileCompleteness(is_complete=not missing, missing_fields=missing)

    # Private helpers

    def _identify_strengths(self, profile: UserProfile) -> list[str]:
        strengths = [
            s.name for s in profile.skills.current if s.level >= PROFICIENT_LEVEL
        ]
        if profile.mindset.confidence_level >= HIGH_CONFIDENCE:
            strengths.append("High self-confidence")
        if profile.personal_info.years_of_experience >= EXPERIENCED_YEARS:
            strengths.append("Significant work experience")
        return strengths

    def _identify_weaknesses(self, profile: UserProfile) -> list[str]:
        weaknesses = [
            f"Limited {s.name}" for s in profile.skills.current if s.level < WEAK_LEVEL
        ]
        if profile.mindset.confidence_level < LOW_CONFIDENCE:
            weaknesses.append("Low self-confidence")
        weaknesses.extend(c.description for c in profile.career_info.struggles)
        return weaknesses

    def _determine_career_stage(self, profile: UserProfile) -> CareerStage:
        if any(c.type == ChallengeType.TRANSITION for c in profile.career_info.struggles):
            return CareerStage.TRANSITION
        if profile.personal_info.years_of_experience < EARLY_CAREER_YEARS:
            return CareerStage.EARLY
        return CareerStage.MID

    def _skill_alignment(self, profile: UserProfile) -> float:
        target_count = len(profile.skills.target)
        if target_count == 0:
            return 1.0
        return min(len(profile.skills.current) / target_count, 1.0)
