"""
Coaching Knowledge Catalog

Static reference data used by the recommendation engine: career templates,
skill metadata (prerequisites, learning time, impact, resources), core skills
per field, and skills that transfer across fields.

Lookups are case-insensitive; field and skill lookups fall back to a substring
match so "senior data science" resolves to "data science".
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CareerTemplate:
    title: str
    description: str
    keywords: tuple[str, ...]
    required_skills: tuple[str, ...]
    related_skills: tuple[str, ...]
    industries: tuple[str, ...]
    growth_potential: float


@dataclass(frozen=True)
class SkillInfo:
    dependencies: tuple[str, ...] = ()
    learning_months: int = 4
    impact: float = 0.7
    resources: tuple[str, ...] = ("Online courses", "Books", "Practice projects")


CAREER_TEMPLATES: tuple[CareerTemplate, ...] = (
    CareerTemplate(
        title="Software Engineering",
        description="Build and maintain software applications and systems",
        keywords=("coding", "programming", "software", "development", "tech", "computer"),
        required_skills=("programming", "algorithms", "system design", "testing"),
        related_skills=("javascript", "python", "java", "coding", "programming"),
        industries=("technology", "software", "tech"),
        growth_potential=0.9,
    ),
    CareerTemplate(
        title="Data Science",
        description="Analyze data and build predictive models to drive business decisions",
        keywords=("data", "analytics", "statistics", "machine learning", "ai"),
        required_skills=("statistics", "python", "machine learning", "data visualization"),
        related_skills=("python", "sql", "statistics", "analytics", "data"),
        industries=("technology", "finance", "healthcare"),
        growth_potential=0.9,
    ),
    CareerTemplate(
        title="Product Management",
        description="Lead product strategy and development from conception to launch",
        keywords=("product", "strategy", "management", "leadership", "business"),
        required_skills=(
            "product strategy",
            "stakeholder management",
            "roadmapping",
            "analytics",
        ),
        related_skills=("management", "leadership", "strategy", "communication"),
        industries=("technology", "business", "consulting"),
        growth_potential=0.85,
    ),
    CareerTemplate(
        title="UX/UI Design",
        description="Design user experiences and interfaces for digital products",
        keywords=("design", "user experience", "ux", "ui", "creative", "visual"),
        required_skills=(
            "user research",
            "prototyping",
            "visual design",
            "interaction design",
        ),
        related_skills=("design", "figma", "sketch", "creative", "visual"),
        industries=("technology", "design", "creative"),
        growth_potential=0.8,
    ),
    CareerTemplate(
        title="Digital Marketing",
        description="Drive customer acquisition and engagement through digital channels",
        keywords=("marketing", "social media", "content", "advertising", "growth"),
        required_skills=("seo", "content marketing", "analytics", "social media"),
        related_skills=("marketing", "writing", "communication", "analytics"),
        industries=("marketing", "business", "technology"),
        growth_potential=0.75,
    ),
    CareerTemplate(
        title="Business Analysis",
        description="Bridge business needs and technical solutions through data-driven insights",
        keywords=("business", "analysis", "consulting", "strategy", "operations"),
        required_skills=(
            "business analysis",
            "requirements gathering",
            "process improvement",
            "sql",
        ),
        related_skills=("analysis", "sql", "excel", "business", "data"),
        industries=("business", "consulting", "finance"),
        growth_potential=0.75,
    ),
    CareerTemplate(
        title="Project Management",
        description="Plan, execute, and deliver projects on time and within budget",
        keywords=("project", "management", "coordination", "planning", "agile"),
        required_skills=(
            "project planning",
            "agile",
            "risk management",
            "stakeholder communication",
        ),
        related_skills=("management", "planning", "coordination", "leadership"),
        industries=("business", "technology", "consulting"),
        growth_potential=0.7,
    ),
)

DEFAULT_SKILL_INFO = SkillInfo()

SKILL_CATALOG: dict[str, SkillInfo] = {
    "programming": SkillInfo(
        (), 6, 0.9, ("Codecademy", "freeCodeCamp", "The Odin Project")
    ),
    "python": SkillInfo(
        ("programming",),
        4,
        0.85,
        ("Python.org tutorials", "Automate the Boring Stuff", "Real Python"),
    ),
    "javascript": SkillInfo(
        ("programming",),
        4,
        0.85,
        ("MDN Web Docs", "JavaScript.info", "Eloquent JavaScript"),
    ),
    "algorithms": SkillInfo(
        ("programming",),
        6,
        0.8,
        ("LeetCode", "HackerRank", "Introduction to Algorithms book"),
    ),
    "system design": SkillInfo(
        ("programming", "algorithms"),
        8,
        0.9,
        (
            "System Design Primer",
            "Designing Data-Intensive Applications",
            "Grokking System Design",
        ),
    ),
    "testing": SkillInfo(
        ("programming",),
        3,
        0.7,
        ("Test-Driven Development book", "Jest documentation", "Testing Library"),
    ),
    "statistics": SkillInfo(
        (),
        6,
        0.85,
        ("Khan Academy Statistics", "Statistics for Data Science", "Coursera Statistics"),
    ),
    "machine learning": SkillInfo(
        ("python", "statistics"),
        8,
        0.9,
        ("Coursera ML", "Fast.ai", "Hands-On Machine Learning book"),
    ),
    "data visualization": SkillInfo(
        ("python", "statistics"),
        3,
        0.7,
        ("Tableau tutorials", "D3.js", "Matplotlib documentation"),
    ),
    "sql": SkillInfo(
        (),
        2,
        0.8,
        ("SQLZoo", "Mode Analytics SQL Tutorial", "PostgreSQL documentation"),
    ),
    "product strategy": SkillInfo(
        (),
        6,
        0.85,
        ("Inspired by Marty Cagan", "Product School", "Reforge Product Strategy"),
    ),
    "stakeholder management": SkillInfo(
        (),
        4,
        0.8,
        ("Crucial Conversations book", "Leadership courses", "Communication workshops"),
    ),
    "roadmapping": SkillInfo(
        ("product strategy",),
        3,
        0.7,
        ("ProductPlan guides", "Aha! roadmapping", "Product Roadmap templates"),
    ),
    "analytics": SkillInfo(
        (),
        4,
        0.75,
        ("Google Analytics Academy", "Mixpanel guides", "Amplitude tutorials"),
    ),
    "user research": SkillInfo(
        (),
        4,
        0.8,
        ("Nielsen Norman Group", "User Interviews guide", "Just Enough Research book"),
    ),
    "prototyping": SkillInfo(
        ("user research",),
        3,
        0.75,
        ("Figma tutorials", "InVision guides", "Prototyping basics"),
    ),
    "visual design": SkillInfo(
        (),
        6,
        0.8,
        ("Refactoring UI", "Design principles courses", "Dribbble inspiration"),
    ),
    "interaction design": SkillInfo(
        ("user research", "prototyping"),
        5,
        0.8,
        ("Interaction Design Foundation", "UX Design courses", "Microinteractions book"),
    ),
    "seo": SkillInfo(
        resources=("Moz SEO Guide", "Google SEO Starter Guide", "Ahrefs Academy"),
    ),
    "content marketing": SkillInfo(
        resources=("HubSpot Academy", "Content Marketing Institute", "Copyblogger"),
    ),
    "leadership": SkillInfo(
        (),
        12,
        0.9,
        ("Leadership books", "Executive coaching", "Management training"),
    ),
    "mentoring": SkillInfo(
        ("leadership",),
        6,
        0.7,
        ("Mentoring guides", "Coaching skills", "Feedback frameworks"),
    ),
    "communication": SkillInfo(
        (),
        6,
        0.85,
        ("Toastmasters", "Business writing courses", "Presentation skills"),
    ),
}

FIELD_CORE_SKILLS: dict[str, tuple[str, ...]] = {
    "software engineering": (
        "programming",
        "algorithms",
        "system design",
        "testing",
        "version control",
    ),
    "data science": (
        "statistics",
        "python",
        "machine learning",
        "data visualization",
        "sql",
    ),
    "product management": (
        "product strategy",
        "stakeholder management",
        "roadmapping",
        "analytics",
        "user research",
    ),
    "ux design": (
        "user research",
        "prototyping",
        "visual design",
        "interaction design",
        "usability testing",
    ),
    "digital marketing": (
        "seo",
        "content marketing",
        "analytics",
        "social media",
        "email marketing",
    ),
    "business analysis": (
        "business analysis",
        "requirements gathering",
        "process improvement",
        "sql",
        "data analysis",
    ),
    "project management": (
        "project planning",
        "agile",
        "risk management",
        "stakeholder communication",
        "budgeting",
    ),
}

FIELD_DISPLAY_NAMES: dict[str, str] = {
    name: ("UX Design" if name == "ux design" else name.title())
    for name in FIELD_CORE_SKILLS
}

GENERIC_CORE_SKILLS: tuple[str, ...] = ("communication", "problem solving", "critical thinking")

UNIVERSAL_SKILLS: frozenset[str] = frozenset(
    {
        "communication",
        "leadership",
        "problem solving",
        "critical thinking",
        "project management",
        "teamwork",
        "time management",
        "presentation",
        "writing",
        "research",
        "analysis",
        "collaboration",
    }
)


@dataclass(frozen=True)
class FieldProfile:
    name: str
    core_skills: tuple[str, ...] = field(default=GENERIC_CORE_SKILLS)
    known: bool = False


def get_skill_info(skill: str) -> SkillInfo:
    """Metadata for a skill: exact key first, then the first substring match."""
    key = skill.strip().lower()
    if key in SKILL_CATALOG:
        return SKILL_CATALOG[key]
    for name, info in SKILL_CATALOG.items():
        if key and (name in key or key in name):
            return info
    return DEFAULT_SKILL_INFO


def get_field_profile(field_name: str) -> FieldProfile:
    """Core skills of a field: exact name, then substring match, then generic skills."""
    key = field_name.strip().lower()
    if key in FIELD_CORE_SKILLS:
        return FieldProfile(FIELD_DISPLAY_NAMES[key], FIELD_CORE_SKILLS[key], known=True)
    for name, skills in FIELD_CORE_SKILLS.items():
        if key and (name in key or key in name):
            return FieldProfile(FIELD_DISPLAY_NAMES[name], skills, known=True)
    return FieldProfile(field_name.strip())

