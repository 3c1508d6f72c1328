"""Keyword-overlap analysis between a job posting and a CV.

Scans both texts against a fixed skill vocabulary, derives the matching
and missing skills, a 0-100 match score and templated recommendations.
Pure and synchronous: the same inputs always produce the same result.
"""

import functools
import logging
import re
from collections.abc import Iterable, Sequence

from config import settings
from models.responses import AnalysisResult

logger = logging.getLogger(__name__)

SKILL_KEYWORDS: tuple[str, ...] = (
    # Programming languages
    "javascript", "typescript", "python", "java", "c++", "c#", "rust", "go",
    "ruby", "php", "swift", "kotlin",
    # Frontend
    "react", "vue", "angular", "svelte", "html", "css", "sass", "tailwind",
    "bootstrap",
    # Backend
    "node", "nodejs", "express", "django", "flask", "spring", "fastapi", "rails",
    # Databases
    "sql", "mysql", "postgresql", "mongodb", "redis", "firebase", "dynamodb",
    # Cloud & DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "ci/cd", "jenkins", "terraform",
    # Tools
    "git", "github", "gitlab", "jira", "figma", "vscode",
    # Soft skills
    "leadership", "communication", "teamwork", "problem-solving", "analytical",
    "creative", "organized", "motivated", "detail-oriented", "self-starter",
    "collaborative",
    # Experience keywords
    "senior", "junior", "lead", "manager", "architect", "full-stack", "frontend",
    "backend",
    # Qualifications
    "degree", "bachelor", "master", "phd", "certified", "certification",
    # Other tech
    "api", "rest", "graphql", "microservices", "agile", "scrum", "testing", "tdd",
)

SHORT_CV_WORDS = 100
LONG_CV_WORDS = 1000
MAX_LISTED_SKILLS = 5

# (minimum score, recommendations) checked top-down
_SCORE_BANDS: tuple[tuple[int, tuple[str, str]], ...] = (
    (80, (
        "🎉 Excellent match! Your CV aligns very well with this job posting.",
        "📝 Consider tailoring your cover letter to highlight your matching skills.",
    )),
    (60, (
        "👍 Good match! You have many of the required skills.",
        "📚 Consider gaining experience in the missing skills to improve your chances.",
    )),
    (40, (
        "🤔 Partial match. You have some relevant skills but are missing key requirements.",
        "💡 Focus on acquiring the missing technical skills through courses or projects.",
    )),
    (0, (
        "⚠️ Low match. This position may require significant skill development.",
        "🎯 Consider roles that better match your current skill set, or invest time "
        "in learning the required skills.",
    )),
)


def build_vocabulary(extra_terms: Iterable[str] = ()) -> tuple[str, ...]:
    """Built-in terms followed by normalized extras, duplicates dropped."""
    vocabulary = list(SKILL_KEYWORDS)
    seen = set(vocabulary)
    for term in extra_terms:
        term = term.strip().lower()
        if term and term not in seen:
            vocabulary.append(term)
            seen.add(term)
    return tuple(vocabulary)


@functools.cache
def active_vocabulary() -> tuple[str, ...]:
    """Vocabulary in effect for this process (built-in + configured extras)."""
    vocabulary = build_vocabulary(settings.extra_skill_keywords)
    if len(vocabulary) > len(SKILL_KEYWORDS):
        logger.info(
            "Skill vocabulary extended with %d configured terms",
            len(vocabulary) - len(SKILL_KEYWORDS),
        )
    return vocabulary


@functools.lru_cache(maxsize=1024)
def _skill_pattern(term: str) -> re.Pattern:
    # Whole-word match: no alphanumeric neighbour on either side.
    # Lookarounds instead of \b so terms ending in "+" or "#" still match.
    return re.compile(rf"(?<![^\W_]){re.escape(term)}(?![^\W_])")


def extract_skills(text: str, vocabulary: Sequence[str] | None = None) -> list[str]:
    """Return the sorted vocabulary terms found in ``text``."""
    if vocabulary is None:
        vocabulary = active_vocabulary()
    normalized = text.lower()
    found = {term for term in vocabulary if _skill_pattern(term).search(normalized)}
    return sorted(found)


def compute_match_score(matching_count: int, job_count: int) -> int:
    """Percentage of job skills matched, rounded half-up. 0 if no job skills."""
    if job_count <= 0:
        return 0
    # Integer form of floor(100 * m / n + 0.5)
    return (200 * matching_count + job_count) // (2 * job_count)


def count_words(text: str) -> int:
    return len(text.split())


def generate_recommendations(
    match_score: int,
    matching_skills: Sequence[str],
    missing_skills: Sequence[str],
    cv: str,
) -> list[str]:
    """Build advisory strings.

    Order: score band (two strings), missing skills, CV length,
    matching skills highlight. The last three are optional.
    """
    recommendations: list[str] = []

    for minimum, band in _SCORE_BANDS:
        if match_score >= minimum:
            recommendations.extend(band)
            break

    if 0 < len(missing_skills) <= MAX_LISTED_SKILLS:
        recommendations.append(
            f"📚 Priority skills to learn: {', '.join(missing_skills)}"
        )
    elif len(missing_skills) > MAX_LISTED_SKILLS:
        recommendations.append(
            f"📚 Top skills to focus on: {', '.join(missing_skills[:MAX_LISTED_SKILLS])}"
        )

    word_count = count_words(cv)
    if word_count < SHORT_CV_WORDS:
        recommendations.append(
            "✍️ Your CV seems short. Add more details about your experience and accomplishments."
        )
    elif word_count > LONG_CV_WORDS:
        recommendations.append(
            "📄 Your CV is quite detailed. Consider condensing it for better readability."
        )

    if matching_skills:
        recommendations.append(
            "✅ Highlight these matching skills prominently: "
            f"{', '.join(matching_skills[:MAX_LISTED_SKILLS])}"
        )

    return recommendations


def analyze(
    job_posting: str,
    cv: str,
    vocabulary: Sequence[str] | None = None,
) -> AnalysisResult:
    """Compare a job posting against a CV by skill keyword overlap."""
    job_skills = extract_skills(job_posting, vocabulary)
    cv_skills = extract_skills(cv, vocabulary)

    cv_lookup = {skill.lower() for skill in cv_skills}
    matching_skills = [s for s in job_skills if s.lower() in cv_lookup]
    missing_skills = [s for s in job_skills if s not in matching_skills]

    match_score = compute_match_score(len(matching_skills), len(job_skills))

    logger.debug(
        "Keyword analysis: %d job skills, %d CV skills, %d matched, score %d",
        len(job_skills), len(cv_skills), len(matching_skills), match_score,
    )

    return AnalysisResult(
        job_skills=job_skills,
        cv_skills=cv_skills,
        matching_skills=matching_skills,
        missing_skills=missing_skills,
        match_score=match_score,
        recommendations=generate_recommendations(
            match_score, matching_skills, missing_skills, cv
        ),
    )
