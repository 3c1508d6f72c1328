from pydantic import BaseModel, ConfigDict


class AnalysisResult(BaseModel):
    """Keyword Analyzer output.

    ``matching_skills`` and ``missing_skills`` partition ``job_skills``.
    """
    model_config = ConfigDict(frozen=True)

    job_skills: list[str] = []
    cv_skills: list[str] = []
    matching_skills: list[str] = []
    missing_skills: list[str] = []
    match_score: int = 0  # 0-100
    recommendations: list[str] = []


class PhraseMatch(BaseModel):
    """A job phrase paired with its closest CV phrase."""
    model_config = ConfigDict(frozen=True)

    job_phrase: str
    cv_phrase: str
    similarity: float  # cosine similarity


class EmbeddingComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_similarity: float = 0.0
    job_phrases: list[str] = []
    cv_phrases: list[str] = []
    matches: list[PhraseMatch] = []
    gaps: list[str] = []


class ExtractedText(BaseModel):
    filename: str
    text: str
    word_count: int = 0
