import pytest

from models.responses import AnalysisResult
from services.text_analyzer import (
    SKILL_KEYWORDS,
    analyze,
    build_vocabulary,
    compute_match_score,
    count_words,
    extract_skills,
    generate_recommendations,
)


# --- Skill extraction ---


def test_extract_skills_sorted_and_deduplicated():
    text = "Python, React and more React. Docker! python again."
    assert extract_skills(text) == ["docker", "python", "react"]


def test_extract_skills_case_insensitive():
    assert extract_skills("Senior JavaScript engineer") == ["javascript", "senior"]


def test_extract_skills_whole_word_only():
    assert "javascript" not in extract_skills("I am a javascripter")
    assert "java" not in extract_skills("JavaScript only")
    assert "go" not in extract_skills("good gopher")


def test_extract_skills_special_characters():
    skills = extract_skills("I use C++ daily, some C# too, and CI/CD pipelines")
    assert "c++" in skills
    assert "c#" in skills
    assert "ci/cd" in skills


def test_extract_skills_special_term_needs_boundary():
    assert "c++" not in extract_skills("c++17 features")


def test_extract_skills_hyphenated_terms():
    skills = extract_skills("Full-Stack developer, detail-oriented and a self-starter")
    assert {"full-stack", "detail-oriented", "self-starter"} <= set(skills)


def test_extract_skills_punctuation_is_boundary():
    assert "node" in extract_skills("Built services on Node.js")


def test_extract_skills_empty():
    assert extract_skills("") == []


def test_extract_skills_custom_vocabulary():
    assert extract_skills("Elixir and Python", vocabulary=("elixir",)) == ["elixir"]


# --- Vocabulary ---


def test_skill_keywords_unique_lowercase():
    assert len(SKILL_KEYWORDS) == len(set(SKILL_KEYWORDS))
    assert all(k == k.lower() for k in SKILL_KEYWORDS)


def test_build_vocabulary_appends_normalized_extras():
    vocabulary = build_vocabulary(["  Elixir ", "python", "", "OCaml", "elixir"])
    assert vocabulary[: len(SKILL_KEYWORDS)] == SKILL_KEYWORDS
    assert vocabulary[len(SKILL_KEYWORDS):] == ("elixir", "ocaml")


# --- Score ---


@pytest.mark.parametrize(
    "matching,job,expected",
    [
        (0, 0, 0),
        (0, 4, 0),
        (1, 2, 50),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),  # 12.5 rounds half-up
        (5, 5, 100),
    ],
)
def test_compute_match_score(matching, job, expected):
    assert compute_match_score(matching, job) == expected


def test_count_words_ignores_extra_whitespace():
    assert count_words("  one\ttwo\n\nthree  ") == 3
    assert count_words("") == 0


# --- analyze ---


def test_analyze_scenario_partial_match():
    result = analyze(
        "Looking for React, TypeScript developer with 3+ years",
        "Experienced in React and JavaScript",
    )
    assert isinstance(result, AnalysisResult)
    assert result.job_skills == ["react", "typescript"]
    assert result.cv_skills == ["javascript", "react"]
    assert result.matching_skills == ["react"]
    assert result.missing_skills == ["typescript"]
    assert result.match_score == 50


def test_analyze_empty_job_posting():
    result = analyze("", "anything")
    assert result.job_skills == []
    assert result.matching_skills == []
    assert result.missing_skills == []
    assert result.match_score == 0


def test_analyze_empty_inputs():
    result = analyze("", "")
    assert result.match_score == 0
    assert result.cv_skills == []
    assert len(result.recommendations) >= 2


def test_analyze_is_idempotent():
    jd = "Senior Python engineer: Django, PostgreSQL, Docker, AWS, agile"
    cv = "Python and Django developer. Docker. Scrum."
    assert analyze(jd, cv) == analyze(jd, cv)


@pytest.mark.parametrize(
    "jd,cv",
    [
        ("Python, React, Docker, Kubernetes, AWS", "Python and AWS"),
        ("Leadership and communication", "great communication"),
        ("Go Rust C++", ""),
        ("", "Python"),
        ("python java ruby php swift kotlin", "PHP SWIFT KOTLIN RUBY JAVA PYTHON"),
    ],
)
def test_analyze_partition_and_bounds(jd, cv):
    result = analyze(jd, cv)
    assert set(result.matching_skills) | set(result.missing_skills) == set(result.job_skills)
    assert not set(result.matching_skills) & set(result.missing_skills)
    assert 0 <= result.match_score <= 100


def test_analyze_full_match():
    result = analyze("python java ruby", "RUBY, Java and Python")
    assert result.match_score == 100
    assert result.missing_skills == []


def test_analyze_result_is_frozen():
    result = analyze("python", "python")
    with pytest.raises(Exception):
        result.match_score = 0


# --- Recommendations ---


def test_recommendations_order():
    cv = " ".join(["word"] * 50)
    recs = generate_recommendations(85, ["react", "node"], ["go"], cv)
    assert recs[0].startswith("🎉 Excellent match!")
    assert recs[1].startswith("📝 Consider tailoring your cover letter")
    assert recs[2] == "📚 Priority skills to learn: go"
    assert recs[3].startswith("✍️ Your CV seems short.")
    assert recs[4] == "✅ Highlight these matching skills prominently: react, node"
    assert len(recs) == 5


@pytest.mark.parametrize(
    "score,prefix",
    [
        (100, "🎉 Excellent match!"),
        (80, "🎉 Excellent match!"),
        (79, "👍 Good match!"),
        (60, "👍 Good match!"),
        (59, "🤔 Partial match."),
        (40, "🤔 Partial match."),
        (39, "⚠️ Low match."),
        (0, "⚠️ Low match."),
    ],
)
def test_recommendations_score_bands(score, prefix):
    recs = generate_recommendations(score, [], [], " ".join(["w"] * 200))
    assert len(recs) == 2
    assert recs[0].startswith(prefix)


def test_recommendations_many_missing_lists_first_five():
    missing = ["a", "b", "c", "d", "e", "f", "g"]
    recs = generate_recommendations(10, [], missing, " ".join(["w"] * 200))
    assert recs[2] == "📚 Top skills to focus on: a, b, c, d, e"


def test_recommendations_five_missing_lists_all():
    missing = ["a", "b", "c", "d", "e"]
    recs = generate_recommendations(10, [], missing, " ".join(["w"] * 200))
    assert recs[2] == "📚 Priority skills to learn: a, b, c, d, e"


def test_recommendations_long_cv():
    recs = generate_recommendations(50, [], [], " ".join(["w"] * 1001))
    assert recs[-1].startswith("📄 Your CV is quite detailed.")


def test_recommendations_cv_length_bounds_are_exclusive():
    for words in (100, 1000):
        recs = generate_recommendations(50, [], [], " ".join(["w"] * words))
        assert len(recs) == 2


def test_recommendations_matching_highlight_first_five():
    matching = ["a", "b", "c", "d", "e", "f"]
    recs = generate_recommendations(90, matching, [], " ".join(["w"] * 200))
    assert recs[-1] == "✅ Highlight these matching skills prominently: a, b, c, d, e"
