"""Sentence-embedding comparison of a job posting against a CV.

The embedding model is loaded lazily, once per process, through a
ModelHandle. Concurrent callers that arrive while the model is loading
share the same pending load. Inference runs in a worker thread so the
event loop is never blocked by the model.
"""

import asyncio
import enum
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as sklearn_cosine

from config import settings
from models.responses import EmbeddingComparisonResult, PhraseMatch

logger = logging.getLogger(__name__)

# Category descriptions a chunk is compared against, in priority order
SKILL_PROMPTS: tuple[str, ...] = (
    "programming language or technology skill",
    "software development framework or tool",
    "professional work experience",
    "soft skill or interpersonal ability",
    "education or certification",
    "technical competency",
)

_CHUNK_DELIMITERS = re.compile(r"[.•\-\n,;:]")
_PHRASE_EDGES = re.compile(r"^[\s\-•*]+|[\s\-•*]+$")
MIN_CHUNK_CHARS = 2  # exclusive
MAX_CHUNK_CHARS = 100  # exclusive


class EmbeddingUnavailable(Exception):
    """The embedding model could not be loaded or failed during inference."""


class ModelState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ModelHandle:
    """Lazily loaded model shared by every caller in the process.

    The first caller starts the load; callers arriving during ``loading``
    await the same pending task. A ``failed`` handle is retried by the
    next caller. Once ``ready`` the model stays loaded.
    """

    def __init__(self, loader: Callable[[], Any]) -> None:
        self._loader = loader
        self._model: Any = None
        self._state = ModelState.UNINITIALIZED
        self._pending: asyncio.Task | None = None

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ModelState.READY

    async def get(self) -> Any:
        if self._state is ModelState.READY:
            return self._model
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())
        # shield: a waiter giving up must not cancel the load for the others
        return await asyncio.shield(self._pending)

    async def _load(self) -> Any:
        self._state = ModelState.LOADING
        logger.info("Loading embedding model")
        try:
            model = await asyncio.to_thread(self._loader)
        except Exception as e:
            self._state = ModelState.FAILED
            self._pending = None
            logger.error("Failed to load embedding model: %s", e)
            raise EmbeddingUnavailable(f"Embedding model failed to load: {e}") from e
        self._model = model
        self._state = ModelState.READY
        logger.info("Embedding model loaded")
        return model


def load_sentence_transformer():
    """Default loader: the configured SentenceTransformer model."""
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(
        settings.embedding_model_name,
        cache_folder=settings.embedding_cache_dir or None,
    )


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 instead of raising when the lengths differ, a vector is
    empty, or either vector has zero norm.
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.size == 0 or a.shape != b.shape:
        return 0.0
    if not a.any() or not b.any():
        return 0.0
    return float(sklearn_cosine(a.reshape(1, -1), b.reshape(1, -1))[0][0])


def split_into_chunks(text: str) -> list[str]:
    """Split on sentence/list delimiters, keeping chunks of 3-99 chars."""
    chunks = (c.strip() for c in _CHUNK_DELIMITERS.split(text))
    return [c for c in chunks if MIN_CHUNK_CHARS < len(c) < MAX_CHUNK_CHARS]


def clean_phrase(phrase: str) -> str:
    return _PHRASE_EDGES.sub("", phrase).strip().lower()


class TextEmbedder:
    def __init__(
        self,
        handle: ModelHandle | None = None,
        skill_threshold: float | None = None,
        match_threshold: float | None = None,
    ) -> None:
        self._handle = handle or ModelHandle(load_sentence_transformer)
        self.skill_threshold = (
            settings.skill_phrase_threshold if skill_threshold is None else skill_threshold
        )
        self.match_threshold = (
            settings.phrase_match_threshold if match_threshold is None else match_threshold
        )

    @property
    def state(self) -> ModelState:
        return self._handle.state

    def is_ready(self) -> bool:
        return self._handle.is_ready

    async def embed(self, text: str) -> np.ndarray:
        """Embed ``text``, loading the model first if needed."""
        model = await self._handle.get()
        try:
            vector = await asyncio.to_thread(model.encode, text, convert_to_numpy=True)
        except Exception as e:
            logger.error("Embedding inference failed: %s", e)
            raise EmbeddingUnavailable(f"Embedding inference failed: {e}") from e
        return np.asarray(vector, dtype=np.float32).ravel()

    async def _embed_all(
        self,
        texts: Sequence[str],
        cache: dict[str, np.ndarray] | None = None,
    ) -> list[np.ndarray]:
        """Embed many texts concurrently; results follow input order."""
        if cache is None:
            cache = {}
        pending = list(dict.fromkeys(t for t in texts if t not in cache))
        if pending:
            vectors = await asyncio.gather(*(self.embed(t) for t in pending))
            cache.update(zip(pending, vectors))
        return [cache[t] for t in texts]

    async def calculate_similarity(self, text_a: str, text_b: str) -> float:
        vec_a, vec_b = await self._embed_all([text_a, text_b])
        return cosine_similarity(vec_a, vec_b)

    async def extract_skill_phrases(
        self,
        text: str,
        cache: dict[str, np.ndarray] | None = None,
    ) -> list[str]:
        """Return skill-like phrases from ``text`` in first-occurrence order.

        A chunk is skill-like when its similarity to any category prompt,
        checked in prompt order, exceeds the skill threshold.
        """
        if cache is None:
            cache = {}
        chunks = split_into_chunks(text)
        prompt_vectors = await self._embed_all(SKILL_PROMPTS, cache)
        chunk_vectors = await self._embed_all(chunks, cache)

        phrases: list[str] = []
        for chunk, chunk_vec in zip(chunks, chunk_vectors):
            for prompt_vec in prompt_vectors:
                if cosine_similarity(chunk_vec, prompt_vec) > self.skill_threshold:
                    cleaned = clean_phrase(chunk)
                    if cleaned and cleaned not in phrases:
                        phrases.append(cleaned)
                    break
        return phrases

    async def compare_texts(self, job_posting: str, cv: str) -> EmbeddingComparisonResult:
        """Compare whole texts and pair each job phrase with its best CV phrase."""
        cache: dict[str, np.ndarray] = {}

        job_vec, cv_vec = await self._embed_all([job_posting, cv], cache)
        overall_similarity = cosine_similarity(job_vec, cv_vec)

        job_phrases = await self.extract_skill_phrases(job_posting, cache)
        cv_phrases = await self.extract_skill_phrases(cv, cache)

        job_phrase_vecs = await self._embed_all(job_phrases, cache)
        cv_phrase_vecs = await self._embed_all(cv_phrases, cache)

        matches: list[PhraseMatch] = []
        gaps: list[str] = []
        for job_phrase, job_phrase_vec in zip(job_phrases, job_phrase_vecs):
            best_phrase, best_similarity = "", 0.0
            for cv_phrase, cv_phrase_vec in zip(cv_phrases, cv_phrase_vecs):
                sim = cosine_similarity(job_phrase_vec, cv_phrase_vec)
                # strict: ties keep the earlier CV phrase
                if sim > best_similarity:
                    best_phrase, best_similarity = cv_phrase, sim

            if best_similarity > self.match_threshold:
                matches.append(PhraseMatch(
                    job_phrase=job_phrase,
                    cv_phrase=best_phrase,
                    similarity=best_similarity,
                ))
            else:
                gaps.append(job_phrase)

        logger.debug(
            "Embedding comparison: overall %.3f, %d job phrases, %d CV phrases, %d matched",
            overall_similarity, len(job_phrases), len(cv_phrases), len(matches),
        )

        return EmbeddingComparisonResult(
            overall_similarity=overall_similarity,
            job_phrases=job_phrases,
            cv_phrases=cv_phrases,
            matches=matches,
            gaps=gaps,
        )


text_embedder = TextEmbedder()
