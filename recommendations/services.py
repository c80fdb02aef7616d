import logging
from dataclasses import dataclass, field
from typing import List

from django.db import DatabaseError, transaction

from moodreel.exceptions import ValidationFailure, NotFound, Forbidden, InternalFailure
from movies.resolver import MovieResolver
from .llm import LLMClient
from .models import Recommendation, RecommendedMovie
from .parser import extract_titles
from .prompts import MOOD_SYSTEM_PROMPT, MOOD_TEMPERATURE, MAX_TOKENS, build_mood_prompt

logger = logging.getLogger(__name__)

FEEDBACK_COMMENT_MAX_LENGTH = 200


@dataclass
class PreferenceHints:
    genres: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)

    @classmethod
    def for_user(cls, user):
        return cls(
            genres=list(user.preferred_genres or []),
            languages=list(user.preferred_languages or []),
        )


@dataclass
class PipelineResult:
    text: str
    titles: List[str]
    movies: list
    model: str


def unique_movies(movies):
    """Drops unresolved entries and repeats of the same movie, keeping first-seen order."""
    seen = set()
    unique = []
    for movie in movies:
        if movie is None or movie.pk in seen:
            continue
        seen.add(movie.pk)
        unique.append(movie)
    return unique


class RecommendationPipeline:
    """
    LLM call -> title extraction -> catalog resolution.

    A failing LLM call aborts the run. Titles that fail to resolve are
    dropped, so ``movies`` may be shorter than ``titles`` (or empty).
    """

    def __init__(self, llm_client=None, resolver=None):
        self.llm_client = llm_client or LLMClient()
        self.resolver = resolver or MovieResolver()

    def run(self, system_prompt, user_prompt, temperature):
        text = self.llm_client.complete(
            system_prompt,
            user_prompt,
            model=self.llm_client.model,
            temperature=temperature,
            max_tokens=MAX_TOKENS
        )
        titles = extract_titles(text)
        try:
            movies = unique_movies(self.resolver.resolve_titles(titles))
        except DatabaseError as e:
            logger.error(f"Failed to cache resolved movies: {e}")
            raise InternalFailure('Could not cache the recommended movies.')
        logger.info(f"Parsed {len(titles)} titles, resolved {len(movies)} movies")
        return PipelineResult(text=text, titles=titles, movies=movies, model=self.llm_client.model)


def validate_prompt(prompt):
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationFailure('Please provide a mood/vibe description.')
    if len(prompt) > Recommendation.PROMPT_MAX_LENGTH:
        raise ValidationFailure(
            f"Description too long. Please keep it under {Recommendation.PROMPT_MAX_LENGTH} characters."
        )
    return prompt.strip()


class RecommendationService:
    def __init__(self, pipeline=None):
        self.pipeline = pipeline or RecommendationPipeline()

    def create(self, user, prompt, hints=None):
        """
        Runs the mood pipeline for ``user`` and stores the result.
        Validation happens before any upstream call.
        """
        prompt = validate_prompt(prompt)
        hints = hints or PreferenceHints()

        result = self.pipeline.run(
            MOOD_SYSTEM_PROMPT,
            build_mood_prompt(prompt, hints.genres, hints.languages),
            MOOD_TEMPERATURE
        )

        try:
            with transaction.atomic():
                recommendation = Recommendation.objects.create(
                    user=user,
                    prompt=prompt,
                    ai_response=result.text,
                    ai_model=result.model
                )
                RecommendedMovie.objects.bulk_create([
                    RecommendedMovie(recommendation=recommendation, movie=movie, position=i)
                    for i, movie in enumerate(result.movies)
                ])
        except DatabaseError as e:
            logger.error(f"Failed to save recommendation for user {user.pk}: {e}")
            raise InternalFailure('Could not save the recommendation.')

        return recommendation

    @staticmethod
    def get_owned(recommendation_id, user):
        recommendation = Recommendation.objects.prefetch_related('items__movie').filter(pk=recommendation_id).first()
        if recommendation is None:
            raise NotFound('Recommendation not found.')
        if recommendation.user_id != user.pk:
            raise Forbidden('Not authorized to access this recommendation.')
        return recommendation

    @staticmethod
    def add_feedback(recommendation, rating=None, comment=None):
        """Each feedback field can be set once; setting it again is rejected."""
        if isinstance(rating, str) and rating.strip().isdigit():
            rating = int(rating)
        if isinstance(comment, str):
            comment = comment.strip() or None

        if rating is None and comment is None:
            raise ValidationFailure('Provide a rating and/or a comment.')

        if rating is not None:
            if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
                raise ValidationFailure('Rating must be between 1 and 5.')
            if recommendation.feedback_rating is not None:
                raise ValidationFailure('Feedback rating has already been submitted.')

        if comment is not None:
            if not isinstance(comment, str):
                raise ValidationFailure('Comment must be text.')
            if len(comment) > FEEDBACK_COMMENT_MAX_LENGTH:
                raise ValidationFailure(f"Comment cannot exceed {FEEDBACK_COMMENT_MAX_LENGTH} characters.")
            if recommendation.feedback_comment:
                raise ValidationFailure('Feedback comment has already been submitted.')

        if rating is not None:
            recommendation.feedback_rating = rating
        if comment is not None:
            recommendation.feedback_comment = comment
        recommendation.save(update_fields=['feedback_rating', 'feedback_comment', 'updated_at'])
        return recommendation
