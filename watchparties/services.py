import logging
import secrets
import string
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from moodreel.exceptions import (
    ValidationFailure, NotFound, Forbidden, PreconditionFailure, InternalFailure
)
from recommendations.prompts import GROUP_SYSTEM_PROMPT, GROUP_TEMPERATURE, build_group_prompt
from recommendations.services import RecommendationPipeline
from .models import WatchParty, PartyMember, GroupPick

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6
INVITE_CODE_ATTEMPTS = 10
TOP_N = 3


def generate_invite_code():
    return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def unique_invite_code():
    """Draws codes until one is not taken yet."""
    for _ in range(INVITE_CODE_ATTEMPTS):
        code = generate_invite_code()
        if not WatchParty.objects.filter(invite_code=code).exists():
            return code
    raise InternalFailure('Could not allocate an invite code.')


def merge_labels(pool, labels):
    merged = list(pool)
    for label in labels:
        if label not in merged:
            merged.append(label)
    return merged


def clean_labels(labels):
    if labels is None:
        return []
    if not isinstance(labels, (list, tuple)) or not all(isinstance(label, str) for label in labels):
        raise ValidationFailure('Preferences must be lists of strings.')
    return merge_labels([], [label.strip() for label in labels if label.strip()])


def top_labels(submissions, n=TOP_N, pool=None):
    """
    Most frequent labels across per-member submissions.
    Ties keep the order of ``pool`` (the party's merged list); labels missing
    from it fall back to the order in which they were first counted.
    """
    counts = Counter()
    for labels in submissions:
        counts.update(labels)
    order = merge_labels(pool or [], counts)
    return sorted(counts, key=lambda label: (-counts[label], order.index(label)))[:n]


@dataclass
class GroupPreferences:
    top_genres: List[str] = field(default_factory=list)
    top_moods: List[str] = field(default_factory=list)
    member_count: int = 0


class WatchPartyService:
    @staticmethod
    def create_party(user, name, scheduled_for=None):
        name = (name or '').strip()
        if not name:
            raise ValidationFailure('Please provide a party name.')

        # Another party may grab the same code between the check and the insert
        for _ in range(INVITE_CODE_ATTEMPTS):
            try:
                with transaction.atomic():
                    party = WatchParty.objects.create(
                        name=name,
                        created_by=user,
                        invite_code=unique_invite_code(),
                        scheduled_for=scheduled_for,
                        status=WatchParty.Status.ACTIVE
                    )
                    PartyMember.objects.create(party=party, user=user, joined_at=timezone.now())
                logger.info(f"Watch party {party.id} created by {user.username} ({party.invite_code})")
                return party
            except IntegrityError:
                logger.warning("Invite code collision on insert, retrying")
        raise InternalFailure('Could not allocate an invite code.')

    @staticmethod
    def parties_for(user, status=None):
        parties = WatchParty.objects.filter(members__user=user).distinct()
        if status:
            if status not in WatchParty.Status.values:
                raise ValidationFailure('Status must be: active, completed, or cancelled.')
            parties = parties.filter(status=status)
        return parties.select_related('created_by').prefetch_related('members__user', 'picks__movie')

    @staticmethod
    def get_party(party_id):
        party = WatchParty.objects.select_related('created_by').filter(pk=party_id).first()
        if party is None:
            raise NotFound('Watch party not found.')
        return party

    @staticmethod
    def member_for(party, user):
        member = party.members.filter(user=user).first()
        if member is None:
            raise Forbidden('You are not a member of this party.')
        return member

    @classmethod
    def get_for_member(cls, party_id, user):
        party = cls.get_party(party_id)
        cls.member_for(party, user)
        return party

    @classmethod
    def get_for_creator(cls, party_id, user, action='manage'):
        party = cls.get_party(party_id)
        if party.created_by_id != user.pk:
            raise Forbidden(f"Only the party creator can {action} the party.")
        return party

    @staticmethod
    def join(invite_code, user, guest_name=None):
        code = (invite_code or '').strip().upper()
        party = WatchParty.objects.filter(invite_code=code, status=WatchParty.Status.ACTIVE).first()
        if party is None:
            raise NotFound('Invalid invite code or party no longer active.')

        if party.members.filter(user=user).exists():
            raise ValidationFailure('You are already a member of this party.')

        try:
            with transaction.atomic():
                PartyMember.objects.create(
                    party=party,
                    user=user,
                    guest_name=(guest_name or '').strip() or None,
                    joined_at=timezone.now()
                )
        except IntegrityError:
            raise ValidationFailure('You are already a member of this party.')
        return party

    @staticmethod
    def add_guest(party, user, guest_name):
        if party.created_by_id != user.pk:
            raise Forbidden('Only the party creator can add guests.')
        guest_name = (guest_name or '').strip()
        if not guest_name:
            raise ValidationFailure('Please provide a guest name.')
        if party.status != WatchParty.Status.ACTIVE:
            raise ValidationFailure('Party is no longer active.')
        return PartyMember.objects.create(party=party, guest_name=guest_name, joined_at=timezone.now())

    @classmethod
    def submit_preferences(cls, party, user, genres=None, moods=None, avoid=None, member_id=None):
        """
        Records a member's answers and merges them into the party pools.
        The creator may answer for a guest member by passing ``member_id``.
        """
        genres, moods, avoid = clean_labels(genres), clean_labels(moods), clean_labels(avoid)

        if member_id is None:
            member = cls.member_for(party, user)
        else:
            if party.created_by_id != user.pk:
                raise Forbidden('Only the party creator can answer for guests.')
            member = party.members.filter(pk=member_id, user__isnull=True).first()
            if member is None:
                raise NotFound('Guest member not found.')

        with transaction.atomic():
            party = WatchParty.objects.select_for_update().get(pk=party.pk)
            member.genres = genres
            member.moods = moods
            member.avoid = avoid
            member.has_responded = True
            member.save()

            party.preferred_genres = merge_labels(party.preferred_genres, genres)
            party.preferred_moods = merge_labels(party.preferred_moods, moods)
            party.avoid = merge_labels(party.avoid, avoid)
            party.save(update_fields=['preferred_genres', 'preferred_moods', 'avoid', 'updated_at'])
        return party

    @staticmethod
    def update_status(party, status):
        if status not in WatchParty.Status.values:
            raise ValidationFailure('Status must be: active, completed, or cancelled.')
        party.status = status
        party.save(update_fields=['status', 'updated_at'])
        return party

    @classmethod
    def leave(cls, party, user):
        if party.created_by_id == user.pk:
            raise ValidationFailure('Party creator cannot leave. Delete the party instead.')
        member = cls.member_for(party, user)
        member.delete()


class GroupRecommendationService:
    def __init__(self, pipeline=None):
        self.pipeline = pipeline or RecommendationPipeline()

    @staticmethod
    def aggregate(members, genre_pool=None, mood_pool=None):
        return GroupPreferences(
            top_genres=top_labels((m.genres for m in members), pool=genre_pool),
            top_moods=top_labels((m.moods for m in members), pool=mood_pool),
            member_count=len(members),
        )

    def generate(self, party):
        """
        Generates and stores the group pick list, replacing any previous one.
        Every member must have responded first.
        """
        # Pools may have changed since the caller loaded the party
        party.refresh_from_db(fields=['preferred_genres', 'preferred_moods', 'avoid'])
        members = list(party.members.all())
        if not all(m.has_responded for m in members):
            raise PreconditionFailure('Not all members have submitted their preferences yet.')

        preferences = self.aggregate(members, party.preferred_genres, party.preferred_moods)
        result = self.pipeline.run(
            GROUP_SYSTEM_PROMPT,
            build_group_prompt(
                preferences.top_genres,
                preferences.top_moods,
                preferences.member_count,
                avoid=party.avoid
            ),
            GROUP_TEMPERATURE
        )

        try:
            with transaction.atomic():
                party.picks.all().delete()
                GroupPick.objects.bulk_create([
                    GroupPick(party=party, movie=movie, position=i)
                    for i, movie in enumerate(result.movies)
                ])
                party.recommendation_explanation = result.text
                party.recommendation_generated_at = timezone.now()
                party.save(update_fields=['recommendation_explanation', 'recommendation_generated_at', 'updated_at'])
        except DatabaseError as e:
            logger.error(f"Failed to save group recommendation for party {party.pk}: {e}")
            raise InternalFailure('Could not save the group recommendation.')

        return party, preferences
