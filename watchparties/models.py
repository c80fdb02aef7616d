from django.db import models
from django.db.models import Q
from django.conf import settings
from django.utils import timezone
from movies.models import Movie


class WatchParty(models.Model):
    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    name = models.CharField(max_length=100)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='created_parties')
    invite_code = models.CharField(max_length=12, unique=True, editable=False)
    scheduled_for = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)

    # Deduplicated union of every member's submissions
    preferred_genres = models.JSONField(default=list, blank=True)
    preferred_moods = models.JSONField(default=list, blank=True)
    avoid = models.JSONField(default=list, blank=True)

    # Latest group recommendation, replaced wholesale on each generation
    recommended_movies = models.ManyToManyField(Movie, through='GroupPick', related_name='watch_parties')
    recommendation_explanation = models.TextField(null=True, blank=True)
    recommendation_generated_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = "Watch parties"
        indexes = [models.Index(fields=['created_by', 'status'], name='party_creator_status_idx')]

    @property
    def group_movies(self):
        return [pick.movie for pick in self.picks.all()]

    def __str__(self):
        return f"{self.name} ({self.invite_code})"


class PartyMember(models.Model):
    party = models.ForeignKey(WatchParty, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='party_memberships')
    guest_name = models.CharField(max_length=50, null=True, blank=True)
    has_responded = models.BooleanField(default=False)
    # This member's latest submission; used for the group tally
    genres = models.JSONField(default=list, blank=True)
    moods = models.JSONField(default=list, blank=True)
    avoid = models.JSONField(default=list, blank=True)
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['joined_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['party', 'user'], condition=Q(user__isnull=False), name='unique_party_user'),
        ]

    @property
    def display_name(self):
        if self.user_id:
            return self.guest_name or self.user.display_name
        return self.guest_name

    def __str__(self):
        return f"{self.display_name} in {self.party.name}"


class GroupPick(models.Model):
    party = models.ForeignKey(WatchParty, on_delete=models.CASCADE, related_name='picks')
    movie = models.ForeignKey(Movie, on_delete=models.CASCADE)
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ['position']
        unique_together = ('party', 'movie')
