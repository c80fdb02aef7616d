from django.db import models
from django.contrib.auth.models import AbstractUser


def default_languages():
    return ['English']


class User(AbstractUser):
    name = models.CharField(max_length=50, blank=True)
    email = models.EmailField(unique=True)
    avatar = models.URLField(max_length=500, blank=True, default='')
    # Soft hints fed into the recommendation prompt
    preferred_genres = models.JSONField(default=list, blank=True)
    preferred_languages = models.JSONField(default=default_languages, blank=True)

    @property
    def display_name(self):
        return self.name or self.username

    def __str__(self):
        return self.username
