from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
import os

class Command(BaseCommand):
    help = 'Creates the admin superuser from DJANGO_SUPERUSER_* environment variables'

    def handle(self, *args, **options):
        User = get_user_model()
        username = os.environ.get('DJANGO_SUPERUSER_USERNAME', 'admin')
        email = os.environ.get('DJANGO_SUPERUSER_EMAIL', 'admin@example.com')
        password = os.environ.get('DJANGO_SUPERUSER_PASSWORD')

        if not password:
            self.stdout.write(self.style.ERROR("DJANGO_SUPERUSER_PASSWORD is not set. Aborting."))
            return

        existing = User.objects.filter(username=username).first()
        if existing:
            if existing.is_superuser:
                self.stdout.write(f"Superuser '{username}' already exists.")
            else:
                existing.is_staff = True
                existing.is_superuser = True
                existing.save()
                self.stdout.write(self.style.SUCCESS(f"Promoted '{username}' to superuser."))
            return

        User.objects.create_superuser(username=username, email=email, password=password, name='Admin')
        self.stdout.write(self.style.SUCCESS(f"Superuser '{username}' created successfully!"))
