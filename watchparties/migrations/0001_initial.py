import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('movies', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='WatchParty',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('invite_code', models.CharField(editable=False, max_length=12, unique=True)),
                ('scheduled_for', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='active', max_length=20)),
                ('preferred_genres', models.JSONField(blank=True, default=list)),
                ('preferred_moods', models.JSONField(blank=True, default=list)),
                ('avoid', models.JSONField(blank=True, default=list)),
                ('recommendation_explanation', models.TextField(blank=True, null=True)),
                ('recommendation_generated_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='created_parties', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Watch parties',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='GroupPick',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField()),
                ('movie', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='movies.movie')),
                ('party', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='picks', to='watchparties.watchparty')),
            ],
            options={
                'ordering': ['position'],
                'unique_together': {('party', 'movie')},
            },
        ),
        migrations.AddField(
            model_name='watchparty',
            name='recommended_movies',
            field=models.ManyToManyField(related_name='watch_parties', through='watchparties.GroupPick', to='movies.movie'),
        ),
        migrations.CreateModel(
            name='PartyMember',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('guest_name', models.CharField(blank=True, max_length=50, null=True)),
                ('has_responded', models.BooleanField(default=False)),
                ('genres', models.JSONField(blank=True, default=list)),
                ('moods', models.JSONField(blank=True, default=list)),
                ('avoid', models.JSONField(blank=True, default=list)),
                ('joined_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('party', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='watchparties.watchparty')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='party_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['joined_at', 'id'],
            },
        ),
        migrations.AddIndex(
            model_name='watchparty',
            index=models.Index(fields=['created_by', 'status'], name='party_creator_status_idx'),
        ),
        migrations.AddConstraint(
            model_name='partymember',
            constraint=models.UniqueConstraint(condition=models.Q(('user__isnull', False)), fields=('party', 'user'), name='unique_party_user'),
        ),
    ]
