from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Movie',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tmdb_id', models.IntegerField(unique=True)),
                ('title', models.CharField(max_length=255)),
                ('overview', models.TextField(blank=True, default='No overview available')),
                ('release_date', models.DateField(blank=True, null=True)),
                ('genres', models.JSONField(blank=True, default=list)),
                ('poster_path', models.CharField(blank=True, max_length=255, null=True)),
                ('backdrop_path', models.CharField(blank=True, max_length=255, null=True)),
                ('trailer_key', models.CharField(blank=True, max_length=64, null=True)),
                ('runtime', models.PositiveIntegerField(default=0)),
                ('original_language', models.CharField(default='en', max_length=10)),
                ('popularity', models.FloatField(default=0.0)),
                ('vote_average', models.FloatField(default=0.0)),
                ('vote_count', models.PositiveIntegerField(default=0)),
                ('adult', models.BooleanField(default=False)),
                ('streaming_platforms', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
