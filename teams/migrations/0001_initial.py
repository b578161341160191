import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

SPORT_TYPES = [(s, s) for s in (
    "Basketball", "Football", "Volleyball", "Self Defense", "Karate", "Gymnastics",
    "Gym", "Zumba", "Swimming", "Ping Pong", "Fitness", "Crossfit",
)]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Team",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("sport_type", models.CharField(choices=SPORT_TYPES, max_length=32)),
                ("club_crest", models.ImageField(blank=True, null=True, upload_to="club_crests/")),
                ("location", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("head_coach", models.ForeignKey(blank=True, limit_choices_to={"role": "COACH"}, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="coached_teams", to=settings.AUTH_USER_MODEL)),
                ("owner", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="owned_teams", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Team",
                "verbose_name_plural": "Teams",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="TeamMembership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role_on_team", models.CharField(choices=[("PLAYER", "Player"), ("COACH", "Coach"), ("STAFF", "Staff")], max_length=10)),
                ("jersey_number", models.PositiveIntegerField(blank=True, null=True)),
                ("position", models.CharField(blank=True, max_length=64)),
                ("active", models.BooleanField(default=True)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("team", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="teams.team")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["team", "role_on_team", "active"], name="teams_membership_roster_idx"),
                    models.Index(fields=["user", "team"], name="teams_membership_user_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("jersey_number__isnull", False)), fields=("team", "jersey_number"), name="uniq_team_jersey"),
                ],
            },
        ),
    ]
