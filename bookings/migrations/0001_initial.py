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
        ("teams", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Court",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("sport_type", models.CharField(choices=SPORT_TYPES, max_length=32)),
                ("location", models.CharField(blank=True, max_length=255, null=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("purpose", models.CharField(choices=[("TRAINING", "Training"), ("MATCH", "Match"), ("RENTAL", "Rental"), ("OTHER", "Other")], default="RENTAL", max_length=10)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("CONFIRMED", "Confirmed"), ("CANCELLED", "Cancelled"), ("COMPLETED", "Completed")], default="PENDING", max_length=10)),
                ("is_recurring", models.BooleanField(default=False)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("booked_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="bookings", to=settings.AUTH_USER_MODEL)),
                ("court", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookings", to="bookings.court")),
                ("team", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="bookings", to="teams.team")),
            ],
            options={
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["court", "start_time", "end_time"], name="bookings_court_slot_idx"),
                    models.Index(fields=["team", "purpose", "start_time"], name="bookings_team_purpose_idx"),
                ],
            },
        ),
    ]
