import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import training.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("teams", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TrainingPlan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default=training.models.default_description)),
                ("status", models.CharField(choices=[("DRAFT", "Draft"), ("ASSIGNED", "Assigned"), ("IN_PROGRESS", "InProgress"), ("COMPLETED", "Completed")], default="DRAFT", max_length=12)),
                ("date", models.DateTimeField()),
                ("duration", models.PositiveIntegerField()),
                ("schedule_ref", models.PositiveBigIntegerField(blank=True, db_index=True, null=True)),
                ("is_recurring", models.BooleanField(default=False)),
                ("notes", models.TextField(blank=True, default="")),
                ("attachments", models.JSONField(blank=True, default=list)),
                ("request_key", models.CharField(blank=True, max_length=64, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assigned_to", models.ForeignKey(blank=True, limit_choices_to={"role": "COACH"}, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_training_plans", to=settings.AUTH_USER_MODEL)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_training_plans", to=settings.AUTH_USER_MODEL)),
                ("team", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="training_plans", to="teams.team")),
            ],
            options={
                "ordering": ["date", "id"],
                "indexes": [
                    models.Index(fields=["team", "date"], name="training_plan_team_date_idx"),
                    models.Index(fields=["assigned_to", "status"], name="training_plan_coach_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("request_key__isnull", False)), fields=("created_by", "request_key"), name="uniq_plan_request_key_per_creator"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TrainingActivity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("duration", models.PositiveIntegerField()),
                ("order", models.PositiveIntegerField()),
                ("plan", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="activities", to="training.trainingplan")),
            ],
            options={
                "ordering": ["order"],
                "constraints": [
                    models.UniqueConstraint(fields=("plan", "order"), name="uniq_activity_order_per_plan"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AttendanceRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("PRESENT", "Present"), ("ABSENT", "Absent"), ("LATE", "Late"), ("EXCUSED", "Excused")], default="ABSENT", max_length=10)),
                ("notes", models.TextField(blank=True, default="")),
                ("marked_at", models.DateTimeField(blank=True, null=True)),
                ("marked_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="marked_training_attendance", to=settings.AUTH_USER_MODEL)),
                ("plan", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attendance_records", to="training.trainingplan")),
                ("player", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="training_attendance", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["player__last_name", "player__first_name"],
                "constraints": [
                    models.UniqueConstraint(fields=("plan", "player"), name="uniq_attendance_plan_player"),
                ],
            },
        ),
    ]
