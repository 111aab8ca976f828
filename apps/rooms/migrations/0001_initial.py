import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("location", models.CharField(blank=True, max_length=255, verbose_name="Location")),
                ("capacity", models.PositiveIntegerField(default=1, verbose_name="Capacity")),
                ("equipment", models.TextField(blank=True, verbose_name="Equipment")),
                ("image_url", models.URLField(blank=True, max_length=500, verbose_name="Image URL")),
                (
                    "status",
                    models.CharField(
                        choices=[("ACTIVE", "Active"), ("MAINTENANCE", "Under maintenance")],
                        default="ACTIVE",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Room",
                "verbose_name_plural": "Rooms",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(capacity__gt=0), name="room_positive_capacity"),
                ],
            },
        ),
    ]
