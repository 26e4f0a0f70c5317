import django.db.models.deletion
import uuid6
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Driver",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("tax_id", models.CharField(max_length=11, unique=True)),
                ("license_number", models.CharField(max_length=20)),
                (
                    "phone",
                    models.CharField(blank=True, default="", max_length=20),
                ),
                (
                    "carrier",
                    models.CharField(
                        choices=[
                            ("ACERT", "Acert"),
                            ("EXPRESSO_GOIAS", "Expresso Goiás"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="drivers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "drivers",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="drivers_name_idx"),
                    models.Index(fields=["carrier"], name="drivers_carrier_idx"),
                ],
            },
        ),
    ]
