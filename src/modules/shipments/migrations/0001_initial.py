import django.db.models.deletion
import uuid6
from django.conf import settings
from django.db import migrations, models

import shared.domain.events


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Shipment",
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
                ("driver_name", models.CharField(max_length=255)),
                ("driver_tax_id", models.CharField(max_length=11)),
                ("responsible_name", models.CharField(max_length=255)),
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
                ("pallet_count", models.PositiveIntegerField(default=0)),
                ("note", models.TextField(blank=True, default="")),
                (
                    "manifest_number",
                    models.PositiveIntegerField(editable=False, unique=True),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("OPEN", "Aberto"), ("FINALIZED", "Finalizado")],
                        default="OPEN",
                        max_length=20,
                    ),
                ),
                (
                    "finalized_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("driver_signature", models.TextField(blank=True, default="")),
                (
                    "driver_signed_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("responsible_signature", models.TextField(blank=True, default="")),
                (
                    "responsible_signed_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="shipments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "shipments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="shipments_status_idx"),
                    models.Index(fields=["-created_at"], name="shipments_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(pallet_count__gte=0),
                        name="shipments_pallet_count_non_negative",
                    )
                ],
            },
            bases=(shared.domain.events.DomainEventMixin, models.Model),
        ),
    ]
