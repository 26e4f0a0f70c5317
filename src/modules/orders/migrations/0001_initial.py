import django.db.models.deletion
import uuid6
from django.conf import settings
from django.db import migrations, models

import shared.domain.events

STAGE_CHOICES = [
    ("UNREVIEWED", "Não conferido"),
    ("CONFERRED", "Conferido"),
    ("AUDITED", "Auditado"),
    ("VALIDATED", "Validado"),
]

VALIDATION_STATUS_CHOICES = [
    ("PENDING", "Pendente"),
    ("VALIDATED_CORRECT", "Validado correto"),
    ("VALIDATED_INCORRECT", "Validado incorreto"),
]


def _user_fk(related_name):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("shipments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
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
                ("order_number", models.CharField(max_length=50, unique=True)),
                (
                    "shipment",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="shipments.shipment",
                    ),
                ),
                ("separator", _user_fk("separated_orders")),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="orders_created_idx"),
                ],
            },
            bases=(shared.domain.events.DomainEventMixin, models.Model),
        ),
        migrations.CreateModel(
            name="OrderReview",
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
                ("fully_picked", models.BooleanField(default=False)),
                ("has_inconsistency", models.BooleanField(default=False)),
                (
                    "inconsistency_reasons",
                    models.JSONField(blank=True, default=list),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("conference_performed", models.BooleanField(default=False)),
                (
                    "conferred_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("audit_performed", models.BooleanField(default=False)),
                (
                    "audited_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("audit_has_error", models.BooleanField(default=False)),
                ("audit_notes", models.TextField(blank=True, default="")),
                (
                    "stage",
                    models.CharField(
                        choices=STAGE_CHOICES, default="CONFERRED", max_length=20
                    ),
                ),
                (
                    "validation_status",
                    models.CharField(
                        choices=VALIDATION_STATUS_CHOICES,
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                (
                    "validated_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="review",
                        to="orders.order",
                    ),
                ),
                ("separator", _user_fk("+")),
                ("conferer", _user_fk("+")),
                ("auditor", _user_fk("+")),
                ("validator", _user_fk("+")),
            ],
            options={
                "db_table": "order_reviews",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["stage"], name="order_reviews_stage_idx"),
                    models.Index(
                        fields=["validation_status"],
                        name="order_reviews_validation_idx",
                    ),
                ],
            },
            bases=(shared.domain.events.DomainEventMixin, models.Model),
        ),
    ]
