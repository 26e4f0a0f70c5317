from __future__ import annotations

import random
from decimal import Decimal

from decouple import config
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.constants import UserRole
from modules.invoices.models import Invoice
from modules.orders.models import Order
from modules.shipments.constants import Carrier
from modules.shipments.models import Shipment

SEED_USERS = [
    ("admin", UserRole.ADMIN),
    ("gerente", UserRole.GERENTE),
    ("usuario", UserRole.USUARIO),
    ("separador", UserRole.SEPARADOR),
    ("conferente", UserRole.CONFERENTE),
    ("auditor", UserRole.AUDITOR),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        shipment, invoices_created = self._seed_shipment(users["usuario"])
        orders_created = self._seed_orders(shipment, users["separador"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"manifest={shipment.manifest_number}, "
                f"invoices={invoices_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> dict:
        User = get_user_model()
        password = config("SEED_PASSWORD", default="changeme123")
        users = {}
        for username, role in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                if role == UserRole.ADMIN:
                    user = User.objects.create_superuser(username, password=password)
                else:
                    user = User.objects.create_user(
                        username, password=password, role=role
                    )
            users[username] = user
        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return users

    def _seed_shipment(self, owner) -> tuple[Shipment, int]:
        self.stdout.write("Creating shipment and invoices...")
        shipment = Shipment.objects.filter(note="Seed shipment").first()
        if shipment is None:
            shipment = Shipment(
                driver_name="João da Silva",
                driver_tax_id="39053344705",
                responsible_name="Maria Oliveira",
                carrier=Carrier.ACERT,
                pallet_count=4,
                note="Seed shipment",
                created_by=owner,
            )
            shipment.save()

        created = 0
        for i in range(1, 6):
            _, was_created = Invoice.objects.get_or_create(
                number=f"{1000 + i}",
                defaults={
                    "code": f"3524{i:040d}",
                    "value": Decimal(random.randint(100, 5000)).quantize(
                        Decimal("0.01")
                    ),
                    "volumes": random.randint(1, 10),
                    "shipment": shipment,
                    "created_by": owner,
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating shipment and invoices... Done!"))
        return shipment, created

    def _seed_orders(self, shipment: Shipment, separator) -> int:
        self.stdout.write("Creating orders...")
        created = 0
        for i in range(1, 11):
            _, was_created = Order.objects.get_or_create(
                order_number=f"PED-{i:05d}",
                defaults={"shipment": shipment, "separator": separator},
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
