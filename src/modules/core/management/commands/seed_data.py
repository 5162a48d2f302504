from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.customers.exceptions import CustomerAlreadyExists
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService

SEED_CUSTOMERS = [
    ("C001", "Ana Souza", "ana@example.com", "+14155550101", "12 Market St", "ACTIVE"),
    ("C002", "Bruno Lima", "bruno@example.com", "4155550102", "", "ACTIVE"),
    ("C003", "Carla Mendes", "carla@example.com", "", "99 Elm Ave", "INACTIVE"),
    ("C004", "Daniel Costa", "daniel@example.com", "+442071234567", "", "ACTIVE"),
    ("C005", "Eduardo Alves", "eduardo@example.com", "", "", "ACTIVE"),
    ("C006", "Fernanda Rocha", "fernanda@example.com", "5511987654321", "", "INACTIVE"),
    ("C007", "Gabriel Santos", "gabriel@example.com", "", "7 Harbour Rd", "ACTIVE"),
    ("C008", "Helena Ferreira", "helena@example.com", "", "", "ACTIVE"),
    ("C009", "Igor Ramos", "igor@example.com", "+351912345678", "", "ACTIVE"),
    ("C010", "Julia Oliveira", "julia@example.com", "", "", "ACTIVE"),
]


class Command(BaseCommand):
    help = "Seed database with development users and customers."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        customers_created = self._seed_customers()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={customers_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_customers(self) -> int:
        """Create seed customers through the service; existing ones are skipped."""
        self.stdout.write("Creating customers...")
        service = CustomerService(repository=CustomerDjangoRepository())
        created = 0
        for code, name, email, phone, address, status in SEED_CUSTOMERS:
            try:
                service.create_customer(
                    {
                        "customer_code": code,
                        "full_name": name,
                        "email": email,
                        "phone": phone,
                        "address": address,
                        "status": status,
                    }
                )
            except CustomerAlreadyExists:
                continue
            created += 1
        return created
