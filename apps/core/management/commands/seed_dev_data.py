"""
Management command to create development accounts, listings and schedules.

Usage:
    python manage.py seed_dev_data          # Create accounts + sample data
    python manage.py seed_dev_data --reset  # Wipe DB and recreate everything
"""

from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand

DEV_PASSWORD = "devpass123"

UNITS = [
    ("101", Decimal("1200.00"), Decimal("1200.00")),
    ("102", Decimal("1350.00"), Decimal("0.00")),
    ("201", Decimal("1500.00"), Decimal("750.00")),
]


class Command(BaseCommand):
    help = "Seed the database with development accounts, units, a lease and the billing schedule"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Flush the database before seeding",
        )

    def handle(self, *args, **options):
        if options["reset"]:
            self.stdout.write(self.style.WARNING("Flushing database..."))
            from django.core.management import call_command
            call_command("flush", "--no-input")

        users = self._create_users()
        units = self._create_units(users["landlord"])
        self._create_lease(units[0], users["tenant"])
        self._schedule_rent_generation()

        self.stdout.write(self.style.SUCCESS("\nDevelopment data seeded successfully!"))
        for username in users:
            self.stdout.write(f"  {username} / {DEV_PASSWORD}")

    def _create_users(self):
        from apps.accounts.models import User

        self.stdout.write("Creating user accounts...")
        accounts = {
            "admin": {"roles": [User.ROLE_ADMIN], "is_staff": True, "is_superuser": True},
            "landlord": {"roles": [User.ROLE_LANDLORD], "first_name": "Lena", "last_name": "Ortiz"},
            "tenant": {"roles": [User.ROLE_TENANT], "first_name": "Tom", "last_name": "Baker"},
        }
        users = {}
        for username, fields in accounts.items():
            user, created = User.objects.update_or_create(
                username=username,
                defaults={"email": f"{username}@example.com", **fields},
            )
            user.set_password(DEV_PASSWORD)
            user.save(update_fields=["password"])
            users[username] = user
            self.stdout.write(f"  {'Created' if created else 'Updated'}: {username}")
        return users

    def _create_units(self, landlord):
        from apps.properties.models import Property, Unit

        self.stdout.write("Creating property and units...")
        prop, _ = Property.objects.get_or_create(
            owner=landlord,
            name="Birchwood Apartments",
            defaults={
                "address_line1": "400 Birch Ave",
                "city": "Portland",
                "state": "OR",
                "zip_code": "97201",
            },
        )
        units = []
        for number, rent, deposit in UNITS:
            unit, _ = Unit.objects.get_or_create(
                property=prop,
                unit_number=number,
                defaults={"monthly_rent": rent, "security_deposit": deposit},
            )
            units.append(unit)
        return units

    def _create_lease(self, unit, tenant):
        from apps.billing.services import PaymentOrchestrator
        from apps.leases.models import Lease
        from apps.leases.services import provision_lease

        if Lease.objects.filter(unit=unit, status__in=Lease.OCCUPIED_STATUSES).exists():
            self.stdout.write(f"  Unit {unit.unit_number} already leased")
            return
        lease = provision_lease(unit, tenant, start_date=date.today().replace(day=1))
        PaymentOrchestrator.create_move_in_payment(lease)
        self.stdout.write(f"  Leased unit {unit.unit_number} to {tenant.username}")

    def _schedule_rent_generation(self):
        from django_q.models import Schedule

        _, created = Schedule.objects.update_or_create(
            func="apps.billing.tasks.generate_rent_payments",
            defaults={"name": "Generate rent payments", "schedule_type": Schedule.DAILY},
        )
        self.stdout.write(f"  {'Created' if created else 'Updated'} daily rent generation schedule")
