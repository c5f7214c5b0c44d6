"""Model builders shared by the app test suites."""

from datetime import date
from decimal import Decimal
from itertools import count

from apps.accounts.models import User
from apps.leases.models import Lease
from apps.properties.models import Property, Unit

_seq = count(1)


def make_user(email=None, roles=(), **extra):
    n = next(_seq)
    email = email or f"user{n}@example.com"
    return User.objects.create_user(
        username=extra.pop("username", f"user{n}"),
        email=email,
        password="pass1234",
        roles=list(roles),
        **extra,
    )


def make_landlord(**extra):
    return make_user(roles=[User.ROLE_LANDLORD], **extra)


def make_admin(**extra):
    return make_user(roles=[User.ROLE_ADMIN], **extra)


def make_unit(owner=None, monthly_rent="1000.00", security_deposit="500.00", currency="USD", **extra):
    owner = owner or make_landlord()
    prop = Property.objects.create(
        owner=owner,
        name=f"Maple Court {next(_seq)}",
        address_line1="12 Maple St",
        city="Springfield",
        state="IL",
        zip_code="62701",
    )
    return Unit.objects.create(
        property=prop,
        unit_number=extra.pop("unit_number", "1A"),
        monthly_rent=Decimal(monthly_rent),
        security_deposit=Decimal(security_deposit),
        currency=currency,
        **extra,
    )


def make_lease(unit=None, tenant=None, status=Lease.STATUS_ACTIVE, lease_start=None, **extra):
    unit = unit or make_unit()
    tenant = tenant or make_user(roles=[User.ROLE_TENANT])
    unit.is_available = False
    unit.is_visible = False
    unit.save(update_fields=["is_available", "is_visible"])
    lease_start = lease_start or date(2025, 1, 1)
    return Lease.objects.create(
        unit=unit,
        tenant=tenant,
        landlord=unit.property.owner,
        status=status,
        lease_start=lease_start,
        lease_end=extra.pop("lease_end", date(lease_start.year + 1, lease_start.month, 1)),
        monthly_rent=unit.monthly_rent,
        security_deposit=unit.security_deposit,
        currency=unit.currency,
        **extra,
    )


def personal_section(**overrides):
    data = {
        "first_name": "Dana",
        "last_name": "Reyes",
        "email": "dana@example.com",
        "phone": "555-201-3344",
        "date_of_birth": "1990-04-12",
        "ssn": "123-45-6789",
    }
    data.update(overrides)
    return data


def employment_section(**overrides):
    data = {
        "employment_type": "full_time",
        "employer_name": "Acme Corp",
        "job_title": "Engineer",
        "annual_income": "85000",
    }
    data.update(overrides)
    return data


def emergency_contact_section(**overrides):
    data = {"name": "Sam Reyes", "relationship": "Sibling", "phone": "555-777-8899"}
    data.update(overrides)
    return data


def proof_of_address_section(**overrides):
    data = {
        "document_type": "utility_bill",
        "file_name": "bill.pdf",
        "file_url": "https://files.example.com/bill.pdf",
    }
    data.update(overrides)
    return data


def photo_id_section(**overrides):
    data = {
        "id_type": "passport",
        "file_name": "passport.jpg",
        "file_url": "https://files.example.com/passport.jpg",
    }
    data.update(overrides)
    return data


def application_data():
    return {
        "personal": personal_section(),
        "employment": employment_section(),
        "emergency_contact": emergency_contact_section(),
    }
