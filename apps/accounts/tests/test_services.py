from datetime import date
from decimal import Decimal

from django.test import TestCase

from apps.accounts.identity import VerifiedIdentity
from apps.accounts.models import TenantProfile, User
from apps.accounts.services import grant_role, persist_tenant_profile, revoke_role
from apps.core.tests.factories import make_user


class RoleTests(TestCase):
    def test_grant_is_idempotent(self):
        user = make_user(roles=[User.ROLE_LANDLORD])
        self.assertTrue(grant_role(user, User.ROLE_TENANT))
        self.assertFalse(grant_role(user, User.ROLE_TENANT))
        user.refresh_from_db()
        self.assertEqual(user.roles, [User.ROLE_LANDLORD, User.ROLE_TENANT])

    def test_grant_preserves_concurrent_change(self):
        user = make_user()
        User.objects.filter(pk=user.pk).update(roles=[User.ROLE_LANDLORD])
        grant_role(user, User.ROLE_TENANT)
        user.refresh_from_db()
        self.assertEqual(user.roles, [User.ROLE_LANDLORD, User.ROLE_TENANT])

    def test_revoke(self):
        user = make_user(roles=[User.ROLE_TENANT, User.ROLE_LANDLORD])
        self.assertTrue(revoke_role(user, User.ROLE_TENANT))
        self.assertFalse(revoke_role(user, User.ROLE_TENANT))
        self.assertFalse(user.is_tenant)
        self.assertTrue(user.is_landlord)

    def test_superuser_is_admin(self):
        self.assertTrue(make_user(is_superuser=True).is_admin_user)
        self.assertFalse(make_user().is_admin_user)


class PersistTenantProfileTests(TestCase):
    def test_profile_from_sections(self):
        user = make_user()
        sections = {
            "personal": {
                "first_name": "Dana",
                "last_name": "Reyes",
                "phone": "555-201-3344",
                "date_of_birth": "1990-04-12",
                "ssn_last_four": "6789",
            },
            "employment": {"employment_type": "full_time", "employer_name": "Acme", "annual_income": "85000"},
            "emergency_contact": {"name": "Sam", "relationship": "Sibling", "phone": "555-777-8899"},
            "photo_id": {"file_url": "https://files.example.com/id.jpg"},
        }
        profile = persist_tenant_profile(user, sections, move_in_date=date(2025, 3, 1))

        self.assertEqual(profile.date_of_birth, date(1990, 4, 12))
        self.assertEqual(profile.masked_ssn, "***-**-6789")
        self.assertEqual(profile.annual_income, Decimal("85000"))
        self.assertEqual(profile.emergency_contact_name, "Sam")
        self.assertEqual(profile.photo_id_url, "https://files.example.com/id.jpg")
        self.assertEqual(profile.move_in_date, date(2025, 3, 1))
        user.refresh_from_db()
        self.assertEqual(user.first_name, "Dana")
        self.assertEqual(user.phone_number, "555-201-3344")

    def test_existing_values_kept_when_absent(self):
        user = make_user(first_name="Danielle")
        TenantProfile.objects.create(user=user, employer_name="Old Co")
        profile = persist_tenant_profile(user, {"personal": {"first_name": "Dana"}})
        self.assertEqual(profile.employer_name, "Old Co")
        user.refresh_from_db()
        self.assertEqual(user.first_name, "Danielle")


class VerifiedIdentityTests(TestCase):
    def test_email_match(self):
        identity = VerifiedIdentity(user_id=1, email="Dana@Example.com ")
        self.assertTrue(identity.matches_email("dana@example.com"))
        self.assertFalse(identity.matches_email("dan@example.com"))
        self.assertFalse(identity.matches_email(""))
