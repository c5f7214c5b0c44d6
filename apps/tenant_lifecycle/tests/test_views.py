import json
from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from apps.core.tests import factories
from apps.leases.models import Lease
from apps.tenant_lifecycle.models import OffboardingNotice, TenancyApplication, TenantInvitation
from apps.tenant_lifecycle.services import OnboardingProgressTracker
from apps.tenant_lifecycle.services_applications import ApplicationReviewService


class JsonClientMixin:
    def send(self, method, url, body=None):
        return getattr(self.client, method)(
            url, data=json.dumps(body or {}), content_type="application/json"
        )


class ApplicationEndpointTests(JsonClientMixin, TestCase):
    def setUp(self):
        self.landlord = factories.make_landlord()
        self.unit = factories.make_unit(owner=self.landlord)
        self.applicant = factories.make_user(email="dana@example.com")
        self.apply_url = reverse("applications:apply", kwargs={"unit_id": self.unit.pk})

    def test_apply_requires_login(self):
        response = self.send("post", self.apply_url, {"applicationData": factories.application_data()})
        self.assertEqual(response.status_code, 401)

    def test_apply(self):
        self.client.force_login(self.applicant)
        response = self.send("post", self.apply_url, {"applicationData": factories.application_data()})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["application"]["status"], "pending")

    def test_apply_validation_errors(self):
        self.client.force_login(self.applicant)
        response = self.send("post", self.apply_url, {"applicationData": {"personal": {}}})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["code"], "validation_error")
        self.assertIn("employment", body["errors"])

    def test_malformed_json(self):
        self.client.force_login(self.applicant)
        response = self.client.post(self.apply_url, data="{not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_decide(self):
        application = ApplicationReviewService.submit(self.applicant, self.unit.pk, factories.application_data())
        self.client.force_login(self.landlord)
        response = self.send(
            "post",
            reverse("applications:decide", kwargs={"application_id": application.pk}),
            {"decision": "approved", "rentDueDay": 3},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["application"]["status"], TenancyApplication.STATUS_APPROVED)
        self.assertEqual(Lease.objects.get(unit=self.unit).rent_due_day, 3)

    def test_decide_by_stranger(self):
        application = ApplicationReviewService.submit(self.applicant, self.unit.pk, factories.application_data())
        self.client.force_login(self.applicant)
        response = self.send(
            "post",
            reverse("applications:decide", kwargs={"application_id": application.pk}),
            {"decision": "approved"},
        )
        self.assertEqual(response.status_code, 403)

    def test_invite_tenant(self):
        self.client.force_login(self.landlord)
        response = self.send(
            "post",
            reverse("applications:invite_tenant", kwargs={"unit_id": self.unit.pk}),
            {"tenantEmail": "lee@example.com", "tenantName": "Lee Park"},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["invitation"]["status"], "sent")


class OnboardingEndpointTests(JsonClientMixin, TestCase):
    def setUp(self):
        self.landlord = factories.make_landlord()
        self.unit = factories.make_unit(owner=self.landlord)
        self.invitation = OnboardingProgressTracker.invite(self.landlord, self.unit.pk, "lee@example.com")
        self.url = reverse("onboarding:progress", kwargs={"token": self.invitation.token})

    def test_get_without_login(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["alreadyCompleted"])
        self.assertEqual(body["progress"]["totalSteps"], 6)
        self.assertEqual(body["unit"]["id"], str(self.unit.pk))

    def test_unknown_token(self):
        response = self.client.get(reverse("onboarding:progress", kwargs={"token": "nope"}))
        self.assertEqual(response.status_code, 404)

    def test_expired_token(self):
        TenantInvitation.objects.filter(pk=self.invitation.pk).update(expires_at=timezone.now() - timedelta(days=1))
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 410)

    def test_patch_step(self):
        response = self.send("patch", self.url, {
            "stepId": "personal",
            "stepData": factories.personal_section(),
            "currentStep": 2,
        })
        self.assertEqual(response.status_code, 200)
        progress = response.json()["progress"]
        self.assertEqual(progress["currentStep"], 2)
        self.assertEqual(progress["completedSteps"], ["personal"])

    def test_complete_requires_login(self):
        response = self.send("post", self.url)
        self.assertEqual(response.status_code, 401)

    def test_complete_incomplete(self):
        self.client.force_login(factories.make_user(email="lee@example.com"))
        response = self.send("post", self.url)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "incomplete")
        self.assertIn("photo_id", response.json()["missing_steps"])


class OffboardingEndpointTests(JsonClientMixin, TestCase):
    def setUp(self):
        self.landlord = factories.make_landlord()
        self.lease = factories.make_lease(unit=factories.make_unit(owner=self.landlord))
        self.tenant = self.lease.tenant

    def test_tenant_gives_notice(self):
        self.client.force_login(self.tenant)
        response = self.send("post", reverse("offboarding:give_notice"), {"leaseId": str(self.lease.pk)})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["notice"]["initiatedBy"], "tenant")

    def test_landlord_gives_notice(self):
        self.client.force_login(self.landlord)
        response = self.send("post", reverse("offboarding:give_notice"), {
            "leaseId": str(self.lease.pk),
            "reason": "Selling the property",
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["notice"]["initiatedBy"], "landlord")

    def test_lease_id_required(self):
        self.client.force_login(self.tenant)
        response = self.send("post", reverse("offboarding:give_notice"), {})
        self.assertEqual(response.status_code, 400)

    def test_schedule_cancel_and_complete(self):
        self.client.force_login(self.tenant)
        notice_id = self.send(
            "post", reverse("offboarding:give_notice"), {"leaseId": str(self.lease.pk)}
        ).json()["notice"]["id"]

        self.client.force_login(self.landlord)
        inspection_date = (timezone.localdate() + timedelta(days=14)).isoformat()
        response = self.send(
            "patch",
            reverse("offboarding:update_notice", kwargs={"notice_id": notice_id}),
            {"inspectionDate": inspection_date},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["notice"]["status"], OffboardingNotice.STATUS_INSPECTION_SCHEDULED)

        self.client.force_login(self.tenant)
        response = self.send("post", reverse("offboarding:cancel_notice", kwargs={"notice_id": notice_id}))
        self.assertEqual(response.status_code, 409)

        self.client.force_login(self.landlord)
        response = self.send(
            "post",
            reverse("offboarding:complete_notice", kwargs={"notice_id": notice_id}),
            {"depositStatus": "returned"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["notice"]["status"], OffboardingNotice.STATUS_COMPLETED)

    def test_fast_track_requires_admin(self):
        url = reverse("lifecycle_admin:fast_track_offboarding")
        self.client.force_login(self.landlord)
        self.assertEqual(self.send("post", url, {"leaseId": str(self.lease.pk)}).status_code, 403)

        self.client.force_login(factories.make_admin())
        response = self.send("post", url, {"leaseId": str(self.lease.pk), "depositStatus": "partial"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["notice"]["depositStatus"], "partial")
        self.lease.refresh_from_db()
        self.assertEqual(self.lease.status, Lease.STATUS_TERMINATED)
