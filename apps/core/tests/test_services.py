from unittest import mock

from django.test import TestCase, override_settings

from apps.billing.tests.fakes import FakeGateway
from apps.core.exceptions import InvalidStateError, ValidationError
from apps.core.services import search_index
from apps.core.services.payments.factory import get_active_gateway, get_gateway_class
from apps.core.tests.factories import make_unit


class ErrorPayloadTests(TestCase):
    def test_validation_error_payload(self):
        error = ValidationError("Bad input.", errors={"field": ["Required."]})
        self.assertEqual(error.status_code, 400)
        self.assertEqual(
            error.as_dict(), {"error": "Bad input.", "code": "validation_error", "errors": {"field": ["Required."]}}
        )

    def test_state_error_payload(self):
        self.assertEqual(InvalidStateError("Nope.").as_dict(), {"error": "Nope.", "code": "invalid_state"})


class GatewayFactoryTests(TestCase):
    def test_active_gateway_from_settings(self):
        gateway = get_active_gateway()
        self.assertIsInstance(gateway, FakeGateway)
        self.assertIn("webhook_secret", gateway.config)

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            get_gateway_class("apps.billing.tests.fakes.MissingGateway")


class SearchIndexTests(TestCase):
    def setUp(self):
        self.unit = make_unit()

    def test_skipped_without_url(self):
        with mock.patch("apps.core.services.search_index.requests.post") as post:
            self.assertFalse(search_index.push_unit(self.unit.pk))
        post.assert_not_called()

    @override_settings(SEARCH_INDEX_URL="https://search.example.test/", SEARCH_INDEX_API_KEY="k")
    def test_push(self):
        with mock.patch("apps.core.services.search_index.requests.post") as post:
            post.return_value.status_code = 200
            self.assertTrue(search_index.push_unit(self.unit.pk))

        url = post.call_args.args[0]
        self.assertEqual(url, f"https://search.example.test/units/{self.unit.pk}")
        self.assertEqual(post.call_args.kwargs["headers"], {"Authorization": "Bearer k"})
        self.assertTrue(post.call_args.kwargs["json"]["is_available"])

    @override_settings(SEARCH_INDEX_URL="https://search.example.test")
    def test_failure_is_logged_not_raised(self):
        with mock.patch("apps.core.services.search_index.requests.post", side_effect=ConnectionError):
            self.assertFalse(search_index.push_unit(self.unit.pk))

    @override_settings(SEARCH_INDEX_URL="https://search.example.test")
    def test_push_waits_for_commit(self):
        with mock.patch("apps.core.services.search_index.requests.post") as post:
            with self.captureOnCommitCallbacks(execute=False) as callbacks:
                search_index.sync_unit_on_commit(self.unit.pk)
            post.assert_not_called()
            callbacks[0]()
        post.assert_called_once()

    def test_push_is_queued_as_task(self):
        with mock.patch("django_q.tasks.async_task") as async_task:
            with self.captureOnCommitCallbacks(execute=True):
                search_index.sync_unit_on_commit(self.unit.pk)
        async_task.assert_called_once()
        self.assertEqual(
            async_task.call_args.args, ("apps.core.services.search_index.push_unit", str(self.unit.pk))
        )


class HealthCheckTests(TestCase):
    def test_liveness(self):
        self.assertEqual(self.client.get("/live/").status_code, 200)

    def test_health(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["checks"]["database"], "ok")
        self.assertEqual(body["checks"]["cache"], "ok")
        self.assertEqual(body["checks"]["payment_gateway"], "FakeGateway")

    def test_cache_outage_is_unhealthy(self):
        with mock.patch("apps.core.views.cache.set", side_effect=ConnectionError("refused")):
            response = self.client.get("/health/")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["checks"]["cache"], "error: ConnectionError")
