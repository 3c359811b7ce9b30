from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from mechanics.models import MechanicProfile
from service_requests.models import ServiceRequest
from services.tests.factories import build_test_services, make_mechanic, make_request, make_requester


class MechanicApiTestCase(TestCase):
	def setUp(self):
		self.container, self.push, self.alerts = build_test_services()
		patcher = patch("services.registry._services", self.container)
		patcher.start()
		self.addCleanup(patcher.stop)

		self.client = APIClient()
		self.mechanic = make_mechanic("mech")
		self.requester = make_requester()
		self.client.force_authenticate(user=self.mechanic)


class MechanicProfileViewTests(MechanicApiTestCase):
	def test_get_profile(self):
		response = self.client.get("/api/mechanic/profile/")

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data["user"]["username"], "mech")
		self.assertTrue(response.data["is_available"])

	def test_update_specializations(self):
		response = self.client.put(
			"/api/mechanic/profile/", {"specializations": ["FLAT_TIRE", "BATTERY_DEAD"]}, format="json"
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data["specializations"], ["FLAT_TIRE", "BATTERY_DEAD"])
		self.assertTrue(response.data["is_available"])

	def test_unknown_specialization_rejected(self):
		response = self.client.put("/api/mechanic/profile/", {"specializations": ["TELEPORT"]}, format="json")

		self.assertEqual(response.status_code, 400)
		self.assertIn("specializations", response.data["errors"])

	def test_missing_profile_is_404(self):
		bare = User.objects.create_user(username="bare", password="x", role=User.MECHANIC)
		self.client.force_authenticate(user=bare)

		response = self.client.get("/api/mechanic/profile/")

		self.assertEqual(response.status_code, 404)
		self.assertEqual(set(response.data), {"status", "error", "message", "timestamp"})

	def test_requester_forbidden(self):
		self.client.force_authenticate(user=self.requester)
		self.assertEqual(self.client.get("/api/mechanic/profile/").status_code, 403)


class MechanicAvailabilityAndLocationTests(MechanicApiTestCase):
	def test_toggle_availability(self):
		response = self.client.put("/api/mechanic/availability/", {"is_available": False}, format="json")

		self.assertEqual(response.status_code, 200)
		self.assertFalse(MechanicProfile.objects.get(user=self.mechanic).is_available)

	def test_availability_requires_flag(self):
		response = self.client.put("/api/mechanic/availability/", {}, format="json")
		self.assertEqual(response.status_code, 400)

	def test_location_update_streams_to_active_requests(self):
		request = make_request(self.requester, status=ServiceRequest.IN_PROGRESS, mechanic=self.mechanic)

		with self.captureOnCommitCallbacks(execute=True):
			response = self.client.put(
				"/api/mechanic/location/", {"latitude": "12.95", "longitude": "77.60"}, format="json"
			)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data["latitude"], "12.95000000")
		self.assertEqual(self.push.topics(), [f"request.{request.id}"])
		self.assertEqual(self.push.sent[0][1]["type"], "LOCATION_UPDATE")

	def test_location_out_of_range(self):
		response = self.client.put(
			"/api/mechanic/location/", {"latitude": "95", "longitude": "77.60"}, format="json"
		)

		self.assertEqual(response.status_code, 400)
		self.assertIn("latitude", response.data["errors"])

	def test_location_get_without_position(self):
		located = make_mechanic("nowhere", latitude=None, longitude=None)
		self.client.force_authenticate(user=located)

		response = self.client.get("/api/mechanic/location/")

		self.assertIsNone(response.data["latitude"])


class MechanicRequestQueueTests(MechanicApiTestCase):
	def test_pending_oldest_first_and_unassigned_only(self):
		first = make_request(self.requester)
		second = make_request(make_requester("second"))
		make_request(make_requester("taken"), status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)

		response = self.client.get("/api/mechanic/requests/pending/")

		self.assertEqual([r["id"] for r in response.data], [first.id, second.id])

	def test_active_requests(self):
		active = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)
		make_request(make_requester("done"), status=ServiceRequest.COMPLETED, mechanic=self.mechanic)

		response = self.client.get("/api/mechanic/requests/active/")

		self.assertEqual([r["id"] for r in response.data], [active.id])

	def test_assigned_history(self):
		make_request(self.requester, status=ServiceRequest.COMPLETED, mechanic=self.mechanic)
		response = self.client.get("/api/mechanic/requests/")
		self.assertEqual(len(response.data), 1)


class MechanicTransitionViewTests(MechanicApiTestCase):
	def test_full_job_over_http(self):
		request = make_request(self.requester)
		base = f"/api/mechanic/requests/{request.id}"

		accepted = self.client.put(f"{base}/accept/")
		self.assertEqual(accepted.status_code, 200)
		self.assertEqual(accepted.data["status"], "ACCEPTED")
		self.assertEqual(accepted.data["mechanic_id"], self.mechanic.id)
		self.assertIsNotNone(accepted.data["estimated_arrival"])

		self.assertEqual(self.client.put(f"{base}/start/").data["status"], "IN_PROGRESS")
		self.assertEqual(self.client.put(f"{base}/complete/").data["status"], "COMPLETED")
		self.assertEqual(MechanicProfile.objects.get(user=self.mechanic).total_jobs, 1)

	def test_second_accept_is_400(self):
		request = make_request(self.requester)
		self.client.put(f"/api/mechanic/requests/{request.id}/accept/")

		self.client.force_authenticate(user=make_mechanic("late"))
		response = self.client.put(f"/api/mechanic/requests/{request.id}/accept/")

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data["message"], "Request is no longer pending")

	def test_unavailable_mechanic_cannot_accept(self):
		request = make_request(self.requester)
		self.client.force_authenticate(user=make_mechanic("off", is_available=False))

		response = self.client.put(f"/api/mechanic/requests/{request.id}/accept/")

		self.assertEqual(response.status_code, 400)
		self.assertEqual(ServiceRequest.objects.get(id=request.id).status, ServiceRequest.PENDING)

	def test_reject_returns_to_pending(self):
		request = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)

		response = self.client.put(f"/api/mechanic/requests/{request.id}/reject/")

		self.assertEqual(response.data["status"], "PENDING")
		self.assertIsNone(response.data["mechanic_id"])

	def test_start_by_other_mechanic_is_403(self):
		request = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)
		self.client.force_authenticate(user=make_mechanic("other"))

		response = self.client.put(f"/api/mechanic/requests/{request.id}/start/")

		self.assertEqual(response.status_code, 403)

	def test_complete_before_start_is_400(self):
		request = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)
		response = self.client.put(f"/api/mechanic/requests/{request.id}/complete/")
		self.assertEqual(response.status_code, 400)

	def test_unknown_request_is_404(self):
		response = self.client.put("/api/mechanic/requests/424242/accept/")
		self.assertEqual(response.status_code, 404)
