from django.db import IntegrityError, transaction
from django.test import TestCase

from service_requests.models import ServiceRequest
from services.request_management import (
	ActiveRequestExistsError,
	Precondition,
	RequestNotFoundError,
	RequestStore,
	TransitionConflictError,
)
from .factories import make_mechanic, make_request, make_requester


class RequestStoreTests(TestCase):
	def setUp(self):
		self.store = RequestStore()
		self.requester = make_requester()
		self.mechanic = make_mechanic("mech")

	def test_get_unknown_raises_not_found(self):
		with self.assertRaises(RequestNotFoundError):
			self.store.get(9999)

	def test_create_rejects_second_active_request(self):
		self.store.create(self.requester.id, issue_type="OTHER", latitude=1, longitude=2)

		with self.assertRaises(ActiveRequestExistsError):
			self.store.create(self.requester.id, issue_type="OTHER", latitude=1, longitude=2)

		self.assertEqual(ServiceRequest.objects.filter(requester=self.requester).count(), 1)

	def test_create_allowed_after_terminal(self):
		make_request(self.requester, status=ServiceRequest.CANCELLED)
		make_request(self.requester, status=ServiceRequest.COMPLETED, mechanic=self.mechanic)

		created = self.store.create(self.requester.id, issue_type="OTHER", latitude=1, longitude=2)

		self.assertEqual(created.status, ServiceRequest.PENDING)
		self.assertIsNone(created.mechanic_id)

	def test_create_race_surfaces_as_active_request_exists(self):
		# Simulate the loser of a create race: the up-front check saw nothing
		make_request(self.requester)
		self.store.find_active_by_requester = lambda requester_id: None

		with self.assertRaises(ActiveRequestExistsError):
			self.store.create(self.requester.id, issue_type="OTHER", latitude=1, longitude=2)

	def test_partial_unique_index_blocks_two_active_requests(self):
		make_request(self.requester)
		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				make_request(self.requester)

	def test_check_constraint_ties_mechanic_to_status(self):
		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=None)
		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				make_request(self.requester, status=ServiceRequest.PENDING, mechanic=self.mechanic)

	def test_try_transition_applies_and_bumps_version(self):
		request = make_request(self.requester)

		updated = self.store.try_transition(
			request.id,
			Precondition(statuses=(ServiceRequest.PENDING,), mechanic_id=None),
			{"status": ServiceRequest.ACCEPTED, "mechanic_id": self.mechanic.id},
		)

		self.assertEqual(updated.status, ServiceRequest.ACCEPTED)
		self.assertEqual(updated.mechanic_id, self.mechanic.id)
		self.assertEqual(updated.version, request.version + 1)

	def test_try_transition_conflict_leaves_row_untouched(self):
		request = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)

		with self.assertRaises(TransitionConflictError):
			self.store.try_transition(
				request.id,
				Precondition(statuses=(ServiceRequest.PENDING,), mechanic_id=None),
				{"status": ServiceRequest.CANCELLED, "mechanic_id": None},
			)

		request.refresh_from_db()
		self.assertEqual(request.status, ServiceRequest.ACCEPTED)
		self.assertEqual(request.mechanic_id, self.mechanic.id)
		self.assertEqual(request.version, 0)

	def test_try_transition_checks_expected_mechanic(self):
		other = make_mechanic("other")
		request = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)

		with self.assertRaises(TransitionConflictError):
			self.store.try_transition(
				request.id,
				Precondition(statuses=(ServiceRequest.ACCEPTED,), mechanic_id=other.id),
				{"status": ServiceRequest.IN_PROGRESS},
			)

	def test_try_transition_unknown_id(self):
		with self.assertRaises(RequestNotFoundError):
			self.store.try_transition(
				4242,
				Precondition(statuses=(ServiceRequest.PENDING,), mechanic_id=None),
				{"status": ServiceRequest.CANCELLED},
			)

	def test_pending_unassigned_oldest_first(self):
		other_requester = make_requester("other_requester")
		first = make_request(self.requester)
		second = make_request(other_requester)
		make_request(make_requester("third"), status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)

		self.assertEqual([r.id for r in self.store.find_pending_unassigned()], [first.id, second.id])

	def test_find_active_by_mechanic(self):
		accepted = make_request(self.requester, status=ServiceRequest.ACCEPTED, mechanic=self.mechanic)
		make_request(make_requester("done"), status=ServiceRequest.COMPLETED, mechanic=self.mechanic)

		self.assertEqual([r.id for r in self.store.find_active_by_mechanic(self.mechanic.id)], [accepted.id])
