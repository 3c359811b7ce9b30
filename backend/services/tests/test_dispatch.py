import threading
import unittest
from decimal import Decimal

from django.db import connection, connections
from django.test import TestCase, TransactionTestCase

from accounts.models import User
from mechanics.models import MechanicProfile
from service_requests.models import ServiceRequest
from services.request_management import (
	ActiveRequestExistsError,
	MechanicNotEligibleError,
	MechanicProfileNotFoundError,
	Precondition,
	RequestNotPendingError,
	TransitionConflictError,
)
from .factories import build_test_services, make_mechanic, make_request, make_requester


class DispatchAcceptTests(TestCase):
	def setUp(self):
		self.services, self.push, _ = build_test_services()
		self.dispatch = self.services.dispatch
		self.requester = make_requester()
		self.request = make_request(self.requester)

	def test_many_accepts_exactly_one_winner(self):
		mechanics = [make_mechanic(f"m{i}", latitude=Decimal("12.98") + Decimal(i) / 100) for i in range(6)]
		winners, losers = [], []

		for mechanic in mechanics:
			try:
				with self.captureOnCommitCallbacks(execute=True):
					self.dispatch.accept(self.request.id, mechanic.id)
				winners.append(mechanic.id)
			except RequestNotPendingError:
				losers.append(mechanic.id)

		self.assertEqual(len(winners), 1)
		self.assertEqual(len(losers), len(mechanics) - 1)
		self.request.refresh_from_db()
		self.assertEqual(self.request.mechanic_id, winners[0])
		self.assertEqual(self.request.version, 1)

	def test_stale_snapshot_cannot_overwrite_winner(self):
		m1 = make_mechanic("m1")
		m2 = make_mechanic("m2")
		store = self.services.store

		# Both mechanics read the request while it was still open
		snapshot = store.get(self.request.id)
		self.dispatch.accept(self.request.id, m1.id)

		with self.assertRaises(TransitionConflictError):
			store.try_transition(
				self.request.id,
				Precondition(statuses=(snapshot.status,), mechanic_id=snapshot.mechanic_id),
				{"status": ServiceRequest.ACCEPTED, "mechanic_id": m2.id},
			)

		self.request.refresh_from_db()
		self.assertEqual(self.request.mechanic_id, m1.id)

	def test_unavailable_mechanic_rejected_before_any_write(self):
		mechanic = make_mechanic("offline", is_available=False)

		with self.assertRaises(MechanicNotEligibleError):
			self.dispatch.accept(self.request.id, mechanic.id)

		self.request.refresh_from_db()
		self.assertEqual(self.request.status, ServiceRequest.PENDING)
		self.assertEqual(self.request.version, 0)

	def test_unverified_mechanic_rejected(self):
		mechanic = make_mechanic("unverified", is_verified=False)
		with self.assertRaises(MechanicNotEligibleError):
			self.dispatch.accept(self.request.id, mechanic.id)

	def test_inactive_owner_rejected(self):
		mechanic = make_mechanic("inactive")
		User.objects.filter(pk=mechanic.pk).update(is_active=False)
		with self.assertRaises(MechanicNotEligibleError):
			self.dispatch.accept(self.request.id, mechanic.id)

	def test_mechanic_without_location_may_accept(self):
		mechanic = make_mechanic("nogps", latitude=None, longitude=None)

		accepted = self.dispatch.accept(self.request.id, mechanic.id)

		self.assertEqual(accepted.mechanic_id, mechanic.id)
		self.assertIsNone(accepted.estimated_arrival)

	def test_user_without_profile(self):
		stranger = make_requester("not_a_mechanic")
		with self.assertRaises(MechanicProfileNotFoundError):
			self.dispatch.accept(self.request.id, stranger.id)

	def test_stale_pool_listing_rechecked_at_accept(self):
		mechanic = make_mechanic("listed")
		pool = self.dispatch.candidate_pool(self.request.id)
		self.assertEqual([c.mechanic_id for c in pool], [mechanic.id])

		MechanicProfile.objects.filter(user=mechanic).update(is_available=False)

		with self.assertRaises(MechanicNotEligibleError):
			self.dispatch.accept(self.request.id, mechanic.id)

	def test_candidate_pool_respects_limit(self):
		for i in range(4):
			make_mechanic(f"pool{i}", latitude=Decimal("12.98") + Decimal(i) / 100)

		self.assertEqual(len(self.dispatch.candidate_pool(self.request.id, limit=3)), 3)


@unittest.skipIf(
	connection.vendor == "sqlite" and connection.is_in_memory_db(),
	"threads need a shared, file-backed database",
)
class ConcurrentWriteRaceTests(TransactionTestCase):
	THREADS = 8

	def race(self, attempts):
		"""Run every callable at once behind a barrier; collect what each returned."""
		barrier = threading.Barrier(len(attempts))
		outcomes = []
		lock = threading.Lock()

		def run(attempt):
			try:
				barrier.wait()
				result = attempt()
				with lock:
					outcomes.append(result)
			finally:
				connections.close_all()

		threads = [threading.Thread(target=run, args=(attempt,)) for attempt in attempts]
		for thread in threads:
			thread.start()
		for thread in threads:
			thread.join()
		return outcomes

	def test_concurrent_accepts_one_winner(self):
		services, _, _ = build_test_services()
		request = make_request(make_requester())
		mechanics = [make_mechanic(f"racer{i}") for i in range(self.THREADS)]

		def accept_as(mechanic_id):
			def attempt():
				try:
					services.dispatch.accept(request.id, mechanic_id)
					return "won"
				except RequestNotPendingError:
					return "lost"
			return attempt

		outcomes = self.race([accept_as(m.id) for m in mechanics])

		self.assertEqual(outcomes.count("won"), 1)
		self.assertEqual(outcomes.count("lost"), self.THREADS - 1)
		request.refresh_from_db()
		self.assertEqual(request.status, ServiceRequest.ACCEPTED)
		self.assertIn(request.mechanic_id, [m.id for m in mechanics])
		self.assertEqual(request.version, 1)

	def test_concurrent_creates_leave_one_active_request(self):
		services, _, _ = build_test_services()
		requester = make_requester()

		def attempt():
			try:
				services.lifecycle.create(
					requester.id,
					issue_type="FLAT_TIRE",
					latitude=Decimal("12.97160000"),
					longitude=Decimal("77.59460000"),
				)
				return "created"
			except ActiveRequestExistsError:
				return "rejected"

		outcomes = self.race([attempt] * self.THREADS)

		self.assertEqual(outcomes.count("created"), 1)
		self.assertEqual(outcomes.count("rejected"), self.THREADS - 1)
		self.assertEqual(ServiceRequest.objects.filter(requester=requester).count(), 1)
