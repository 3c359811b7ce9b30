from decimal import Decimal

from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext

from mechanics.directory import MechanicDirectory
from mechanics.models import MechanicProfile
from services.matching import MatchEngine
from .factories import make_mechanic

ORIGIN = (Decimal("12.97160000"), Decimal("77.59460000"))


class MatchEngineTests(TestCase):
	def setUp(self):
		self.engine = MatchEngine(MechanicDirectory(), average_speed_kmh=30, default_limit=5)

	def test_only_eligible_mechanics_are_candidates(self):
		eligible = make_mechanic("eligible", latitude=Decimal("12.98"), longitude=Decimal("77.59"))
		make_mechanic("offline", is_available=False)
		make_mechanic("unverified", is_verified=False)
		make_mechanic("no_location", latitude=None, longitude=None)
		inactive = make_mechanic("inactive")
		inactive.is_active = False
		inactive.save(update_fields=["is_active"])

		candidates = self.engine.nearest_mechanics(*ORIGIN)

		self.assertEqual([c.mechanic_id for c in candidates], [eligible.id])

	def test_ranked_by_squared_coordinate_delta_and_limited(self):
		far = make_mechanic("far", latitude=Decimal("13.07"), longitude=Decimal("77.59460000"))
		near = make_mechanic("near", latitude=Decimal("12.98"), longitude=Decimal("77.59460000"))
		mid = make_mechanic("mid", latitude=Decimal("13.02"), longitude=Decimal("77.59460000"))

		candidates = self.engine.nearest_mechanics(*ORIGIN, limit=2)

		self.assertEqual([c.mechanic_id for c in candidates], [near.id, mid.id])
		self.assertLess(candidates[0].distance_km, candidates[1].distance_km)
		self.assertNotIn(far.id, [c.mechanic_id for c in candidates])

	def test_proxy_ranking_not_true_distance(self):
		# At 60N a degree of longitude is ~half a degree of latitude on the ground.
		# 0.9 deg east is nearer in km than 0.6 deg north, yet ranks after it.
		origin = (Decimal("60"), Decimal("10"))
		east = make_mechanic("east", latitude=Decimal("60"), longitude=Decimal("10.9"))
		north = make_mechanic("north", latitude=Decimal("60.6"), longitude=Decimal("10"))

		candidates = self.engine.nearest_mechanics(*origin)

		self.assertEqual([c.mechanic_id for c in candidates], [north.id, east.id])
		self.assertGreater(candidates[0].distance_km, candidates[1].distance_km)

	def test_ties_broken_by_profile_id(self):
		# Same spot, so the squared delta is identical
		first = make_mechanic("first", latitude=Decimal("12.98"), longitude=Decimal("77.60"))
		second = make_mechanic("second", latitude=Decimal("12.98"), longitude=Decimal("77.60"))

		candidates = self.engine.nearest_mechanics(*ORIGIN)

		first_profile = MechanicProfile.objects.get(user=first)
		second_profile = MechanicProfile.objects.get(user=second)
		self.assertLess(first_profile.id, second_profile.id)
		self.assertEqual([c.mechanic_id for c in candidates], [first.id, second.id])

	def test_ranking_and_limit_run_in_one_query(self):
		for i in range(4):
			make_mechanic(f"pool{i}", latitude=Decimal("12.98") + Decimal(i) / 100, longitude=ORIGIN[1])

		with CaptureQueriesContext(connection) as queries:
			candidates = self.engine.nearest_mechanics(*ORIGIN, limit=2)

		self.assertEqual(len(queries.captured_queries), 1)
		sql = queries.captured_queries[0]["sql"].upper()
		self.assertIn("ORDER BY", sql)
		self.assertIn("LIMIT 2", sql)
		self.assertEqual(len(candidates), 2)

	def test_zero_limit_returns_nothing(self):
		make_mechanic("any")
		self.assertEqual(self.engine.nearest_mechanics(*ORIGIN, limit=0), [])

	def test_radius_search_filters_by_haversine(self):
		inside = make_mechanic("inside", latitude=Decimal("13.01"), longitude=ORIGIN[1])    # ~4.3 km
		make_mechanic("outside", latitude=Decimal("13.10"), longitude=ORIGIN[1])           # ~14.3 km
		closer = make_mechanic("closer", latitude=Decimal("12.98"), longitude=ORIGIN[1])   # ~0.9 km

		candidates = self.engine.mechanics_within_radius(*ORIGIN, radius_km=10)

		self.assertEqual([c.mechanic_id for c in candidates], [closer.id, inside.id])
		self.assertTrue(all(c.distance_km <= 10 for c in candidates))

	def test_radius_search_keeps_mechanic_near_the_edge(self):
		edge = make_mechanic("edge", latitude=ORIGIN[0] + Decimal("0.089"), longitude=ORIGIN[1])  # ~9.9 km

		candidates = self.engine.mechanics_within_radius(*ORIGIN, radius_km=10)

		self.assertEqual([c.mechanic_id for c in candidates], [edge.id])

	def test_candidate_eta_uses_average_speed(self):
		make_mechanic("m", latitude=Decimal("13.06153000"), longitude=ORIGIN[1])  # ~10 km north

		candidate = self.engine.nearest_mechanics(*ORIGIN)[0]

		self.assertAlmostEqual(candidate.distance_km, 10.0, delta=0.05)
		self.assertIn(candidate.eta_minutes, (20, 21))

	def test_estimate_arrival_none_without_location(self):
		user = make_mechanic("lost", latitude=None, longitude=None)
		profile = MechanicProfile.objects.get(user=user)
		self.assertIsNone(self.engine.estimate_arrival(profile, *ORIGIN))

	def test_estimate_arrival_in_the_future(self):
		from django.utils import timezone

		user = make_mechanic("here", latitude=Decimal("13.00"), longitude=ORIGIN[1])
		profile = MechanicProfile.objects.get(user=user)

		before = timezone.now()
		arrival = self.engine.estimate_arrival(profile, *ORIGIN)

		self.assertGreater(arrival, before)
