from django.test import SimpleTestCase

from common.utils.geo import (
	EARTH_RADIUS_KM,
	estimate_arrival_minutes,
	haversine_km,
)


class HaversineTests(SimpleTestCase):
	def test_same_point_is_zero(self):
		self.assertEqual(haversine_km(12.9716, 77.5946, 12.9716, 77.5946), 0.0)

	def test_symmetric(self):
		a = (12.9716, 77.5946)
		b = (13.0827, 80.2707)
		self.assertAlmostEqual(haversine_km(*a, *b), haversine_km(*b, *a), places=9)

	def test_known_distance_bangalore_chennai(self):
		# ~290 km great-circle
		distance = haversine_km(12.9716, 77.5946, 13.0827, 80.2707)
		self.assertTrue(285 < distance < 295, distance)

	def test_one_degree_of_latitude(self):
		expected = EARTH_RADIUS_KM * 3.141592653589793 / 180
		self.assertAlmostEqual(haversine_km(0, 0, 1, 0), expected, places=6)

	def test_antipodal_points(self):
		self.assertAlmostEqual(haversine_km(0, 0, 0, 180), EARTH_RADIUS_KM * 3.141592653589793, places=3)

	def test_accepts_decimals_and_strings(self):
		from decimal import Decimal
		self.assertAlmostEqual(
			haversine_km(Decimal("12.9716"), Decimal("77.5946"), "12.9816", "77.5946"),
			haversine_km(12.9716, 77.5946, 12.9816, 77.5946),
		)


class ArrivalEstimateTests(SimpleTestCase):
	def test_rounds_up_to_whole_minutes(self):
		# 10 km at 30 km/h = 20 minutes exactly
		self.assertEqual(estimate_arrival_minutes(10), 20)
		# 10.01 km -> 20.02 minutes -> 21
		self.assertEqual(estimate_arrival_minutes(10.01), 21)

	def test_zero_distance(self):
		self.assertEqual(estimate_arrival_minutes(0), 0)

	def test_monotonic_in_distance(self):
		distances = [0.1, 0.5, 1, 2.5, 7, 15, 40, 120]
		etas = [estimate_arrival_minutes(d) for d in distances]
		self.assertEqual(etas, sorted(etas))

	def test_custom_speed(self):
		self.assertEqual(estimate_arrival_minutes(60, average_speed_kmh=60), 60)

	def test_rejects_non_positive_speed(self):
		with self.assertRaises(ValueError):
			estimate_arrival_minutes(5, average_speed_kmh=0)
