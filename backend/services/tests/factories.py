"""Shared builders for the request-service test suites."""

from decimal import Decimal

from accounts.models import User
from mechanics.models import MechanicProfile
from service_requests.models import ServiceRequest
from services.registry import build_services

BANGALORE = (Decimal("12.97160000"), Decimal("77.59460000"))


class RecordingPushChannel:
	"""Push channel that remembers what it was asked to publish."""

	def __init__(self):
		self.sent = []

	def publish(self, topic, message):
		self.sent.append((topic, message))
		return True

	def topics(self):
		return [topic for topic, _ in self.sent]

	def of_type(self, event_type):
		return [(topic, message) for topic, message in self.sent if message["type"] == event_type]


def build_test_services():
	push = RecordingPushChannel()
	alerts = []
	container = build_services(
		push_channel=push,
		mechanic_alert=lambda mechanic_id, text: alerts.append((mechanic_id, text)),
	)
	return container, push, alerts


def make_requester(username="requester"):
	return User.objects.create_user(
		username=username,
		password="pass1234",
		email=f"{username}@example.com",
		role=User.REQUESTER,
	)


def make_mechanic(username, latitude=BANGALORE[0], longitude=BANGALORE[1],
				  is_available=True, is_verified=True, **profile_fields):
	user = User.objects.create_user(
		username=username,
		password="mech1234",
		email=f"{username}@example.com",
		role=User.MECHANIC,
	)
	MechanicProfile.objects.create(
		user=user,
		is_available=is_available,
		is_verified=is_verified,
		current_latitude=latitude,
		current_longitude=longitude,
		**profile_fields,
	)
	return user


def make_request(requester, status=ServiceRequest.PENDING, mechanic=None, **fields):
	values = {
		"issue_type": "FLAT_TIRE",
		"latitude": BANGALORE[0],
		"longitude": BANGALORE[1],
	}
	values.update(fields)
	return ServiceRequest.objects.create(requester=requester, status=status, mechanic=mechanic, **values)
