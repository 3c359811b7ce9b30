from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from services.tests.factories import make_mechanic, make_requester


def telegram_update(chat_id, text):
	return {"update_id": 1, "message": {"message_id": 7, "chat": {"id": chat_id}, "text": text}}


@patch("accounts.views.send_telegram_message_task")
class TelegramWebhookTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.mechanic = User.objects.create_user(
			username="mech", password="x", email="mech@example.com", role=User.MECHANIC
		)

	def post(self, payload):
		return self.client.post("/api/telegram/webhook/", payload, format="json")

	def test_link_mechanic_by_email(self, mock_task):
		response = self.post(telegram_update(555, "/link MECH@example.com"))

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data, {"ok": True})
		self.mechanic.refresh_from_db()
		self.assertEqual(self.mechanic.telegram_chat_id, 555)
		mock_task.delay.assert_called_once()
		self.assertEqual(mock_task.delay.call_args.kwargs["chat_id"], 555)

	def test_requester_email_is_not_linked(self, mock_task):
		requester = User.objects.create_user(
			username="req", password="x", email="req@example.com", role=User.REQUESTER
		)

		response = self.post(telegram_update(556, "/link req@example.com"))

		self.assertEqual(response.status_code, 200)
		requester.refresh_from_db()
		self.assertIsNone(requester.telegram_chat_id)
		self.assertIn("No mechanic account", mock_task.delay.call_args.kwargs["text"])

	def test_usage_hint_without_email(self, mock_task):
		self.post(telegram_update(557, "/link"))
		self.assertIn("Usage", mock_task.delay.call_args.kwargs["text"])

	def test_other_text_ignored(self, mock_task):
		response = self.post(telegram_update(558, "hello"))

		self.assertEqual(response.status_code, 200)
		mock_task.delay.assert_not_called()

	def test_update_without_chat_answers_ok(self, mock_task):
		response = self.post({"update_id": 2})

		self.assertEqual(response.status_code, 200)
		mock_task.delay.assert_not_called()


class MeViewTests(TestCase):
	def test_me_returns_role(self):
		user = User.objects.create_user(username="req", password="x", role=User.REQUESTER)
		client = APIClient()
		client.force_authenticate(user=user)

		response = client.get("/api/auth/me/")

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data["role"], "user")
		self.assertNotIn("password", response.data)

	def test_token_obtain(self):
		User.objects.create_user(username="req", password="pass1234", role=User.REQUESTER)

		response = APIClient().post(
			"/api/auth/token/", {"username": "req", "password": "pass1234"}, format="json"
		)

		self.assertEqual(response.status_code, 200)
		self.assertIn("access", response.data)


class UserAdminTests(TestCase):
	def setUp(self):
		admin_user = User.objects.create_superuser("root", "root@example.com", "x")
		self.client.force_login(admin_user)
		self.linked = make_mechanic("linked")
		User.objects.filter(pk=self.linked.pk).update(telegram_chat_id=777)
		self.unlinked = make_requester("unlinked")

	def test_filter_by_telegram_link(self):
		response = self.client.get("/admin/accounts/user/", {"telegram": "linked"})

		self.assertEqual(response.status_code, 200)
		self.assertEqual(list(response.context["cl"].queryset), [self.linked])

	def test_unlink_action(self):
		response = self.client.post("/admin/accounts/user/", {
			"action": "unlink_telegram",
			"_selected_action": [self.linked.pk],
		})

		self.assertEqual(response.status_code, 302)
		self.linked.refresh_from_db()
		self.assertIsNone(self.linked.telegram_chat_id)

	def test_profile_inline_only_for_mechanics(self):
		mechanic_page = self.client.get(f"/admin/accounts/user/{self.linked.pk}/change/")
		requester_page = self.client.get(f"/admin/accounts/user/{self.unlinked.pk}/change/")

		self.assertEqual(len(mechanic_page.context["inline_admin_formsets"]), 1)
		self.assertEqual(len(requester_page.context["inline_admin_formsets"]), 0)
