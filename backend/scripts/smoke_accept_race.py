"""Fire concurrent accepts at a running server and check exactly one wins.

Run from the backend/ directory against a dev server (runserver or daphne):
    python scripts/smoke_accept_race.py --base-url http://localhost:8000 --mechanics 8

It will:
1. Ensure a demo requester and N verified, available mechanics exist.
2. Cancel any active demo request and open a fresh FLAT_TIRE request over HTTP.
3. Have every mechanic PUT .../accept at the same time.
4. Print the outcome per mechanic and exit non-zero unless exactly one got 200.
"""

import argparse
import os
import sys
import threading
from pathlib import Path

import django
import requests

# Ensure the Django project root (backend/) is on sys.path so imports work
BASE_DIR = Path(__file__).resolve().parent.parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# Point Django to the project settings and bootstrap ORM
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "roadside_backend.settings.settings")
django.setup()

from django.utils import timezone  # noqa: E402
from rest_framework_simplejwt.tokens import AccessToken  # noqa: E402

from accounts.models import User  # noqa: E402
from mechanics.models import MechanicProfile  # noqa: E402

PASSWORD = "demo1234"
LATITUDE, LONGITUDE = 12.9716, 77.5946


def get_or_create_user(username: str, role: str) -> User:
    user, created = User.objects.get_or_create(
        username=username,
        defaults={"role": role, "email": f"{username}@example.com"},
    )
    if created:
        user.set_password(PASSWORD)
        user.save()
    return user


def ensure_mechanic(index: int) -> User:
    user = get_or_create_user(f"demo_mechanic_{index}", User.MECHANIC)
    MechanicProfile.objects.update_or_create(
        user=user,
        defaults={
            "is_available": True,
            "is_verified": True,
            "current_latitude": LATITUDE + 0.001 * (index + 1),
            "current_longitude": LONGITUDE,
            "location_updated_at": timezone.now(),
        },
    )
    return user


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {AccessToken.for_user(user)}"}


def open_request(base_url: str, requester: User) -> int:
    active = requests.get(f"{base_url}/api/service-requests/active/", headers=auth(requester), timeout=10)
    if active.content and active.json():
        requests.put(
            f"{base_url}/api/service-requests/{active.json()['id']}/cancel/",
            headers=auth(requester), timeout=10,
        )

    response = requests.post(
        f"{base_url}/api/service-requests/",
        json={"issue_type": "FLAT_TIRE", "latitude": LATITUDE, "longitude": LONGITUDE},
        headers=auth(requester),
        timeout=10,
    )
    response.raise_for_status()
    return response.json()["id"]


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--mechanics", type=int, default=8)
    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    requester = get_or_create_user("demo_requester", User.REQUESTER)
    mechanics = [ensure_mechanic(i) for i in range(args.mechanics)]
    request_id = open_request(base_url, requester)
    print(f"Opened request #{request_id}; {len(mechanics)} mechanics racing")

    barrier = threading.Barrier(len(mechanics))
    results = {}

    def attempt(mechanic: User):
        headers = auth(mechanic)
        barrier.wait()
        response = requests.put(
            f"{base_url}/api/mechanic/requests/{request_id}/accept/", headers=headers, timeout=10,
        )
        results[mechanic.username] = (response.status_code, response.json().get("message", "accepted"))

    threads = [threading.Thread(target=attempt, args=(m,)) for m in mechanics]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for username, (code, message) in sorted(results.items()):
        print(f"  {username:<20} {code} {message}")

    winners = [name for name, (code, _) in results.items() if code == 200]
    print(f"Winners: {winners}")
    sys.exit(0 if len(winners) == 1 else 1)


if __name__ == "__main__":
    main()
