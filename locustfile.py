"""
Locust load tests for the Kind-Kart API.

Install: pip install locust
Run: locust -f locustfile.py --host=http://127.0.0.1:3000

For headless: locust -f locustfile.py --host=http://127.0.0.1:3000 \
    --users 10 --spawn-rate 2 --run-time 1m --headless
"""

import os
import random
from locust import HttpUser, task, between


class KindKartUser(HttpUser):
    wait_time = between(1, 3)

    def on_start(self):
        """Optional: login so summary/profile calls hit a real user."""
        self.user_id = os.getenv("LOCUST_USER_ID")
        if os.getenv("LOCUST_AUTH_EMAIL") and os.getenv("LOCUST_AUTH_PASSWORD"):
            r = self.client.post(
                "/api/auth/login",
                json={
                    "email": os.getenv("LOCUST_AUTH_EMAIL"),
                    "password": os.getenv("LOCUST_AUTH_PASSWORD"),
                },
            )
            if r.status_code == 200 and "user" in r.json():
                self.user_id = r.json()["user"]["id"]

    @task(8)
    def root(self):
        self.client.get("/")

    @task(5)
    def summary(self):
        if self.user_id:
            self.client.get(
                f"/api/users/{self.user_id}/donations/summary",
                name="/api/users/[id]/donations/summary",
            )

    @task(3)
    def profile(self):
        if self.user_id:
            self.client.get(
                f"/api/users/{self.user_id}/profile", name="/api/users/[id]/profile"
            )

    @task(2)
    def direct_donation(self):
        self.client.post(
            "/api/payments/process",
            json={
                "amount": random.choice([100, 250, 500]),
                "paymentMethod": "upi",
                "donorInfo": {"firstName": "Load", "email": "load@example.com"},
            },
        )

    @task(1)
    def cart_checkout(self):
        self.client.post(
            "/api/checkout",
            json={
                "userId": self.user_id,
                "items": [
                    {"name": "Book", "price": 10, "qty": 2},
                    {"name": "Pen", "price": 2, "qty": 1},
                ],
                "amount": 22,
            },
        )
