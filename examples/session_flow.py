#!/usr/bin/env python3
"""
Pressroom session walkthrough — register → me → refresh → logout → subscribe.

Run with: python examples/session_flow.py

Requires: pip install httpx
Backend must be running: http://localhost:8000 (pressroom serve)
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"


def main():
    run_id = uuid.uuid4().hex[:6]
    # The client's cookie jar carries the refreshToken cookie between calls.
    client = httpx.Client(base_url=BASE, timeout=10)

    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        sys.exit(1)
    print(f"  Database: {resp.json()['database']}")

    print("\n1. Registering...")
    resp = client.post("/auth/register", json={
        "firstname": "Demo",
        "lastname": f"Reader {run_id}",
        "email": f"demo-{run_id}@example.com",
        "password": "demo-password-123",
    })
    assert resp.status_code == 200, f"Failed: {resp.text}"
    data = resp.json()["data"]
    access = data["accessToken"]
    print(f"   User: {data['user']['fullname']} ({data['user']['id'][:8]}...)")
    print(f"   Cookie set: {'refreshToken' in client.cookies}")

    print("\n2. Who am I?")
    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {access}"})
    print(f"   {resp.json()['email']} / role={resp.json()['role']}")

    print("\n3. Refreshing the access token...")
    resp = client.post("/auth/refresh")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    fresh = resp.json()["accessToken"]
    print(f"   New token differs: {fresh != access}")

    print("\n4. Logging out...")
    resp = client.post("/auth/logout")
    print(f"   {resp.json()['message']}")
    resp = client.post("/auth/refresh")
    print(f"   Refresh after logout: {resp.status_code}")

    print("\n5. Subscribing to the mailing list...")
    resp = client.post("/subscribers", json={"email": f"demo-{run_id}@example.com"})
    print(f"   {resp.status_code} {resp.json()['message']}")


if __name__ == "__main__":
    main()
