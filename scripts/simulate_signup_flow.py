"""Drive a running Launchpad server through the public signup flow.

  python scripts/simulate_signup_flow.py --base http://127.0.0.1:8000 --admin-secret s3cret
"""

import argparse
import time

import requests


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--base", default="http://127.0.0.1:8000")
    ap.add_argument("--email", default=None, help="defaults to a unique address per run")
    ap.add_argument("--admin-secret", default=None, help="also exercise the dashboard endpoints")
    args = ap.parse_args()

    base = args.base.rstrip("/") + "/api"
    email = args.email or f"smoke+{int(time.time())}@example.com"

    s = requests.Session()

    r = s.get(f"{base}/health", timeout=10)
    print("GET /health", r.status_code, r.text[:200])
    if r.status_code != 200:
        return 2

    r = s.post(f"{base}/waitlist", json={"email": email, "firstName": "Smoke"}, timeout=30)
    print("POST /waitlist", r.status_code, r.text[:200])
    if r.status_code != 200:
        return 3

    r = s.post(f"{base}/waitlist", json={"email": email.upper()}, timeout=30)
    print("POST /waitlist (duplicate)", r.status_code, r.text[:200])
    if r.status_code != 409:
        return 3

    r = s.post(
        f"{base}/feature-requests",
        json={"email": email, "featureRequest": "Please add a dark mode to the dashboard."},
        timeout=10,
    )
    print("POST /feature-requests", r.status_code, r.text[:200])
    if r.status_code != 200:
        return 3

    r = s.get(f"{base}/stats", timeout=10)
    print("GET /stats", r.status_code, r.text[:200])
    if r.status_code != 200:
        return 3

    if args.admin_secret:
        headers = {"Authorization": f"Bearer {args.admin_secret}"}
        r = s.get(f"{base}/dashboard", headers=headers, timeout=10)
        print("GET /dashboard", r.status_code, r.text[:240])
        if r.status_code != 200:
            return 4

        r = s.get(f"{base}/dashboard/subscribers", params={"search": email, "format": "csv"}, headers=headers, timeout=10)
        print("GET /dashboard/subscribers?format=csv", r.status_code)
        print(r.text[:400])
        if r.status_code != 200:
            return 4

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
