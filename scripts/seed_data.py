#!/usr/bin/env python3
"""
Seed script: creates users, listings and some swap activity via the API (no direct DB).
Every user gets the welcome bonus and a listing reward per item, so the ledger
has realistic history. Run: API must be running (Celery worker for ES indexing).
  python scripts/seed_data.py
  python scripts/seed_data.py --users 20 --items-per-user 5
"""

import argparse
import random
import sys
from pathlib import Path

# Project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

API_BASE = "http://localhost:8000/api/v1"

TITLES = [
    "Denim jacket", "Linen shirt", "Wool sweater", "Silk blouse", "Graphic tee",
    "Straight-leg jeans", "Pleated skirt", "Cargo shorts", "Wrap dress", "Maxi dress",
    "Trench coat", "Puffer vest", "Leather boots", "Canvas sneakers", "Ballet flats",
    "Tote bag", "Wool scarf", "Leather belt", "Beanie", "Cocktail dress",
]

DESCRIPTIONS = [
    "Worn a handful of times, no stains or tears.",
    "Vintage piece in great shape.",
    "Bought last season, fits true to size.",
    "Never worn, tags still attached.",
    "Some fading from washing, still lots of life left.",
]

SIZES = ["XS", "S", "M", "L", "XL", "38", "40", "42"]
CONDITIONS = ["new", "like new", "good", "fair"]
TAGS = ["vintage", "casual", "formal", "summer", "winter", "cotton", "wool", "denim"]


def random_item(category_ids: list[int]) -> dict:
    return {
        "title": random.choice(TITLES) + (" " + str(random.randint(1, 99)) if random.random() > 0.5 else ""),
        "description": random.choice(DESCRIPTIONS),
        "category_id": random.choice(category_ids),
        "size": random.choice(SIZES),
        "condition": random.choice(CONDITIONS),
        "point_value": random.choice([20, 30, 40, 50, 60, 80]),
        "tags": random.sample(TAGS, k=2),
        "images": [f"https://picsum.photos/seed/{random.randint(1, 10_000)}/600/800"],
    }


def main():
    ap = argparse.ArgumentParser(description="Seed users, items and swap requests via API")
    ap.add_argument("--users", type=int, default=10, help="Number of users to create")
    ap.add_argument("--items-per-user", type=int, default=4, help="Items per user")
    ap.add_argument("--redemptions", type=int, default=5, help="Points redemptions to attempt")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    sessions = []  # (user_id, headers)
    item_owner: dict[int, int] = {}
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        category_ids = [c["id"] for c in client.get("/categories").json()]
        if not category_ids:
            print("No categories found. Start the API once so it seeds them.")
            sys.exit(1)

        print(f"Creating {args.users} users...")
        for i in range(args.users):
            email = f"user{i+1}@example.com"
            password = "password123"
            r = client.post("/users/register", json={
                "username": f"user{i+1}",
                "email": email,
                "password": password,
                "first_name": "User",
                "last_name": str(i + 1),
            })
            if r.status_code not in (201, 409):
                errors.append(f"Register {email}: {r.status_code} {r.text[:80]}")
                continue
            r = client.post("/users/login", json={"email": email, "password": password})
            if r.status_code != 200:
                errors.append(f"Login {email}: {r.status_code}")
                continue
            body = r.json()
            sessions.append((body["user_id"], {"Authorization": f"Bearer {body['access_token']}"}))

        print(f"Creating ~{len(sessions) * args.items_per_user} items...")
        for user_id, headers in sessions:
            for _ in range(args.items_per_user):
                r = client.post("/items", headers=headers, json=random_item(category_ids))
                if r.status_code == 201:
                    item_owner[r.json()["id"]] = user_id
                else:
                    errors.append(f"Item for user {user_id}: {r.status_code} {r.text[:80]}")

        print(f"Attempting {args.redemptions} points redemptions...")
        redeemed = 0
        for _ in range(args.redemptions):
            if len(sessions) < 2 or not item_owner:
                break
            user_id, headers = random.choice(sessions)
            candidates = [i for i, owner in item_owner.items() if owner != user_id]
            if not candidates:
                continue
            item_id = random.choice(candidates)
            item = client.get(f"/items/{item_id}").json()
            r = client.post(
                "/swap-requests",
                headers=headers,
                json={"item_id": item_id, "points_offered": item["point_value"]},
            )
            if r.status_code == 201:
                redeemed += 1
                item_owner.pop(item_id)
            else:
                errors.append(f"Redeem item {item_id}: {r.status_code} {r.json().get('error', {}).get('code')}")

    print(f"\nDone. Users: {len(sessions)}, Items: {len(item_owner) + redeemed}, Redemptions: {redeemed}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()
