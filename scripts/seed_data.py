#!/usr/bin/env python3
"""
Seed script: creates members in the DB, then listings and swaps via the API.
Accounts come from the auth service in production, so members are inserted
directly and given locally minted tokens; everything else goes over HTTP so
Celery indexing jobs are queued exactly as in normal use.
Run: API must be running (and the Celery worker, for Elasticsearch).
  python scripts/seed_data.py
  python scripts/seed_data.py --users 40 --items-per-user 8 --swaps 60
"""

import argparse
import asyncio
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from app.core.security import create_access_token
from app.db.models import User
from app.db.repositories import UserRepository
from app.db.session import async_session_maker, engine

API_BASE = "http://localhost:8000/api/v1"

LISTINGS = [
    ("Vegetable lasagna", "meal", "Half a tray, baked this morning."),
    ("Chicken curry", "meal", "Mild, with rice. Enough for two."),
    ("Sourdough loaf", "bakery", "Baked yesterday, still soft inside."),
    ("Cinnamon rolls", "bakery", "Box of six from the corner bakery."),
    ("Courgettes", "produce", "Allotment glut, take as many as you like."),
    ("Apples", "produce", "Windfalls, great for crumble."),
    ("Greek yoghurt", "dairy", "Unopened 1kg tub, best before Friday."),
    ("Cheddar block", "dairy", "Mature, 400g, opened but wrapped."),
    ("Dried lentils", "pantry", "Two bags of red lentils."),
    ("Pasta bundle", "pantry", "Penne and fusilli, sealed."),
    ("Birthday cake", "other", "Leftover sponge cake, about eight slices."),
]


async def create_members(count: int) -> list[int]:
    """Insert members that do not exist yet; returns all their ids."""
    ids = []
    async with async_session_maker() as session:
        repo = UserRepository(session)
        for i in range(count):
            email = f"member{i + 1}@example.com"
            user = await repo.get_by_email(email)
            if user is None:
                user = await repo.add(User(email=email, full_name=f"Member {i + 1}"))
            ids.append(user.id)
        await session.commit()
    await engine.dispose()
    return ids


def random_listing() -> dict:
    title, category, description = random.choice(LISTINGS)
    priced = random.random() < 0.3
    original = random.choice([4.0, 6.5, 9.0, 12.0])
    return {
        "title": title,
        "description": description,
        "category": category,
        "quantity": random.randint(1, 6),
        "price": round(original * random.choice([0.3, 0.5]), 2) if priced else 0,
        "original_price": original,
        "is_free": not priced,
        "dietary": {"vegetarian": random.random() < 0.5, "gluten_free": random.random() < 0.2},
        "expires_at": (datetime.now(timezone.utc) + timedelta(hours=random.randint(2, 72))).isoformat(),
        "address": f"{random.randint(1, 200)} High Street",
    }


def main():
    ap = argparse.ArgumentParser(description="Seed members, listings and swaps")
    ap.add_argument("--users", type=int, default=20, help="Number of members")
    ap.add_argument("--items-per-user", type=int, default=5, help="Listings per member")
    ap.add_argument("--swaps", type=int, default=30, help="Swap requests to attempt")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    member_ids = asyncio.run(create_members(args.users))
    headers = {uid: {"Authorization": f"Bearer {create_access_token(uid)}"} for uid in member_ids}
    print(f"Members ready: {len(member_ids)}")

    listings = []
    errors = []
    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        for uid in member_ids:
            for _ in range(args.items_per_user):
                r = client.post("/food-items", headers=headers[uid], json=random_listing())
                if r.status_code == 201:
                    listings.append((r.json()["id"], uid))
                else:
                    errors.append(f"Listing for member {uid}: {r.status_code} {r.text[:80]}")
        print(f"Listings created: {len(listings)}")

        outcomes = {"completed": 0, "rejected": 0, "pending": 0, "conflict": 0}
        for _ in range(min(args.swaps, len(listings))):
            item_id, owner = random.choice(listings)
            requester = random.choice([uid for uid in member_ids if uid != owner])
            r = client.post("/swaps", headers=headers[requester], json={"food_item_id": item_id})
            if r.status_code == 409:
                outcomes["conflict"] += 1
                continue
            if r.status_code != 201:
                errors.append(f"Swap on item {item_id}: {r.status_code} {r.text[:80]}")
                continue
            swap_id = r.json()["id"]
            roll = random.random()
            if roll < 0.2:
                outcomes["pending"] += 1
                continue
            if roll < 0.35:
                client.put(f"/swaps/{swap_id}/status", headers=headers[owner], json={"status": "rejected"})
                outcomes["rejected"] += 1
                continue
            client.put(f"/swaps/{swap_id}/status", headers=headers[owner], json={"status": "accepted"})
            client.post(
                f"/swaps/{swap_id}/messages",
                headers=headers[requester],
                json={"content": "Thanks! Can I collect this evening?"},
            )
            client.put(f"/swaps/{swap_id}/status", headers=headers[requester], json={"status": "completed"})
            client.put(
                f"/swaps/{swap_id}/review",
                headers=headers[requester],
                json={"rating": random.randint(3, 5), "review_for": "provider", "review": "Smooth pickup"},
            )
            outcomes["completed"] += 1

    print(f"\nDone. Swaps: {outcomes}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")
    print("\nTip: Run the Celery worker to index listings in Elasticsearch, then try /search/food-items?q=...")


if __name__ == "__main__":
    main()
