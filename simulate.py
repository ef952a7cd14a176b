"""
Simple scoring simulation against a running server.
"""

import random
import sys
import time
from datetime import datetime, timedelta, timezone

import requests


def main():
    BASE_URL = "http://localhost:8000/api/v1"
    NUM_PARTICIPANTS = 8
    NUM_SUBMISSIONS = 40

    print("=== Hackathon Scoring Simulation ===\n")

    # Create a live event
    now = datetime.now(timezone.utc)
    response = requests.post(
        f"{BASE_URL}/events",
        json={
            "title": f"Simulated Hackathon {int(time.time())}",
            "description": "Created by simulate.py",
            "start_date": (now - timedelta(hours=1)).isoformat(),
            "end_date": (now + timedelta(hours=23)).isoformat()
        }
    )
    if response.status_code != 201:
        print(f"X Failed to create event: {response.text}")
        sys.exit(1)
    event_id = response.json()["id"]
    print(f"Created event {event_id}")

    # Create participants
    print(f"\nCreating {NUM_PARTICIPANTS} participants...")
    participants = []
    for i in range(NUM_PARTICIPANTS):
        response = requests.post(
            f"{BASE_URL}/profiles",
            json={"username": f"hacker_{i}_{int(time.time())}"}
        )
        if response.status_code == 201:
            participants.append(response.json()["id"])
            print(f"  Created participant {i + 1} (ID: {participants[-1]})")

    if not participants:
        print("X Need at least 1 participant")
        sys.exit(1)

    # Submit scores; coarse buckets make ties likely
    print(f"\nSubmitting {NUM_SUBMISSIONS} scores...")
    latest = {}
    for _ in range(NUM_SUBMISSIONS):
        user_id = random.choice(participants)
        score = random.randrange(0, 100, 10)

        response = requests.post(
            f"{BASE_URL}/leaderboard",
            json={"event_id": event_id, "user_id": user_id, "score": score}
        )
        if response.status_code == 201:
            latest[user_id] = score
            entry = response.json()
            print(f"  {user_id[:8]} -> {score} (rank {entry['rank']})")
        else:
            print(f"Submission failed: {response.text}")

    # Display results
    print("\n=== Results ===\n")
    response = requests.get(f"{BASE_URL}/leaderboard/{event_id}")
    if response.status_code != 200:
        print(f"X Failed to get leaderboard: {response.text}")
        sys.exit(1)

    leaderboard = response.json()
    for entry in leaderboard:
        name = entry["user"]["display_name"] if entry.get("user") else entry["user_id"]
        print(f"  {entry['rank']}. {name}: {entry['score']}")

    mismatched = [e for e in leaderboard if latest.get(e["user_id"]) != e["score"]]
    if mismatched:
        print(f"\nX {len(mismatched)} entries do not match the last submitted score")
        sys.exit(1)

    print("\n Simulation complete!")


if __name__ == "__main__":
    main()
