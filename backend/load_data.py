"""
Data Loader Script - Loads sample_students.json into the registry via API.

Posts each student to the admin add endpoint using HTTP Basic credentials
from the admin allow-list, so every seeded student also gets an ADD audit
entry.

Usage:
    python load_data.py                              # Uses default URL
    python load_data.py http://localhost:8000         # Custom API URL
    python load_data.py http://backend:8000           # Inside Docker network

Credentials default to admin@example.com / admin and can be overridden with
ADMIN_EMAIL and ADMIN_PASSWORD.
"""

import json
import sys
import os

import httpx


def load_students(path):
    with open(path, 'r') as f:
        return json.load(f)


def post_students(api_url, students, auth):
    """Post each student; returns a list of (phone_number, status, detail)."""
    results = []
    with httpx.Client(base_url=api_url, auth=auth, timeout=30.0) as client:
        for student in students:
            resp = client.post("/api/students", json=student)
            phone = student.get("phone_number", "?")
            if resp.status_code == 201:
                results.append((phone, "ADDED", resp.json().get("id")))
            elif resp.status_code == 422:
                results.append((phone, "REJECTED", resp.json().get("errors")))
            else:
                resp.raise_for_status()
    return results


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:8000")
    auth = (os.getenv("ADMIN_EMAIL", "admin@example.com"), os.getenv("ADMIN_PASSWORD", "admin"))

    data_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sample_students.json")
    if not os.path.exists(data_file):
        data_file = "sample_students.json"

    if not os.path.exists(data_file):
        print("Error: Could not find sample_students.json")
        sys.exit(1)

    print(f"Loading data from: {data_file}")
    students = load_students(data_file)
    print(f"Found {len(students)} students to add")
    print(f"Sending to: {api_url}/api/students")
    print()

    try:
        results = post_students(api_url, students, auth)
    except httpx.HTTPStatusError as e:
        print(f"HTTP Error {e.response.status_code}: {e.response.text}")
        sys.exit(1)

    added = sum(1 for _, status, _ in results if status == "ADDED")

    print("=" * 60)
    print("LOAD SUMMARY")
    print("=" * 60)
    print(f"  Total Received:  {len(students)}")
    print(f"  Added:           {added}")
    print(f"  Rejected:        {len(results) - added}")
    print("=" * 60)
    print()

    for phone, status, detail in results:
        icon = '✅' if status == 'ADDED' else '❌'
        extra = f" (id: {detail})" if status == 'ADDED' else f" ({detail})"
        print(f"  {icon} {phone}: {status}{extra}")

    print()
    print("✅ Data loading complete!")


if __name__ == "__main__":
    main()
