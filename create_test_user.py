# create_test_user.py
"""
Create the test account through the signup endpoint.
Use when login answers 401 because the local database was wiped.
"""

import sys
import httpx

API_URL = "http://localhost:8080/api/auth/signup"

user_data = {
    "fullName": "Test User",
    "universityEmail": "a@snuchennai.edu.in",
    "password": ".x-K,.2RWPj*>i@",
    "confirmPassword": ".x-K,.2RWPj*>i@"
}


def create_test_user(url: str = API_URL) -> bool:
    print("Creating test user...")
    print(f"Email: {user_data['universityEmail']}")

    try:
        response = httpx.post(url, json=user_data, timeout=10)
    except httpx.HTTPError as e:
        print(f"❌ Error: {str(e)}")
        return False

    data = response.json()
    print(f"User creation result: {data}")

    if response.status_code == 201 and data.get("success"):
        print("✅ User created successfully! Verify the email before logging in.")
        return True

    print(f"❌ User creation failed: {data.get('message') or data.get('detail')}")
    return False


if __name__ == "__main__":
    sys.exit(0 if create_test_user(*sys.argv[1:2]) else 1)
