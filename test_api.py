#!/usr/bin/env python3
"""
Smoke test for a deployed backend API
Usage: python test_api.py <api_gateway_url>
"""

import requests
import sys
import uuid

def smoke_test_api(base_url):
    """Hit the health route and run an item round trip"""

    # Remove trailing slash
    base_url = base_url.rstrip('/')

    print(f"Testing API at: {base_url}")
    print("=" * 50)

    failures = 0

    # Test 1: Health
    print("\n1. Testing Health...")
    try:
        response = requests.get(f"{base_url}/health", timeout=10)
        print(f"Status: {response.status_code}")
        if response.status_code == 200:
            data = response.json()
            print(f"Stage: {data.get('stage', 'N/A')}")
            print(f"Branch: {data.get('branch', 'N/A')}")
        else:
            failures += 1
            print(f"Error: {response.text}")
    except requests.RequestException as e:
        failures += 1
        print(f"Error: {e}")

    code = f"smoke-{uuid.uuid4().hex[:8]}"

    # Test 2: Put Item
    print("\n2. Testing Put Item...")
    try:
        response = requests.put(
            f"{base_url}/items/{code}",
            json={"description": "smoke test item"},
            timeout=10
        )
        print(f"Status: {response.status_code}")
        if response.status_code != 200:
            failures += 1
            print(f"Error: {response.text}")
    except requests.RequestException as e:
        failures += 1
        print(f"Error: {e}")

    # Test 3: Get Item
    print("\n3. Testing Get Item...")
    try:
        response = requests.get(f"{base_url}/items/{code}", timeout=10)
        print(f"Status: {response.status_code}")
        print(f"Response: {response.text[:200]}...")
        if response.status_code != 200:
            failures += 1
    except requests.RequestException as e:
        failures += 1
        print(f"Error: {e}")

    # Test 4: Delete Item
    print("\n4. Testing Delete Item...")
    try:
        response = requests.delete(f"{base_url}/items/{code}", timeout=10)
        print(f"Status: {response.status_code}")
        if response.status_code != 200:
            failures += 1
            print(f"Error: {response.text}")
    except requests.RequestException as e:
        failures += 1
        print(f"Error: {e}")

    print("\n" + "=" * 50)
    print(f"API Testing Complete! {failures} failure(s)")
    return failures == 0

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python test_api.py <api_gateway_url>")
        print("Example: python test_api.py https://abc123.execute-api.us-east-1.amazonaws.com/prod")
        sys.exit(1)

    api_url = sys.argv[1]
    sys.exit(0 if smoke_test_api(api_url) else 1)
