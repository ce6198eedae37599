import sys

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8000"

ENDPOINTS = ["/health", "/snapshot", "/alerts", "/cme", "/planets", "/markers"]


def check_endpoint(path):
    url = f"{BASE_URL}{path}"
    try:
        response = requests.get(url, timeout=30)
    except requests.RequestException as e:
        print(f"{path:10} ERROR {e}")
        return False

    if response.status_code != 200:
        print(f"{path:10} FAILED {response.status_code}: {response.text}")
        return False

    data = response.json()
    size = len(data) if isinstance(data, list) else len(data.keys())
    print(f"{path:10} OK ({size} {'items' if isinstance(data, list) else 'fields'})")
    return True


def check_rejections():
    ok = True
    response = requests.get(f"{BASE_URL}/does-not-exist", timeout=10)
    if response.status_code != 404 or response.json() != {"error": "not_found"}:
        print(f"unknown path: expected 404, got {response.status_code}")
        ok = False
    response = requests.post(f"{BASE_URL}/snapshot", timeout=10)
    if response.status_code != 405 or response.json() != {"error": "method_not_allowed"}:
        print(f"POST /snapshot: expected 405, got {response.status_code}")
        ok = False
    return ok


if __name__ == "__main__":
    print(f"Verifying gateway at {BASE_URL}\n")
    results = [check_endpoint(path) for path in ENDPOINTS]
    results.append(check_rejections())
    if all(results):
        print("\nAll gateway checks PASSED.")
    else:
        print("\nSome checks FAILED.")
        sys.exit(1)
