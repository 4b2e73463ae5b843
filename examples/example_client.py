"""
Example client for the /audit endpoint.

Posts a badge export to a running API and prints the text report.
"""
import json
import os
import sys
from pathlib import Path

import httpx


def audit_snapshot(snapshot_path: str, api_url: str = "http://localhost:8000", api_key: str = None):
    """
    Audit a JSON badge export through the API.

    Args:
        snapshot_path: Path to a JSON array of badge rows
        api_url: Base URL of the API (default: http://localhost:8000)
        api_key: Bearer token (default: API_KEY environment variable)

    Returns:
        dict: AuditResponse payload, or None on failure
    """
    records = json.loads(Path(snapshot_path).read_text(encoding="utf-8"))
    payload = {
        "records": records,
        "taxonomy": {
            "required_types": ["focus_master", "weekly_marathon", "grades_logged", "diverse_study"],
            "deprecated_types": ["share_stats", "library_study", "weights_complete"],
        },
    }

    headers = {}
    token = api_key or os.getenv("API_KEY")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    print(f"Auditing {len(records)} badge(s) from {snapshot_path} via {api_url}/audit ...")

    try:
        response = httpx.post(f"{api_url}/audit", json=payload, headers=headers, timeout=30.0)
    except httpx.HTTPError as e:
        print(f"Request failed: {e}")
        return None

    if response.status_code != 200:
        print(f"Error: {response.status_code}")
        print(f"Response: {response.text}")
        return None

    result = response.json()
    print(result["text"])
    return result


if __name__ == "__main__":
    default_snapshot = Path(__file__).parent / "badges_snapshot.json"
    path = sys.argv[1] if len(sys.argv) > 1 else str(default_snapshot)
    result = audit_snapshot(path)
    sys.exit(0 if result is not None else 1)
