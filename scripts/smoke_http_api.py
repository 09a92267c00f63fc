"""
Manual smoke runner for the Kirana Django adapter endpoints.

Usage:
    python scripts/smoke_http_api.py
    python scripts/smoke_http_api.py --base-url http://127.0.0.1:8000

Expects a server started with the demo shelf (KIRANA_SEED_DEMO=1).
"""

from __future__ import annotations

import argparse
import json
from urllib import error, request


def _call(
    *,
    method: str,
    url: str,
    body: dict | None = None,
    raw_body: bytes | None = None,
) -> tuple[int, dict]:
    encoded = raw_body
    headers = {}
    if body is not None:
        encoded = json.dumps(body).encode("utf-8")
    if encoded is not None:
        headers["Content-Type"] = "application/json"

    req = request.Request(url=url, method=method, headers=headers, data=encoded)
    try:
        with request.urlopen(req) as response:
            status = response.status
            payload = json.loads(response.read().decode("utf-8"))
            return status, payload
    except error.HTTPError as exc:
        payload = json.loads(exc.read().decode("utf-8"))
        return exc.code, payload


def _print_case(label: str, status: int, payload: dict) -> None:
    print(f"\n[{label}] status={status}")
    print(json.dumps(payload, indent=2, sort_keys=True))


def run(base_url: str) -> None:
    api = base_url.rstrip("/") + "/v1"

    status, payload = _call(method="GET", url=f"{api}/state")
    _print_case("initial-state", status, payload)

    status, payload = _call(
        method="POST",
        url=f"{api}/actions",
        body={
            "action": "RESTOCK",
            "data": {"items": [{"name": "milk", "quantity": 10}]},
        },
    )
    _print_case("restock-milk", status, payload)

    status, payload = _call(
        method="POST",
        url=f"{api}/actions",
        body={
            "action": "ADD_TO_CART",
            "data": {"items": [
                {"name": "Maggi", "quantity": 2},
                {"name": "bread", "quantity": 1},
            ]},
        },
    )
    _print_case("add-to-cart", status, payload)

    status, payload = _call(
        method="POST",
        url=f"{api}/bill/preview",
        body={"items": [{"name": "Maggi", "quantity": 2}]},
    )
    _print_case("bill-preview", status, payload)

    status, payload = _call(
        method="POST", url=f"{api}/actions", body={"kind": "CHECKOUT"},
    )
    _print_case("checkout", status, payload)

    status, payload = _call(
        method="POST", url=f"{api}/actions", body={"action": "NONE"},
    )
    _print_case("unknown-kind", status, payload)

    status, payload = _call(
        method="POST", url=f"{api}/actions", raw_body=b"{not json",
    )
    _print_case("invalid-json", status, payload)

    status, payload = _call(method="GET", url=f"{api}/insights")
    _print_case("insights", status, payload)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--base-url",
        default="http://127.0.0.1:8000",
        help="Server base URL.",
    )
    args = parser.parse_args()
    run(args.base_url)


if __name__ == "__main__":
    main()
