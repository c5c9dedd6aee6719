"""Replay a captured Alchemy webhook body against a running holders-sync instance.

The body is re-signed with the given key so captured payloads can be replayed
after the subscription key rotated, or hand-edited for manual testing.

Run:
    python scripts/replay_webhook.py --url http://127.0.0.1:8080/transfers \
        --key "$NFT_SIGNING_KEY" --body captured.json

Prints the HTTP status and response text; exit code 0 on 2xx.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import httpx

from holders_sync.webhooks.verify import compute_signature


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    p.add_argument("--url", required=True, help="Endpoint, e.g. http://127.0.0.1:8080/doop-bridge")
    p.add_argument("--key", required=True, help="Signing key of the matching subscription")
    p.add_argument("--body", required=True, help="File holding the exact webhook body")
    args = p.parse_args(argv)

    body = Path(args.body).read_bytes()
    headers = {
        "Content-Type": "application/json",
        "X-Alchemy-Signature": compute_signature(body, args.key),
    }
    r = httpx.post(args.url, content=body, headers=headers, timeout=10.0)
    print(f"{r.status_code} {r.text}")
    return 0 if r.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
