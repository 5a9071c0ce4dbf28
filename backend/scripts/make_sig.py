#!/usr/bin/env python3

import json
import sys
import time

import stripe


def make_stripe_signature(secret: str, payload: str) -> str:
    """Generate a stripe-signature header for posting to a local /webhook."""
    ts = int(time.time())
    sig = stripe.WebhookSignature._compute_signature(f"{ts}.{payload}", secret)
    return f"t={ts},v1={sig}"


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: make_sig.py <secret> <event.json>")
        sys.exit(1)

    secret = sys.argv[1]
    with open(sys.argv[2], encoding="utf-8") as f:
        payload = f.read()

    # Validate payload is valid JSON
    try:
        json.loads(payload)
    except json.JSONDecodeError:
        print("Error: Payload must be valid JSON", file=sys.stderr)
        sys.exit(1)

    # Sign the file contents exactly as they will be posted (curl --data-binary)
    print(make_stripe_signature(secret, payload))
