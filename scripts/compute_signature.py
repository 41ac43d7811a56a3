#!/usr/bin/env python3
"""
Helper script to compute a DingTalk robot signature for manual requests.

Run from the repo root with the package installed:
    python -m scripts.compute_signature <secret> [timestamp_ms]
"""
import sys

from app.dingtalk import current_timestamp_ms, sign

if len(sys.argv) < 2:
    print("Usage: python -m scripts.compute_signature <secret> [timestamp_ms]")
    print("Example: python -m scripts.compute_signature 'SECxxxxxxxx' 1700000000000")
    sys.exit(1)

secret = sys.argv[1]
timestamp = int(sys.argv[2]) if len(sys.argv) > 2 else current_timestamp_ms()

signature = sign(secret, timestamp)
print(f"timestamp={timestamp}")
print(f"sign={signature}")
print(f"query=timestamp={timestamp}&sign={signature}")
