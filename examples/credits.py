"""
Ragora Python SDK - Credits Example

Checks the credit balance and reads cost and rate limit headers from
a search response.
"""

import os

from ragora import RagoraClient


def fmt(value, template):
    return template.format(value) if value is not None else "N/A"


def main():
    client = RagoraClient()

    # ============================================================
    # Balance
    # ============================================================
    print("=== Credit Balance ===\n")

    balance = client.get_balance()
    print(f"Balance: ${balance.balance_usd:.2f} {balance.currency}")
    print(f"Request ID: {balance.meta.request_id}\n")

    # ============================================================
    # Cost Tracking
    # ============================================================
    print("=== Search with Cost Tracking ===\n")

    results = client.search(
        "How does vector search work?",
        collection_id=os.getenv("RAGORA_COLLECTION_ID"),
        top_k=3,
    )
    meta = results.meta
    print(f"Found {results.total} results")
    print(f"Cost: {fmt(meta.cost_usd, '${:.6f}')}")
    print(f"Balance remaining: {fmt(meta.balance_remaining_usd, '${:.2f}')}")

    # ============================================================
    # Rate Limits
    # ============================================================
    print("\n=== Rate Limit Info ===\n")

    print(f"Limit: {fmt(meta.rate_limit_limit, '{} requests per window')}")
    print(f"Remaining: {fmt(meta.rate_limit_remaining, '{}')}")
    print(f"Resets in: {fmt(meta.rate_limit_reset, '{} seconds')}")

    client.close()


if __name__ == "__main__":
    main()
