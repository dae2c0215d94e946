"""
Ragora Python SDK - Search Example

Demonstrates semantic search over collections.
"""

import os

from ragora import RagoraClient


def main():
    client = RagoraClient()
    collection_id = os.getenv("RAGORA_COLLECTION_ID")

    # ============================================================
    # Simple Search
    # ============================================================
    print("=== Simple Search ===\n")

    response = client.search("How do refunds work?", collection_id=collection_id, top_k=3)

    print(f"Found {response.total} results (request {response.meta.request_id})")
    for i, result in enumerate(response.results, 1):
        print(f"{i}. [{result.score:.3f}] {result.content[:100]}")
    print()

    # ============================================================
    # Filtered Search
    # ============================================================
    print("=== Filtered Search ===\n")

    response = client.search(
        "release notes",
        collection_id=collection_id,
        top_k=5,
        threshold=0.4,
        source_type=["markdown"],
        version=["2.0"],
        enable_reranker=True,
    )
    for result in response.results:
        print(f"- {result.document_id}: {result.metadata}")
    print()

    # ============================================================
    # Cost Tracking
    # ============================================================
    print("=== Cost Tracking ===\n")

    if response.meta.cost_usd is not None:
        print(f"Cost: ${response.meta.cost_usd:.6f}")
    if response.meta.balance_remaining_usd is not None:
        print(f"Balance remaining: ${response.meta.balance_remaining_usd:.2f}")

    client.close()


if __name__ == "__main__":
    main()
