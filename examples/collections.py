"""
Ragora Python SDK - Collections Example

Walks a collection through create, list, get, update and delete.
"""

from ragora import RagoraClient


def main():
    client = RagoraClient()

    # ============================================================
    # Create
    # ============================================================
    print("=== Create Collection ===\n")

    collection = client.create_collection(
        "SDK Example Collection",
        description="A test collection created from the Python SDK",
    )
    print(f"Created: {collection.name}")
    print(f"  ID: {collection.id}")
    print(f"  Created at: {collection.created_at}\n")

    # ============================================================
    # List (paginated)
    # ============================================================
    print("=== List Collections ===\n")

    page = client.list_collections(limit=10, offset=0)
    print(f"Total: {page.total} (limit {page.limit}, offset {page.offset}, more: {page.has_more})")
    for item in page.data:
        print(f"  - {item.name} ({item.id}): {item.total_documents} documents")
    print()

    # ============================================================
    # Get and Update
    # ============================================================
    print("=== Get Collection ===\n")

    fetched = client.get_collection(collection.id)
    print(f"Fetched: {fetched.name} [request {fetched.meta.request_id}]\n")

    print("=== Update Collection ===\n")

    updated = client.update_collection(
        collection.id,
        name="SDK Example Collection (Updated)",
        description="Updated from the Python SDK",
    )
    print(f"Updated: {updated.name}")
    print(f"  Description: {updated.description}\n")

    # ============================================================
    # Delete
    # ============================================================
    print("=== Delete Collection ===\n")

    deleted = client.delete_collection(collection.id)
    print(f"{deleted.message}: {deleted.id}")

    client.close()


if __name__ == "__main__":
    main()
