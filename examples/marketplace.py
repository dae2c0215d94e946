"""
Ragora Python SDK - Marketplace Example

Browses public marketplace products and shows one in detail.
"""

from ragora import RagoraClient


def describe_price(listing):
    if listing.type == "free":
        return "Free"
    if listing.type == "usage_based":
        if listing.price_per_retrieval_usd is None:
            return "Per retrieval: N/A"
        return f"Per retrieval: ${listing.price_per_retrieval_usd:.5f}"
    interval = f"/{listing.price_interval}" if listing.price_interval else ""
    return f"${listing.price_amount_usd:.2f}{interval}"


def main():
    client = RagoraClient()

    # ============================================================
    # Browse
    # ============================================================
    print("=== Marketplace Products ===\n")

    products = client.list_marketplace(limit=10, offset=0)
    print(f"Found {products.total} product(s) (showing {len(products.data)}):\n")

    for product in products.data:
        print(f"  {product.title}")
        print(f"    ID: {product.id}")
        print(f"    Description: {product.description or 'No description'}")
        print(f"    Rating: {product.average_rating:.1f} ({product.review_count} reviews)\n")

    # ============================================================
    # Product Details
    # ============================================================
    if products.data:
        print("=== Product Details ===\n")

        detail = client.get_marketplace_product(products.data[0].id)
        print(f"Title: {detail.title}")
        print(f"Slug: {detail.slug}")
        print(f"Status: {detail.status}")
        print(f"Vectors: {detail.total_vectors}, Chunks: {detail.total_chunks}")
        print(f"Access count: {detail.access_count}")

        for listing in detail.listings or []:
            print(f"  - {listing.type}: {describe_price(listing)} (active: {listing.is_active})")

        if detail.seller:
            print(f"Seller: {detail.seller.name or 'Unknown'}")
        if detail.categories:
            print(f"Categories: {', '.join(c.name for c in detail.categories)}")

    # ============================================================
    # Search
    # ============================================================
    print("\n=== Search Marketplace ===\n")

    results = client.list_marketplace(search="AI", limit=5)
    print(f'Results for "AI": {results.total} product(s)')
    for product in results.data:
        print(f"  - {product.title} (rating: {product.average_rating:.1f})")

    client.close()


if __name__ == "__main__":
    main()
