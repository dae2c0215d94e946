"""
Ragora Python SDK - Documents Example

Demonstrates collection setup, document upload and processing status.

Usage:
    python documents.py path/to/file.pdf
"""

import sys

from ragora import DocumentProcessingError, RagoraClient, TimeoutError


def main():
    if len(sys.argv) < 2:
        print("Usage: python documents.py <file>")
        sys.exit(1)

    client = RagoraClient()

    # ============================================================
    # Create a Collection
    # ============================================================
    print("=== Create Collection ===\n")

    collection = client.create_collection(
        "SDK Example",
        description="Created by the documents example",
    )
    print(f"Collection: {collection.id} ({collection.name})\n")

    # ============================================================
    # Upload and Wait
    # ============================================================
    print("=== Upload ===\n")

    upload = client.upload_document(sys.argv[1], collection_id=collection.id)
    print(f"Uploaded {upload.filename} as {upload.id} [{upload.status}]")

    try:
        status = client.wait_for_document(upload.id, timeout=300, poll_interval=2)
        print(f"Processed: {status.chunk_count} chunks, {status.vector_count} vectors\n")
    except DocumentProcessingError as e:
        print(f"Processing failed: {e.message}\n")
    except TimeoutError:
        print("Still processing; check back later.\n")

    # ============================================================
    # List and Clean Up
    # ============================================================
    print("=== Documents ===\n")

    documents = client.list_documents(collection_id=collection.id)
    for document in documents.data:
        print(f"- {document.filename} [{document.status}]")

    client.delete_document(upload.id)
    result = client.delete_collection(collection.id)
    print(f"\n{result.message}")

    client.close()


if __name__ == "__main__":
    main()
