"""
Ragora Python SDK - Streaming Example

Demonstrates streaming responses for real-time output.
"""

import asyncio
import sys

from ragora import AsyncRagoraClient, RagoraClient


def main():
    client = RagoraClient()

    # ============================================================
    # Simple Streaming
    # ============================================================
    print("=== Simple Streaming ===\n")

    sys.stdout.write("Response: ")
    for chunk in client.chat_stream("Summarize our onboarding guide"):
        sys.stdout.write(chunk.content)
        sys.stdout.flush()
    print("\n[Stream complete]\n")

    # ============================================================
    # Sources and Finish Reason
    # ============================================================
    print("=== Sources and Finish Reason ===\n")

    sources = []
    with client.chat_stream("What changed in the 2.0 release?", top_k=8) as stream:
        for chunk in stream:
            sys.stdout.write(chunk.content)
            sys.stdout.flush()
            sources.extend(chunk.sources)
            if chunk.finish_reason:
                print(f"\n[Finished: {chunk.finish_reason}]")

    print(f"Sources: {len(sources)}")
    for source in sources:
        print(f"  - {source.document_id} ({source.score:.2f})")
    print()

    # ============================================================
    # Stopping Early
    # ============================================================
    print("=== Stopping Early ===\n")

    with client.chat_stream("List every product we sell") as stream:
        received = ""
        for chunk in stream:
            received += chunk.content
            if len(received) > 200:
                break
    print(f"Kept the first {len(received)} characters; connection released.\n")

    client.close()

    # ============================================================
    # Async Streaming
    # ============================================================
    print("=== Async Streaming ===\n")
    asyncio.run(stream_async())


async def stream_async():
    async with AsyncRagoraClient() as client:
        async for chunk in client.chat_stream("Explain retrieval-augmented generation"):
            sys.stdout.write(chunk.content)
            sys.stdout.flush()
    print()


if __name__ == "__main__":
    main()
