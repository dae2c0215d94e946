"""
Ragora Python SDK - Chat Example

Demonstrates RAG chat completions grounded in your collections.
"""

import os

from ragora import ChatMessage, RagoraClient


def main():
    client = RagoraClient()
    collection_id = os.getenv("RAGORA_COLLECTION_ID")

    # ============================================================
    # Simple Chat
    # ============================================================
    print("=== Simple Chat ===\n")

    response = client.chat("What is our refund policy?", collection_id=collection_id)
    print(f"Response: {response.content}")
    print(f"Model: {response.model}")
    if response.usage:
        print(f"Tokens: {response.usage.total_tokens}")
    print()

    # ============================================================
    # Sources
    # ============================================================
    print("=== Sources ===\n")

    for source in response.sources:
        print(f"- [{source.score:.2f}] {source.content[:80]}")
    print()

    # ============================================================
    # Multi-turn Conversation
    # ============================================================
    print("=== Conversation ===\n")

    messages = [
        ChatMessage.system("Answer in one sentence, citing the handbook."),
        ChatMessage.user("How many vacation days do I get?"),
    ]
    response = client.chat(messages, collection_id=collection_id, temperature=0.2)
    print(f"Assistant: {response.content}")

    messages.append(ChatMessage.assistant(response.content))
    messages.append(ChatMessage.user("Do they roll over?"))
    response = client.chat(messages, collection_id=collection_id, temperature=0.2)
    print(f"Assistant: {response.content}")

    client.close()


if __name__ == "__main__":
    main()
