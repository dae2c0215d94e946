"""
Ragora Python SDK - Error Handling Example

Demonstrates handling API, rate limit and streaming errors.
"""

import logging
import time

from ragora import (
    AuthenticationError,
    InvalidRequestError,
    NotFoundError,
    RagoraClient,
    RagoraError,
    RateLimitError,
    StreamError,
    is_retryable_error,
)


def main():
    # SDK debug output goes to the "ragora.http" and "ragora.streaming" loggers
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("ragora").setLevel(logging.DEBUG)

    # ============================================================
    # Basic Error Handling
    # ============================================================
    print("=== Basic Error Handling ===\n")

    try:
        client = RagoraClient(api_key="invalid_key")
        client.get_balance()
    except AuthenticationError as e:
        print(f"Authentication failed: {e.message}")
        print(f"Status code: {e.status_code}")
        print(f"Error code: {e.code}")
        print(f"Request ID: {e.request_id}")
    print()

    client = RagoraClient()

    # ============================================================
    # Handling Different Error Types
    # ============================================================
    print("=== Error Type Detection ===\n")

    try:
        client.get_collection("does-not-exist")
    except NotFoundError as e:
        print(f"Not found: {e}")
    except InvalidRequestError as e:
        for detail in e.error.details if e.error else []:
            print(f"Invalid field {detail.field}: {detail.reason}")
    print()

    # ============================================================
    # Manual Retry
    # ============================================================
    print("=== Manual Retry ===\n")

    for attempt in range(3):
        try:
            response = client.search("pricing")
            print(f"Got {response.total} results")
            break
        except RateLimitError as e:
            print(f"Rate limited, waiting {e.retry_after}s")
            time.sleep(e.retry_after)
        except RagoraError as e:
            if not is_retryable_error(e):
                raise
            time.sleep(2 ** attempt)
    print()

    # ============================================================
    # Stream Errors
    # ============================================================
    print("=== Stream Errors ===\n")

    try:
        for chunk in client.chat_stream("Write a long essay on search"):
            print(chunk.content, end="", flush=True)
    except StreamError as e:
        print(f"\nStream interrupted after {len(e.partial_content)} characters")

    client.close()


if __name__ == "__main__":
    main()
