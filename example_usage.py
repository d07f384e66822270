#!/usr/bin/env python3
"""
Basic usage examples for the ZeroKit admin API client.

Reads the tenant from the ZKIT_SERVICE_URL and ZKIT_ADMIN_KEY environment
variables (or a .env file) and walks through a few admin API calls.
"""

import asyncio
import sys

from zerokit_admin_client import (
    AdminApiClient,
    AdminApiClientError,
    AdminApiError,
    AdminApiSettings,
)


def main(settings: AdminApiSettings):
    """Run basic usage examples."""

    print("=== ZeroKit Admin API Client Usage Examples ===\n")

    # Create admin API client
    print("1. Creating admin API client...")
    client = AdminApiClient.from_settings(settings)
    print(f"   Client created for: {client.service_url}")
    print(f"   Tenant id: {client.tenant_id}")
    print(f"   Admin user: {client.admin_user_id}\n")

    try:
        # Example 1: JSON API call without payload
        print("2. Initializing a user registration...")
        response = client.create_post_request("/api/v4/admin/user/init-user-registration").send()
        registration = response.json()
        print(f"   ✓ Registration initialized ({response.status_code} {response.reason})")
        print(f"   User id: {registration['UserId']}")
        print(f"   Session id: {registration['RegSessionId']}")
        print()

        # Example 2: Call with a non-JSON payload
        print("3. Uploading custom login CSS...")
        response = (
            client.create_put_request("/api/v4/admin/tenant/upload-custom-content")
            .add_query_parameter("fileName", "css/login.css")
            .set_header("Content-Type", "text/css")
            .send("body { background-color: red; }")
        )
        uploaded = response.json()
        print(f"   ✓ Uploaded {uploaded['Name']} ({uploaded['ContentType']}, {uploaded['Size']} bytes)")
        print(f"   Url: {uploaded['Url']}")
        print()

        # Example 3: Inspecting a signed request
        print("4. Inspecting a signed request...")
        request = client.create_post_request("/api/v4/admin/user/set-user-state")
        request.set_json_contents({"UserId": registration["UserId"], "Enabled": False}).sign()
        for name, values in request.headers.items():
            shown = values[0] if name != "Authorization" else values[0][:16] + "..."
            print(f"   {name}: {shown}")
        print()

        # Example 4: API errors
        print("5. Demonstrating API error handling...")
        try:
            request.send()
            print("   ✗ Expected an API error")
        except AdminApiError as e:
            print(f"   ✓ API rejected the call: {e.error_code} ({e.message})")
        print()

        print("=== All Examples Completed Successfully! ===")

    except AdminApiClientError as e:
        print(f"Admin API Client Error: {e}")
        sys.exit(1)
    finally:
        # Clean up
        client.close()


async def demonstrate_async(settings: AdminApiSettings):
    """Demonstrate concurrent calls with the coroutine API."""

    print("\n=== Async Usage Example ===")

    with AdminApiClient.from_settings(settings) as client:
        responses = await asyncio.gather(*(
            client.create_post_request("/api/v4/admin/user/init-user-registration").send_async()
            for _ in range(3)
        ))
        for response in responses:
            print(f"✓ Registered user {response.json()['UserId']}")


if __name__ == "__main__":
    settings = AdminApiSettings()
    if not settings.service_url or not settings.admin_key:
        print("Tenant not configured. Please set ZKIT_SERVICE_URL and ZKIT_ADMIN_KEY first.")
        sys.exit(1)

    # Run examples
    main(settings)
    asyncio.run(demonstrate_async(settings))
