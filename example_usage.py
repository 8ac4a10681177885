# example_usage.py - Complete usage examples

import logging

from restobject import APIObject, ResourceManager, RestObjectError
from restobject.adapters import RESTAdapter

API_URL = "http://localhost:8000/api"


def example_id_in_body():
    """API returns the created object, id included, in the POST response"""
    client = RESTAdapter(API_URL, config={
        "create_returns_object": True,
        "copy_keys": ["created_at"],
    })

    tenant = APIObject(client, "/tenants/{id}", "/tenants", "/tenants/{id}", "/tenants/{id}",
                       data={"name": "CLICorp", "plan": "basic"})
    try:
        tenant.create_object()
        print(f"✅ Created tenant {tenant.id} at {tenant.data.get('created_at')}")

        tenant.data["plan"] = "premium"
        tenant.update_object()
        print(f"✅ Updated tenant: {tenant.api_data}")
    except RestObjectError as e:
        print(f"❌ Tenant example failed: {e}")
    finally:
        tenant.delete_object()
        client.close()


def example_id_in_location_header():
    """API answers 201 with only a Location header pointing at the new object"""
    with RESTAdapter(API_URL, config={"id_header": "Location", "id_header_is_url": True,
                                      "timeout": 5, "retries": 2}) as client:
        charger = APIObject(client, "/chargers/{id}", "/chargers", "/chargers/{id}", "/chargers/{id}",
                            data='{"model": "AC01"}', debug=True)
        try:
            charger.create_object()
            print(f"✅ Charger id from Location header: {charger.id}")
            print(charger.to_string())
        except RestObjectError as e:
            print(f"❌ Charger example failed: {e}")
        finally:
            charger.delete_object()


def example_with_rollback():
    """Create several objects on one shared client, then clean them all up"""
    with RESTAdapter(API_URL, config={"create_returns_object": True}) as client:
        rm = ResourceManager(client)
        try:
            tenant = rm.create(rm.new_object("/tenants/{id}", "/tenants", "/tenants/{id}", "/tenants/{id}",
                                             data={"name": "VerifyCorp"}))
            rm.create(rm.new_object("/users/{id}", "/users", "/users/{id}", "/users/{id}",
                                    data={"tenant_id": tenant.id, "email": "test@example.com"}))
            print(f"Tracked objects: {rm.get_resources()}")
        except RestObjectError as e:
            print(f"❌ Setup failed: {e}")
        finally:
            rm.rollback()
            print("Cleanup completed")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    print("🚀 restobject Usage Examples")
    print("=" * 50)

    print("\n1. Id in response body:")
    example_id_in_body()

    print("\n2. Id in Location header:")
    example_id_in_location_header()

    print("\n3. Rollback:")
    example_with_rollback()
