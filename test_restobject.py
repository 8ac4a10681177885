# test_restobject.py - ResourceManager and client profile tests

import dataclasses

import pytest
from unittest.mock import Mock

from restobject import (
    APIObject,
    ClientProfile,
    ConfigurationError,
    HTTPStatusError,
    ResourceManager,
    RollbackError,
)

PATHS = ("/tenants/{id}", "/tenants", "/tenants/{id}", "/tenants/{id}")


class MockRESTAdapter:
    """Mock transport for testing without real HTTP calls"""
    def __init__(self, profile=None):
        self.profile = profile or ClientProfile(create_returns_object=True)
        self.created_resources = {}
        self.deleted = []
        self.id_counter = 1

    def send_request(self, method, path, body=""):
        if method == "POST":
            resource_id = f"tenant_{self.id_counter}"
            self.id_counter += 1
            self.created_resources[resource_id] = body
            return {}, body.replace("{", f'{{"id": "{resource_id}", ', 1)
        resource_id = path.rsplit("/", 1)[-1]
        if method == "DELETE":
            if resource_id not in self.created_resources:
                raise HTTPStatusError(method, path, 404, "")
            del self.created_resources[resource_id]
            self.deleted.append(resource_id)
            return {}, ""
        raise AssertionError(f"unexpected {method} {path}")


def test_resource_manager_basic_operations():
    """Test create and tracking"""
    rm = ResourceManager(MockRESTAdapter())

    tenant = rm.create(rm.new_object(*PATHS, data={"name": "TestCorp"}))
    assert tenant.id == "tenant_1"
    assert tenant.api_data["name"] == "TestCorp"

    resources = rm.get_resources()
    assert resources == [tenant]

    # The returned list is a copy
    resources.clear()
    assert len(rm.get_resources()) == 1


def test_rollback_functionality():
    """Test rollback cleans up resources newest first"""
    adapter = MockRESTAdapter()
    rm = ResourceManager(adapter)

    rm.create(rm.new_object(*PATHS, data={"name": "TestCorp"}))
    rm.create(rm.new_object(*PATHS, data={"name": "OtherCorp"}))
    assert len(adapter.created_resources) == 2

    rm.rollback()

    assert adapter.deleted == ["tenant_2", "tenant_1"]
    assert len(adapter.created_resources) == 0
    assert rm.get_resources() == []


def test_failed_create_is_not_tracked():
    adapter = Mock()
    adapter.profile = ClientProfile()
    adapter.send_request.side_effect = HTTPStatusError("POST", "/tenants", 500, "boom")
    rm = ResourceManager(adapter)

    with pytest.raises(HTTPStatusError):
        rm.create(rm.new_object(*PATHS, id="t1"))
    assert rm.get_resources() == []


def test_rollback_with_errors():
    """Test rollback keeps going and reports every failure"""
    adapter = MockRESTAdapter()
    rm = ResourceManager(adapter)

    first = rm.create(rm.new_object(*PATHS, data={"name": "A"}))
    second = rm.create(rm.new_object(*PATHS, data={"name": "B"}))
    # Removed behind our back, so deleting it fails
    del adapter.created_resources[second.id]

    with pytest.raises(RollbackError) as exc_info:
        rm.rollback()

    assert "tenant_2" in str(exc_info.value)
    assert "404" in str(exc_info.value)
    assert adapter.deleted == [first.id]
    assert rm.get_resources() == [second]


def test_new_object_shares_transport():
    adapter = MockRESTAdapter()
    rm = ResourceManager(adapter)
    a = rm.new_object(*PATHS, id="a")
    b = rm.new_object(*PATHS, id="b", debug=True)
    assert isinstance(a, APIObject)
    assert a.api_client is b.api_client is adapter
    assert a.profile is b.profile
    assert rm.get_resources() == []


def test_clear_resources():
    adapter = MockRESTAdapter()
    rm = ResourceManager(adapter)
    rm.create(rm.new_object(*PATHS, data={"name": "A"}))

    rm.clear_resources()
    rm.rollback()

    assert adapter.deleted == []


# --- client profile -------------------------------------------------------

def test_profile_defaults():
    profile = ClientProfile.from_dict(None)
    assert profile.id_attribute == "id"
    assert profile.id_header == ""
    assert profile.copy_keys == ()
    assert profile.timeout == 30
    assert profile.retries == 0
    assert not profile.has_id_fallback


def test_profile_copy_keys_keep_order_without_duplicates():
    profile = ClientProfile.from_dict({"copy_keys": ["status", "created_at", "status"]})
    assert profile.copy_keys == ("status", "created_at")


def test_profile_is_immutable():
    headers = {"X-Api-Key": "k"}
    profile = ClientProfile(headers=headers)
    headers["X-Api-Key"] = "changed"

    assert profile.headers["X-Api-Key"] == "k"
    with pytest.raises(TypeError):
        profile.headers["X-Api-Key"] = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        profile.id_attribute = "uuid"


@pytest.mark.parametrize("config", [
    {"timeout": 0},
    {"timeout": -1},
    {"retries": -1},
    {"id_attribute": ""},
    {"copy_keys": "status"},
    {"no_such_setting": True},
])
def test_profile_rejects_bad_settings(config):
    with pytest.raises(ConfigurationError):
        ClientProfile.from_dict(config)


@pytest.mark.parametrize("config", [
    {"write_returns_object": True},
    {"create_returns_object": True},
    {"id_header": "Location"},
])
def test_profile_id_fallback(config):
    assert ClientProfile.from_dict(config).has_id_fallback
