import json

from svcgateway.models import APIType, ServiceDefinition


def test_api_type_values():
    assert APIType.REST.value == "rest"
    assert APIType.GRPC.value == "grpc"
    assert APIType("rest") is APIType.REST


def test_default_definition_to_json():
    data = ServiceDefinition().to_json()
    assert data["Name"] == ""
    assert data["Replicas"] == 0
    assert data["Addresses"] is None
    assert data["Endpoints"] is None
    assert data["APIType"] == ""
    assert data["HealthEndpoint"] == ""


def test_populated_definition_to_json_round_trips_through_json():
    service = ServiceDefinition(
        name="users",
        replicas=2,
        addresses=["127.0.0.1:9000", "127.0.0.1:9001"],
        api_type=APIType.REST,
        endpoints=["GET /users"],
        health_endpoint="/healthz",
    )
    decoded = json.loads(json.dumps(service.to_json()))
    assert decoded["Name"] == "users"
    assert decoded["Replicas"] == 2
    assert decoded["Addresses"] == ["127.0.0.1:9000", "127.0.0.1:9001"]
    assert decoded["APIType"] == "rest"
    assert decoded["Endpoints"] == ["GET /users"]
    assert decoded["HealthEndpoint"] == "/healthz"


def test_to_json_copies_lists():
    service = ServiceDefinition(addresses=["a:1"])
    data = service.to_json()
    data["Addresses"].append("b:2")
    assert service.addresses == ["a:1"]