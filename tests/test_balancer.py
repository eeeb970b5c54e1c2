import pytest

from svcgateway.balancer import (
    AddressUsage,
    BalancerMode,
    LoadBalancer,
    ServiceNotValidError,
)
from svcgateway.models import ServiceDefinition


def make_services():
    return {
        "users": ServiceDefinition(name="users", addresses=["127.0.0.1:9000", "127.0.0.1:9001"]),
        "empty": ServiceDefinition(name="empty"),
    }


def test_mode_values():
    assert BalancerMode("round_robin") is BalancerMode.ROUND_ROBIN
    assert BalancerMode.LEAST_RESPONSE_TIME.value == "least_response_time"


def test_initial_usage_state():
    balancer = LoadBalancer(BalancerMode.ROUND_ROBIN, make_services())
    usage = balancer.service_usages["users"]
    assert usage.count == 0
    assert usage.address_usages == {
        "127.0.0.1:9000": AddressUsage(0.0),
        "127.0.0.1:9001": AddressUsage(0.0),
    }


def test_round_robin_cycles():
    balancer = LoadBalancer(BalancerMode.ROUND_ROBIN, make_services())
    picks = [balancer.select("users") for _ in range(3)]
    assert picks == ["127.0.0.1:9000", "127.0.0.1:9001", "127.0.0.1:9000"]
    assert balancer.service_usages["users"].count == 3


@pytest.mark.parametrize("mode", list(BalancerMode))
def test_unknown_service_raises(mode):
    balancer = LoadBalancer(mode, make_services())
    with pytest.raises(ServiceNotValidError, match="service not valid"):
        balancer.select("missing")


@pytest.mark.parametrize("mode", list(BalancerMode))
def test_service_without_addresses_raises(mode):
    balancer = LoadBalancer(mode, make_services())
    with pytest.raises(ServiceNotValidError):
        balancer.select("empty")


def test_least_response_time_picks_fastest():
    balancer = LoadBalancer(BalancerMode.LEAST_RESPONSE_TIME, make_services())
    balancer.record_response_time("users", "127.0.0.1:9000", 2.0)
    balancer.record_response_time("users", "127.0.0.1:9001", 1.0)
    assert balancer.select("users") == "127.0.0.1:9001"
    assert balancer.select("users") == "127.0.0.1:9001"


def test_least_response_time_ignores_very_slow_addresses():
    services = {"slow": ServiceDefinition(name="slow", addresses=["127.0.0.1:9000"])}
    balancer = LoadBalancer(BalancerMode.LEAST_RESPONSE_TIME, services)
    balancer.record_response_time("slow", "127.0.0.1:9000", 24 * 60 * 60.0)
    assert balancer.select("slow") == ""


def test_record_response_time_for_unknown_service():
    balancer = LoadBalancer(BalancerMode.ROUND_ROBIN, make_services())
    with pytest.raises(ServiceNotValidError):
        balancer.record_response_time("missing", "127.0.0.1:9000", 1.0)


def test_record_response_time_for_unknown_address():
    balancer = LoadBalancer(BalancerMode.ROUND_ROBIN, make_services())
    with pytest.raises(ValueError):
        balancer.record_response_time("users", "127.0.0.1:1", 1.0)


def test_record_response_time_is_stored():
    balancer = LoadBalancer(BalancerMode.ROUND_ROBIN, make_services())
    balancer.record_response_time("users", "127.0.0.1:9001", 0.25)
    assert balancer.service_usages["users"].address_usages["127.0.0.1:9001"].response_time == 0.25