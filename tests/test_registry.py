import pytest

from svcgateway.models import ServiceDefinition
from svcgateway.registry import ServiceRegistry


@pytest.fixture
def service_dir(tmp_path):
    (tmp_path / "a.svc").write_text("name: alpha\naddresses:\n  - 127.0.0.1:9000\n")
    (tmp_path / "b.svc").write_text("name: beta\n")
    (tmp_path / "notes.txt").write_text("name: ignored\n")
    (tmp_path / "dir.svc").mkdir()
    return tmp_path


def test_loads_only_svc_files(service_dir):
    registry = ServiceRegistry(service_dir)
    assert sorted(registry.services()) == ["alpha", "beta"]
    assert registry.get("alpha").addresses == ["127.0.0.1:9000"]


def test_get_missing_returns_none(service_dir):
    assert ServiceRegistry(service_dir).get("gamma") is None


def test_register_adds_service(service_dir):
    registry = ServiceRegistry(service_dir)
    service = ServiceDefinition(name="gamma")
    registry.register(service)
    assert registry.get("gamma") is service


def test_reload_replaces_registered_services(service_dir):
    registry = ServiceRegistry(service_dir)
    registry.register(ServiceDefinition(name="gamma"))
    registry.reload()
    assert registry.get("gamma") is None
    assert sorted(registry.services()) == ["alpha", "beta"]


def test_reload_picks_up_new_files(service_dir):
    registry = ServiceRegistry(service_dir)
    (service_dir / "c.svc").write_text("name: gamma\n")
    registry.reload()
    assert "gamma" in registry.services()


def test_missing_directory_gives_empty_registry(tmp_path):
    registry = ServiceRegistry(tmp_path / "absent")
    assert registry.services() == {}


def test_malformed_file_is_skipped(service_dir):
    (service_dir / "bad.svc").write_text("addresses:\nname: broken\n")
    registry = ServiceRegistry(service_dir)
    assert sorted(registry.services()) == ["alpha", "beta"]


def test_later_file_wins_on_duplicate_name(tmp_path):
    (tmp_path / "1.svc").write_text("name: dup\nhealth_endpoint: /first\n")
    (tmp_path / "2.svc").write_text("name: dup\nhealth_endpoint: /second\n")
    assert ServiceRegistry(tmp_path).get("dup").health_endpoint == "/second"


def test_services_returns_snapshot(service_dir):
    registry = ServiceRegistry(service_dir)
    snapshot = registry.services()
    snapshot.clear()
    assert len(registry.services()) == 2