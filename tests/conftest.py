from datetime import timedelta
from pathlib import Path

import pytest
import structlog

from yanductor.config.schema import BackendConfig

SCENARIO_A = (
    b'{"_meta":{"hostvars":{"a.x":{"dc":"dc1"}}},'
    b'"g1":{"hosts":["a.x"],"children":["g2"]},"g2":{"hosts":[]}}'
)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def inventory_bytes(fixtures_dir: Path) -> bytes:
    return (fixtures_dir / "inventory.json").read_bytes()


@pytest.fixture
def scenario_a() -> bytes:
    return SCENARIO_A


@pytest.fixture
def backend_config(tmp_path: Path) -> BackendConfig:
    return BackendConfig(
        url="https://conductor.example.com",
        work_groups=["web", "infra"],
        cache_ttl=timedelta(minutes=10),
        cache_dir=tmp_path / "cache",
    )
