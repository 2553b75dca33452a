import pytest
from k8ssandra.types.settings import Settings


@pytest.fixture
def conf():
    return Settings(
        create_requeue_delay_seconds=10,
        ready_requeue_delay_seconds=15,
        max_seed_endpoints=3,
        deduplicate_seeds=True,
    )
