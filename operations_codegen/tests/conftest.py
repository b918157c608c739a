import json
from pathlib import Path

import pytest

from operations_codegen.model import GenerationConfig

TEST_DATA = Path(__file__).parent / "test_data"


def load_config(name: str) -> GenerationConfig:
    with open(TEST_DATA / name) as f:
        return GenerationConfig.from_dict(json.load(f))


@pytest.fixture
def users_config() -> GenerationConfig:
    return load_config("users.config.json")
