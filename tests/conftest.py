import json
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


def load_suite_entries():
    with open(DATA_DIR / "test-suite-data.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(scope="session")
def suite_entries():
    return load_suite_entries()
