from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from promptengine.models import CategoryFlags, ProductInput  # noqa: E402


@pytest.fixture
def pet_flags() -> CategoryFlags:
    return CategoryFlags(is_pet=True)


@pytest.fixture
def product() -> ProductInput:
    return ProductInput(name="Chew Toy", category="Pet Supplies")
