"""pytest configuration and shared fixtures."""

import os
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Add src directory to Python path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from mip_algebra import Model, sum_expr
from mip_algebra.utils.config_manager import ConfigManager


@pytest.fixture
def temp_config_dir():
    """Create temporary configuration directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def mock_config():
    """Configuration used by tests that need a ConfigManager."""
    return {
        "logging": {
            "level": "DEBUG",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
        "solvers": {"default": "cbc", "timeout": 60, "parameters": {}},
        "validation": {"enabled": True, "tolerance": 1e-6},
    }


@pytest.fixture
def config_manager(temp_config_dir, mock_config):
    """Create ConfigManager instance backed by a temporary default.yaml."""
    with open(temp_config_dir / "default.yaml", "w") as f:
        yaml.dump(mock_config, f)

    return ConfigManager(str(temp_config_dir))


@pytest.fixture
def grid_model():
    """Model with x[i, k] for i in 1..3, k in 1..2."""
    model = Model("grid")
    model.add_variable("x", i=range(1, 4), k=range(1, 3), lb=0)
    return model


@pytest.fixture
def knapsack_data():
    """0-1 knapsack instance with optimum 220 (items 1 and 2)."""
    return {"weights": [10, 20, 30], "values": [60, 100, 120], "capacity": 50}


@pytest.fixture
def knapsack_model(knapsack_data):
    """Knapsack model over binary x[i]."""
    items = range(len(knapsack_data["weights"]))
    model = Model("knapsack")
    x = model.add_variable("x", i=items, kind="binary")
    model.set_objective(
        sum_expr(lambda i: knapsack_data["values"][i] * x[i], i=items), "max"
    )
    model.add_constraint(
        sum_expr(lambda i: knapsack_data["weights"][i] * x[i], i=items)
        <= knapsack_data["capacity"]
    )
    return model


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Keep configuration environment variables out of the tests."""
    keys = [key for key in os.environ if key.startswith("MIP_ALGEBRA_")] + ["ENVIRONMENT"]
    saved = {key: os.environ.pop(key) for key in keys if key in os.environ}

    yield

    for key in keys:
        os.environ.pop(key, None)
    os.environ.update(saved)
