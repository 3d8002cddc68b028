"""
Pytest configuration and shared fixtures.
"""

import pytest
import simpy

from topology import create_topology


@pytest.fixture
def env():
    """Fresh SimPy environment."""
    return simpy.Environment()


@pytest.fixture
def log_file(tmp_path):
    """Simulation log kept out of the working directory."""
    import sim
    path = tmp_path / "sim.log"
    yield str(path)
    sim.clean()


@pytest.fixture
def three_level_specs():
    """cloud -> proxy (80) -> two edges (2)."""
    return [
        {"name": "cloud", "mips": 1000, "up_bw": 10000, "down_bw": 10000, "idle_power": 80.0, "busy_power": 100.0},
        {"name": "proxy", "mips": 100, "up_bw": 10000, "down_bw": 10000, "parent": "cloud", "uplink_latency": 80},
        {"name": "e1", "mips": 15, "up_bw": 1000, "down_bw": 1000, "parent": "proxy", "uplink_latency": 2},
        {"name": "e2", "mips": 15, "up_bw": 1000, "down_bw": 1000, "parent": "proxy", "uplink_latency": 2},
    ]


@pytest.fixture
def three_level(env, three_level_specs):
    return create_topology(env, three_level_specs)
