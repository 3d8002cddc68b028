"""Unit tests for Idle/Busy energy accounting."""

import pytest

from topology import create_topology


@pytest.fixture
def device(env):
    topology = create_topology(env, [{"name": "cloud", "busy_power": 100.0, "idle_power": 80.0}])
    return topology.root


def work(env, device, start, duration):
    yield env.timeout(start)
    device.start_work()
    yield env.timeout(duration)
    device.end_work()


class TestEnergy:
    """Tests for Active_Node power integration."""

    def test_idle_whole_horizon(self, env, device):
        env.run(until=250)
        assert device.finalize() == 80.0 * 250

    def test_query_before_finalize(self, env, device):
        env.run(until=10)
        assert device.consumption() == 80.0 * 10
        assert device.consumption(20) == 80.0 * 20

    def test_busy_interval(self, env, device):
        env.process(work(env, device, 5, 10))
        env.run(until=20)
        assert device.finalize() == pytest.approx(100.0 * 10 + 80.0 * 10)
        assert device.busy_time == pytest.approx(10)

    def test_overlapping_work_counts_once(self, env, device):
        env.process(work(env, device, 0, 10))
        env.process(work(env, device, 5, 10))
        env.run(until=20)
        # busy from 0 to 15, idle from 15 to 20
        assert device.finalize() == pytest.approx(100.0 * 15 + 80.0 * 5)
        assert not device.busy

    def test_power_state(self, env, device):
        assert device.power() == 80.0
        device.start_work()
        assert device.busy
        assert device.power() == 100.0
        device.end_work()
        assert device.power() == 80.0
