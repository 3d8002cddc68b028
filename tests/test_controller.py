"""Unit tests for tuple routing, delay and loop accounting."""

import pytest

import sim
from actuator import Actuator
from application import Application
from controller import Controller
from data import Tuple
from distribution import Deterministic_Distribution
from errors import InvalidEdgeError, UnplaceableModuleError
from manager import Delay_Stats
from placement import Module_Placement_Mapping
from sensor import Sensor
from topology import create_topology


def small_topology(env):
    return create_topology(env, [
        {"name": "cloud", "mips": 1000, "up_bw": 100, "down_bw": 100, "busy_power": 10.0, "idle_power": 5.0},
        {"name": "edge", "mips": 100, "up_bw": 100, "down_bw": 100, "busy_power": 4.0, "idle_power": 2.0,
         "parent": "cloud", "uplink_latency": 5},
        {"name": "edge2", "mips": 100, "up_bw": 100, "down_bw": 100, "parent": "cloud", "uplink_latency": 5},
    ])


def chain_app(fraction=1.0):
    app = Application("chain")
    app.add_module("A", 10)
    app.add_module("B", 10)
    app.add_edge("S", "A", 100, 100, "S", "UP", "SENSOR")
    app.add_edge("A", "B", 200, 100, "AB", "UP", "MODULE")
    app.add_edge("B", "ACT", 50, 0, "CTRL", "DOWN", "ACTUATOR")
    app.add_selectivity("A", "S", "AB", fraction)
    app.add_selectivity("B", "AB", "CTRL", 1.0)
    app.set_loops([["A", "B"], ["S", "A", "B", "ACT"]])
    return app.validate()


def build(env, hints=None, fraction=1.0, emissions=1, gateway="edge"):
    topology = small_topology(env)
    g = topology.get_device_by_name(gateway).id
    sensors = [Sensor(env, 0, "s", "S", g, latency=1.0, distribution=Deterministic_Distribution(10),
                      max_emissions=emissions)]
    actuators = [Actuator(env, 0, "act", "ACT", g, latency=1.0)]
    controller = Controller(env, "test-controller", topology, sensors, actuators)
    if hints is None:
        hints = {"A": "edge", "B": "cloud"}
    controller.submit_application(chain_app(fraction), Module_Placement_Mapping(), hints)
    return controller


class TestDelays:
    """Tests for transmission and processing delays."""

    def test_arrival_is_creation_plus_latency_plus_size_over_bandwidth(self, env):
        controller = build(env)
        edge = controller.topology.get_device_by_name("edge").id
        tup = Tuple(controller.next_id(), controller.application.edge_for_type("AB"), edge, env.now)
        delay = controller.send(tup, edge)
        assert delay == 5 + 200 / 100.0
        env.run()
        assert tup.arrival_time == tup.init_time + 5 + 200 / 100.0

    def test_end_to_end_chain(self, env, log_file):
        controller = build(env)
        results = sim.run(env, controller, until=30, log=log_file)
        stats = controller.manager.loop_stats
        # emit 10, arrive 11, A done 12, B arrives 19 and ends 19.1, actuator at 25.6
        assert stats[0].count == 1
        assert stats[0].mean == pytest.approx(19.1 - 11)
        assert stats[1].mean == pytest.approx(25.6 - 10)
        assert results["events"]["consumed"] == 1
        assert controller.actuators[0].consumed == 1
        assert results["sensor_delay"]["edge:S"]["mean"] == pytest.approx(2.0)
        assert results["dropped"] == 0

    def test_energy_follows_processing(self, env, log_file):
        controller = build(env)
        results = sim.run(env, controller, until=30, log=log_file)
        # edge busy from 11 to 12
        assert results["energy"]["edge"] == pytest.approx(4.0 * 1 + 2.0 * 29)
        assert results["energy"]["cloud"] == pytest.approx(10.0 * 0.1 + 5.0 * 29.9)

    def test_network_usage(self, env, log_file):
        controller = build(env)
        results = sim.run(env, controller, until=30, log=log_file)
        # sensor (1 * 100) + A->B (5 * 200) + B->actuator (6 * 50)
        assert results["network_usage"] == pytest.approx((100 + 1000 + 300) / 30.0)


class TestQueueing:
    """Tests for tuples competing for one module instance."""

    def test_simultaneous_arrivals_are_served_in_order(self, env, log_file):
        topology = small_topology(env)
        edge = topology.get_device_by_name("edge").id
        sensors = [Sensor(env, i, "s{}".format(i), "S", edge, latency=1.0,
                          distribution=Deterministic_Distribution(10), max_emissions=1) for i in range(4)]
        actuators = [Actuator(env, 0, "act", "ACT", edge, latency=1.0)]
        controller = Controller(env, "c", topology, sensors, actuators)
        controller.submit_application(chain_app(), Module_Placement_Mapping(), {"A": "edge", "B": "cloud"})
        results = sim.run(env, controller, until=30, log=log_file)
        a_done = [e for e in controller.manager.events if e[0] == "MODULE_Process" and e[2][0] == "A"]
        # all four arrive at 11, one unit of processing each
        assert [e[1] for e in a_done] == pytest.approx([12, 13, 14, 15])
        ids = [e[2][2].id for e in a_done]
        assert ids == sorted(ids)
        assert results["sensor_delay"]["edge:S"]["min"] == pytest.approx(2.0)
        assert results["sensor_delay"]["edge:S"]["max"] == pytest.approx(5.0)
        # busy from 11 to 15 without a gap
        assert results["energy"]["edge"] == pytest.approx(4.0 * 4 + 2.0 * 26)


class TestRunEndings:
    """Tests for how a run stops."""

    def test_emission_count_stops_at_the_count(self, env, log_file):
        controller = build(env, emissions=10)
        results = sim.run(env, controller, ending_type=sim.End_Sim.ByEmissionCount, until=2, log=log_file)
        assert results["events"]["emitted"] == 2
        assert env.now == 20

    def test_unreachable_emission_count_returns(self, env, log_file):
        controller = build(env, emissions=3)
        results = sim.run(env, controller, ending_type=sim.End_Sim.ByEmissionCount, until=5, log=log_file)
        assert results["events"]["emitted"] == 3
        # in-flight tuples still finish
        assert results["events"]["consumed"] == 3

    def test_unreachable_loop_count_returns(self, env, log_file):
        controller = build(env, emissions=2)
        results = sim.run(env, controller, ending_type=sim.End_Sim.ByLoopCount, until=100, log=log_file)
        assert results["loops"]["A->B"]["count"] == 2

    def test_no_horizon_runs_capped_sensors_dry(self, env, log_file):
        controller = build(env, emissions=2)
        results = sim.run(env, controller, log=log_file)
        assert results["events"]["emitted"] == 2
        assert results["events"]["consumed"] == 2

    def test_no_horizon_with_uncapped_sensor(self, env, log_file):
        controller = build(env, emissions=None)
        with pytest.raises(ValueError):
            sim.run(env, controller, log=log_file)


class TestDownwardRouting:
    """Tests for module edges going toward the leaves."""

    def test_instance_on_origin_zone(self, env, log_file):
        topology = small_topology(env)
        edge2 = topology.get_device_by_name("edge2").id
        app = Application("down")
        app.add_module("A", 10)
        app.add_module("B", 10)
        app.add_edge("S", "A", 100, 100, "S", "UP", "SENSOR")
        app.add_edge("A", "B", 100, 100, "AB", "DOWN", "MODULE")
        app.add_selectivity("A", "S", "AB")
        app.validate()
        sensors = [Sensor(env, 0, "s", "S", edge2, distribution=Deterministic_Distribution(10), max_emissions=1)]
        controller = Controller(env, "c", topology, sensors, [])
        controller.submit_application(app, Module_Placement_Mapping(), {"A": "cloud", "B": ["edge", "edge2"]})
        sim.run(env, controller, until=50, log=log_file)
        b_done = [e for e in controller.manager.events if e[0] == "MODULE_Process" and e[2][0] == "B"]
        assert len(b_done) == 1
        assert b_done[0][2][1].name == "edge2"


class TestRoutingFailures:
    """Tests for dropped tuples."""

    def test_unroutable_is_dropped_and_counted(self, env, log_file):
        controller = build(env, hints={"A": "edge2", "B": "cloud"}, emissions=3)
        results = sim.run(env, controller, until=100, log=log_file)
        assert results["dropped"] == 3
        assert results["events"]["processed"] == 0
        assert results["loops"]["A->B"]["count"] == 0

    def test_unknown_sensor_type(self, env):
        topology = small_topology(env)
        sensors = [Sensor(env, 0, "x", "X", 1)]
        controller = Controller(env, "c", topology, sensors, [])
        with pytest.raises(InvalidEdgeError):
            controller.submit_application(chain_app(), Module_Placement_Mapping(), {"A": "edge", "B": "cloud"})

    def test_failed_placement_binds_nothing(self, env):
        topology = small_topology(env)
        sensors = [Sensor(env, 0, "s", "S", 1)]
        controller = Controller(env, "c", topology, sensors, [])
        with pytest.raises(UnplaceableModuleError):
            controller.submit_application(chain_app(), Module_Placement_Mapping(), {"A": "edge"})
        assert sensors[0].controller is None
        assert controller.application is None
        assert controller.assignment is None


class TestSelectivity:
    """Tests for fractional fan-out during a run."""

    def test_half_fraction(self, env, log_file):
        controller = build(env, fraction=0.5, emissions=10)
        sim.run(env, controller, until=500, log=log_file)
        a_done = [e for e in controller.manager.events if e[0] == "MODULE_Process" and e[2][0] == "A"]
        b_done = [e for e in controller.manager.events if e[0] == "MODULE_Process" and e[2][0] == "B"]
        assert len(a_done) == 10
        assert len(b_done) == 5


class TestLoopStats:
    """Tests for Delay_Stats."""

    def test_mean_within_bounds(self):
        stats = Delay_Stats()
        counts = []
        for v in [3.0, 1.5, 7.25, 7.25, 0.1]:
            stats.add(v)
            counts.append(stats.count)
            assert stats.min <= stats.mean <= stats.max
        assert counts == sorted(counts)
        assert stats.min == 0.1
        assert stats.max == 7.25

    def test_empty(self):
        assert Delay_Stats().mean is None
