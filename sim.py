import random
import simpy

from attributes import *
from utils import End_Sim, Event_Type, Direction, Edge_Kind, set_debug, open_log, close_log, dprint
from errors import *
from topology import Fog_Device, Topology, create_topology
from application import Application, App_Loop, create_application
from placement import Module_Placement_Mapping, Module_Placement_Edgewards, create_placement
from distribution import Deterministic_Distribution, Uniform_Distribution, Normal_Distribution, \
    Exponential_Distribution, create_distribution
from sensor import Sensor
from actuator import Actuator
from controller import Controller
from manager import Manager


# start simulation function
# ByTimeCount runs up to [until]; a zero horizon runs until the event queue is
# exhausted, so every sensor must then be capped by max_emissions.
# Count endings stop at the count, or earlier once nothing is left to simulate.
def run(env, controller, ending_type=End_Sim.ByTimeCount, until=0, debug=0, log=None):
    if(ending_type == End_Sim.ByTimeCount and not until):
        uncapped = [s.name for s in controller.sensors if s.max_emissions is None]
        if(uncapped):
            raise ValueError("Run without a horizon never ends, uncapped sensors: {}".format(", ".join(uncapped)))
    if(log is not None):
        open_log(log)
    set_debug(debug)
    controller.start()
    end = controller.manager.create_end_event(ending_type, until)
    if(ending_type == End_Sim.ByTimeCount):
        env.run(until=until or None)
    else:
        while(not end.triggered and env.peek() != simpy.core.Infinity):
            env.step()
    controller.stop()
    controller.finalize(env.now)
    manager = controller.manager
    dprint("Emitted tuples:", manager.emitted_tuples)
    dprint("Processed tuples:", manager.processed_tuples)
    dprint("Consumed tuples:", manager.consumed_tuples)
    dprint("Dropped tuples:", manager.dropped_tuples)
    dprint("Completed loops:", manager.completed_loops)
    return report(controller)

# structured results of a finished run
def report(controller):
    manager = controller.manager
    application = controller.application
    elapsed = controller.env.now
    loops = {}
    for loop in application.loops:
        stats = manager.loop_stats.get(loop.id)
        record = stats.as_dict() if stats is not None else {"count": 0, "min": None, "max": None, "mean": None}
        loops["->".join(loop.modules)] = record
    return {
        "time": elapsed,
        "loops": loops,
        "tuple_types": dict((t, s.as_dict()) for t, s in manager.tuple_type_stats.items()),
        "sensor_delay": dict(("{}:{}".format(g, t), s.as_dict()) for (g, t), s in manager.sensor_delay.items()),
        "energy": dict((d.name, d.consumption(elapsed)) for d in controller.topology),
        "cost": dict((d.name, d.cost) for d in controller.topology),
        "network_usage": manager.network_usage / elapsed if elapsed > 0 else 0.0,
        "dropped": manager.dropped_tuples,
        "events": {
            "emitted": manager.emitted_tuples,
            "processed": manager.processed_tuples,
            "consumed": manager.consumed_tuples,
            "loops": manager.completed_loops,
        },
    }

def print_report(results):
    print("=========================================")
    print("APPLICATION LOOP DELAYS")
    print("=========================================")
    for name, s in results["loops"].items():
        print("[{}] --> {}".format(name, s["mean"]))
    print("=========================================")
    print("TUPLE CPU EXECUTION DELAY")
    print("=========================================")
    for t, s in results["tuple_types"].items():
        print("{} ---> {}".format(t, s["mean"]))
    print("=========================================")
    for name, e in results["energy"].items():
        print("{} : Energy Consumed = {}".format(name, e))
    print("Cost of execution in cloud = {}".format(sum(results["cost"].values())))
    print("Total network usage = {}".format(results["network_usage"]))
    print("Dropped tuples = {}".format(results["dropped"]))

# clean current simulation function
def clean():
    # close log file
    close_log()
    set_debug(0)
