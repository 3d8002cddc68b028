# Precision agriculture deployment: soil/climate sensors in field zones,
# per-sensor preprocessing modules, one data analyzer, irrigation actuators.
#
# cloud mode: every module on the cloud (static mapping)
# fog mode: preprocessing on each zone's edge device, analyzer on the cloud (edge-ward)

from attributes import *
from application import create_application
from distribution import Deterministic_Distribution
from placement import Module_Placement_Mapping, Module_Placement_Edgewards
from sensor import Sensor
from actuator import Actuator
from controller import Controller
from topology import create_topology

CLOUD = "cloud"
FOG = "fog"

def device_specs(num_zones=PA_NUM_ZONES, edge_mips=2800):
    specs = [
        {"name": "cloud", "mips": 44800, "ram": 40000, "up_bw": 10000, "down_bw": 10000, "level": 0,
         "rate_per_mips": 0.01, "busy_power": 107.339, "idle_power": 83.4333},
        {"name": "proxy-server", "mips": 2800, "ram": 4000, "up_bw": 10000, "down_bw": 10000, "level": 1,
         "rate_per_mips": 0.0, "busy_power": 107.339, "idle_power": 83.4333,
         "parent": "cloud", "uplink_latency": PA_PROXY_LATENCY},
    ]
    for i in range(1, num_zones + 1):
        specs.append({"name": "edge-zone-{}".format(i), "mips": edge_mips, "ram": 2000, "up_bw": 1000,
                      "down_bw": 1000, "level": 2, "rate_per_mips": 0.0, "busy_power": 87.53,
                      "idle_power": 82.44, "parent": "proxy-server", "uplink_latency": PA_EDGE_LATENCY})
    return specs

def application_spec(app_id=PA_APP_ID):
    modules = [{"name": m, "mips": 10} for t, m, a, p, period in PA_SENSOR_TYPES]
    modules.append({"name": PA_ANALYZER, "mips": 20})
    edges = []
    for t, m, a, p, period in PA_SENSOR_TYPES:
        edges.append({"src": t, "dst": m, "payload": 1000, "processing_length": 1000,
                      "tuple_type": t, "direction": "UP", "kind": "SENSOR"})
    for t, m, a, p, period in PA_SENSOR_TYPES:
        edges.append({"src": m, "dst": PA_ANALYZER, "payload": 500, "processing_length": 200,
                      "tuple_type": a, "direction": "UP", "kind": "MODULE"})
    edges.append({"src": PA_ANALYZER, "dst": PA_ACTUATOR_TYPE, "payload": 100, "processing_length": 50,
                  "tuple_type": PA_CONTROL_TYPE, "direction": "DOWN", "kind": "ACTUATOR"})
    return {
        "modules": modules,
        "edges": edges,
        "selectivity": [{"module": m, "in_type": t, "out_type": a, "fraction": 1.0}
                        for t, m, a, p, period in PA_SENSOR_TYPES],
        "loops": [[m, PA_ANALYZER] for t, m, a, p, period in PA_SENSOR_TYPES],
    }

def create_sensors_and_actuators(env, topology):
    sensors = []
    actuators = []
    for device in topology:
        if(not device.name.startswith("edge-zone")):
            continue
        for t, m, a, prefix, period in PA_SENSOR_TYPES:
            sensors.append(Sensor(env, len(sensors), "{}-{}".format(prefix, device.name), t, device.id,
                                  latency=SENSOR_DEFAULT_LATENCY, distribution=Deterministic_Distribution(period)))
        actuators.append(Actuator(env, len(actuators), "irrigation-{}".format(device.name), PA_ACTUATOR_TYPE,
                                  device.id, latency=ACTUATOR_DEFAULT_LATENCY))
    return sensors, actuators

def module_mapping(mode):
    if(mode == CLOUD):
        hints = dict((m, "cloud") for t, m, a, p, period in PA_SENSOR_TYPES)
    else:
        hints = {}
    hints[PA_ANALYZER] = "cloud"
    return hints

# builds topology, application and controller and places the modules
def create_scenario(env, mode=CLOUD, num_zones=PA_NUM_ZONES, edge_mips=2800):
    topology = create_topology(env, device_specs(num_zones, edge_mips))
    application = create_application(PA_APP_ID, application_spec())
    sensors, actuators = create_sensors_and_actuators(env, topology)
    controller = Controller(env, "master-controller", topology, sensors, actuators)
    if(mode == CLOUD):
        placement = Module_Placement_Mapping()
    elif(mode == FOG):
        placement = Module_Placement_Edgewards(sensors, actuators)
    else:
        raise ValueError("Unknown mode: {}".format(mode))
    controller.submit_application(application, placement, module_mapping(mode))
    return controller
