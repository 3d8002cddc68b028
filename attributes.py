### Default attributes

import random

# default sensor distribution (wait time between emissions):
SENSOR_DEFAULT_DIST = lambda x: random.expovariate(0.2)
# default sensor latency to its gateway (ms):
SENSOR_DEFAULT_LATENCY = 1.0
# default actuator latency from its gateway (ms):
ACTUATOR_DEFAULT_LATENCY = 1.0
# default device figures:
DEVICE_DEFAULT_MIPS = 1000
DEVICE_DEFAULT_RAM = 1000
DEVICE_DEFAULT_BANDWIDTH = 10000
DEVICE_DEFAULT_RATE_PER_MIPS = 0.0
DEVICE_DEFAULT_BUSY_POWER = 107.339
DEVICE_DEFAULT_IDLE_POWER = 83.4333
# default selectivity:
SELECTIVITY_DEFAULT_FRACTION = 1.0

# Constants

# level of the root (cloud) device:
ROOT_LEVEL = 0
# no parent:
NO_PARENT = -1

# debug class numbers (powers of two, see utils.set_debug):
PRINTABLE_CLASS_NUMBERS = 7
DBG_SENSOR = 1
DBG_ACTUATOR = 2
DBG_DEVICE = 4
DBG_CONTROLLER = 8
DBG_PLACEMENT = 16
DBG_APPLICATION = 32
DBG_MANAGER = 64

# Precision agriculture scenario

PA_APP_ID = "precision_agri"
PA_NUM_ZONES = 4
PA_SENSOR_TYPES = [
    # (tuple type, module, alert type, sensor prefix, emission period)
    ("SOIL_MOISTURE", "soil_moisture_module", "SOIL_ALERT", "sm", 5),
    ("TEMPERATURE", "temperature_module", "TEMP_ALERT", "tp", 6),
    ("HUMIDITY", "humidity_module", "HUMIDITY_ALERT", "hm", 7),
    ("PH", "pH_module", "PH_ALERT", "ph", 4),
    ("LIGHT_INTENSITY", "light_intensity_module", "LIGHT_ALERT", "light", 5),
]
PA_ANALYZER = "data_analyzer"
PA_ACTUATOR_TYPE = "IRRIGATION"
PA_CONTROL_TYPE = "CONTROL_SIGNAL"
PA_PROXY_LATENCY = 80
PA_EDGE_LATENCY = 2
