# Template for a simulation

import sim
import precision_agri

# Defines the classes that will be needed to print
# values from 0 to 127, where 0 means nothing and
# 127 means everything.
#
# TABLE:
# 1 - sensor
# 2 - actuator
# 4 - fog device
# 8 - controller
# 16 - placement
# 32 - application
# 64 - manager
#
# Example:
# DEBUG = 4+8 # means that only devices and
#             # the controller do print.
DEBUG=0

# set mode here:
# precision_agri.FOG => sensor-processing on edges, analyzer on cloud
# precision_agri.CLOUD => all modules on cloud
MODE = precision_agri.CLOUD

# seed to pseudo random values
sim.random.seed(13)

# SimPy's simulation environment
env = sim.simpy.Environment()

### Section: topology and application
# cloud -> proxy-server (80 ms) -> 4 edge zones (2 ms),
# five sensors and one irrigation actuator per zone

controller = precision_agri.create_scenario(env, mode=MODE)

print("========== RUNNING MODE:", MODE.upper(), "==========")
print(controller.assignment)

# starts simulation and set to end by time count with 1000 ms
results = sim.run(env, controller, ending_type=sim.End_Sim.ByTimeCount, until=1000, debug=DEBUG)

sim.print_report(results)

# close file descriptors
sim.clean()
