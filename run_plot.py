import sim
import precision_agri
import matplotlib.pyplot as plt

# compare cloud-only and fog (edge preprocessing) deployments

sim.random.seed(13)

horizon = 1000
modes = [precision_agri.CLOUD, precision_agri.FOG]
results = {}

for mode in modes:
    print("Running mode {", mode, "}")
    env = sim.simpy.Environment()
    controller = precision_agri.create_scenario(env, mode=mode)
    print("\tBegin")
    results[mode] = sim.run(env, controller, ending_type=sim.End_Sim.ByTimeCount, until=horizon)
    print("\tEnd")
    sim.clean()

sensor_types = [t for t, m, a, p, period in sim.PA_SENSOR_TYPES]
loops = list(results[modes[0]]["loops"].keys())
devices = list(results[modes[0]]["energy"].keys())

def mean_sensor_delay(res, t):
    values = [s["mean"] for k, s in res["sensor_delay"].items() if k.endswith(":" + t) and s["mean"] is not None]
    return sum(values) / len(values) if values else 0

width = 0.4

figure = plt.figure()

plt.subplot(3, 1, 1)
for i, mode in enumerate(modes):
    x = [j + i * width for j in range(len(sensor_types))]
    plt.bar(x, [mean_sensor_delay(results[mode], t) for t in sensor_types], width, label=mode)
plt.xticks([j + width / 2 for j in range(len(sensor_types))], sensor_types)
plt.ylabel('Sensor processing delay (ms)')
plt.legend()

plt.subplot(3, 1, 2)
for i, mode in enumerate(modes):
    x = [j + i * width for j in range(len(loops))]
    plt.bar(x, [results[mode]["loops"][l]["mean"] or 0 for l in loops], width, label=mode)
plt.xticks([j + width / 2 for j in range(len(loops))], [l.split("->")[0] for l in loops])
plt.ylabel('Loop delay (ms)')

plt.subplot(3, 1, 3)
for i, mode in enumerate(modes):
    x = [j + i * width for j in range(len(devices))]
    plt.bar(x, [results[mode]["energy"][d] for d in devices], width, label=mode)
plt.xticks([j + width / 2 for j in range(len(devices))], devices)
plt.ylabel('Energy')

print("Finished")

plt.show()
