### Manager of simulation events

from attributes import DBG_MANAGER
from utils import End_Sim, dprint, Event_Type

# running min/max/mean of delay samples
class Delay_Stats(object):
    def __init__(self):
        self.count = 0
        self.total = 0.0
        self.min = None
        self.max = None

    def add(self, value):
        self.count += 1
        self.total += value
        if(self.min is None or value < self.min):
            self.min = value
        if(self.max is None or value > self.max):
            self.max = value

    @property
    def mean(self):
        if(self.count == 0):
            return None
        # clamp rounding drift so min <= mean <= max
        return min(max(self.total / self.count, self.min), self.max)

    def as_dict(self):
        return {"count": self.count, "min": self.min, "max": self.max, "mean": self.mean}

    def __repr__(self):
        return "Delay_Stats [count:{},min:{},max:{},mean:{}]".\
            format(self.count, self.min, self.max, self.mean)


class Manager(object):
    def __init__(self, env, keep_events=True):
        self.env = env
        self.keep_events = keep_events
        self.events = []
        self.emitted_tuples = 0
        self.processed_tuples = 0
        self.consumed_tuples = 0
        self.dropped_tuples = 0
        self.completed_loops = 0
        self.loop_stats = {}        # loop id -> Delay_Stats
        self.tuple_type_stats = {}  # tuple type -> Delay_Stats (execution)
        self.sensor_delay = {}      # (gateway name, tuple type) -> Delay_Stats
        self.network_usage = 0.0
        self.end_event = None
        self.end_count = None # (counter attribute, target)

    # create event that ends simulation; counts trigger it from register_event
    def create_end_event(self, ending_type, qty):
        if(ending_type == End_Sim.ByEmissionCount):
            self.end_count = ("emitted_tuples", qty)
        elif(ending_type == End_Sim.ByLoopCount):
            self.end_count = ("completed_loops", qty)
        else:
            return qty
        self.end_event = self.env.event()
        self._check_end()
        return self.end_event

    def _check_end(self):
        if(self.end_event is None or self.end_event.triggered):
            return
        counter, target = self.end_count
        if(getattr(self, counter) >= target):
            dprint("Simulation ended after", target, counter.replace("_", " "), "at", self.env.now, objn=DBG_MANAGER)
            self.end_event.succeed()

    # register event that happened
    def register_event(self, etype, time, *obj):
        if(self.keep_events):
            self.events.append((etype.name, time, obj))
        if(etype is Event_Type.SENSOR_Emit):
            self.emitted_tuples += 1
        elif(etype is Event_Type.MODULE_Process):
            self.processed_tuples += 1
        elif(etype is Event_Type.ACTUATOR_Consume):
            self.consumed_tuples += 1
        elif(etype is Event_Type.TUPLE_Dropped):
            self.dropped_tuples += 1
        elif(etype is Event_Type.LOOP_Completed):
            self.completed_loops += 1
        self._check_end()

    # schedule func(*args) to run in [time] units from now
    def schedule_event(self, time, func, *args):
        def delegator(time, func):
            yield self.env.timeout(time)
            func(*args)
        return self.env.process(delegator(time, func))

    def record_loop(self, loop, delay):
        self.loop_stats.setdefault(loop.id, Delay_Stats()).add(delay)
        self.register_event(Event_Type.LOOP_Completed, self.env.now, loop, delay)

    def record_execution(self, tuple_type, delay):
        self.tuple_type_stats.setdefault(tuple_type, Delay_Stats()).add(delay)

    def record_sensor_delay(self, gateway, tuple_type, delay):
        self.sensor_delay.setdefault((gateway, tuple_type), Delay_Stats()).add(delay)

    def record_transmission(self, latency, payload):
        self.network_usage += latency * payload
