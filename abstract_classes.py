### Abstract Classes

from utils import Event_Type


# periodic emitter, waits dist() between emissions
class Traffic_Generator(object):
    def __init__(self, env, id, distribution, enabled=True):
        self.env = env
        self.id = id
        self.dist = distribution # Distribution or callable(self)
        self.enabled = enabled
        self.emitted = 0
        self.trafic_action = None

    def next_interval(self):
        if(hasattr(self.dist, "next_interval")):
            return self.dist.next_interval()
        return self.dist(self)

    def start(self):
        self.enabled = True
        if(self.trafic_action is None):
            self.trafic_action = self.env.process(self.trafic_run())

    def end(self):
        self.enabled = False

    def emit(self):
        raise NotImplementedError

    def trafic_run(self):
        while(self.enabled):
            yield self.env.timeout(self.next_interval())
            if(not self.enabled):
                break
            self.emit()
            self.emitted += 1
        self.trafic_action = None


# device with Idle/Busy power states, integrates energy over time
class Active_Node(object):
    def __init__(self, env, busy_power, idle_power, start_time=0.0):
        self.env = env
        self.busy_power = busy_power
        self.idle_power = idle_power
        self.start_time = start_time
        self.last_change = start_time
        self.active = 0 # processing events running
        self.energy = 0.0
        self.busy_time = 0.0
        self.manager = None

    @property
    def busy(self):
        return self.active > 0

    def power(self):
        return self.busy_power if self.busy else self.idle_power

    def _accumulate(self, now):
        elapsed = now - self.last_change
        if(elapsed > 0):
            self.energy += self.power() * elapsed
            if(self.busy):
                self.busy_time += elapsed
            self.last_change = now

    def start_work(self):
        now = self.env.now
        self._accumulate(now)
        self.active += 1
        if(self.active == 1 and self.manager is not None):
            self.manager.register_event(Event_Type.DEVICE_Busy, now, self)

    def end_work(self):
        now = self.env.now
        self._accumulate(now)
        self.active -= 1
        if(self.active == 0 and self.manager is not None):
            self.manager.register_event(Event_Type.DEVICE_Idle, now, self)

    # energy drawn until [now] (defaults to current simulated time)
    def consumption(self, now=None):
        if(now is None):
            now = self.env.now
        pending = max(now - self.last_change, 0)
        return self.energy + self.power() * pending

    def finalize(self, now=None):
        if(now is None):
            now = self.env.now
        self._accumulate(now)
        return self.energy
