# actuator attached to a gateway device, consumes tuples of one type
from attributes import ACTUATOR_DEFAULT_LATENCY, DBG_ACTUATOR
from utils import dprint

class Actuator(object):
    def __init__(self, env, id, name, actuator_type, gateway, latency=ACTUATOR_DEFAULT_LATENCY):
        self.env = env
        self.id = id
        self.name = name
        self.actuator_type = actuator_type
        self.gateway = gateway # device id
        self.latency = latency
        self.consumed = 0

    def put(self, tup):
        self.consumed += 1
        dprint(str(self), "consumed", str(tup), "at", self.env.now, objn=DBG_ACTUATOR)

    def __repr__(self):
        return "Actuator #{} ({})".\
            format(self.id, self.name)
