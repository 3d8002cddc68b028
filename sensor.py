# sensor attached to a gateway device, emits tuples of one type
from abstract_classes import Traffic_Generator
from attributes import DBG_SENSOR, SENSOR_DEFAULT_DIST, SENSOR_DEFAULT_LATENCY
from utils import dprint

class Sensor(Traffic_Generator):
    def __init__(self, env, id, name, tuple_type, gateway, latency=SENSOR_DEFAULT_LATENCY, distribution=SENSOR_DEFAULT_DIST, max_emissions=None):
        self.name = name
        self.tuple_type = tuple_type
        self.gateway = gateway # device id
        self.latency = latency
        self.max_emissions = max_emissions
        self.controller = None
        Traffic_Generator.__init__(self, env, id, distribution, enabled=False)

    def emit(self):
        dprint(str(self), "emitting", self.tuple_type, "at", self.env.now, objn=DBG_SENSOR)
        self.controller.sensor_emit(self)
        if(self.max_emissions is not None and self.emitted + 1 >= self.max_emissions):
            self.end()

    def __repr__(self):
        return "Sensor #{} ({})".\
            format(self.id, self.name)
