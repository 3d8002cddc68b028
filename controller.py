### Controller: routes tuples over the placed application

import simpy

from attributes import DBG_CONTROLLER
from data import Tuple
from errors import InvalidEdgeError, UnroutableTupleError
from manager import Manager
from utils import Direction, Edge_Kind, Event_Type, dprint


class Controller(object):
    def __init__(self, env, name, topology, sensors, actuators, manager=None):
        self.env = env
        self.name = name
        self.topology = topology
        self.sensors = list(sensors)
        self.actuators = list(actuators)
        self.manager = manager if manager is not None else Manager(env)
        self.application = None
        self.assignment = None
        self.tuple_count = 0
        self.credits = {} # (module, device, in type, out type) -> selectivity credit
        self.queues = {}  # (module, device) -> simpy.Resource, one tuple at a time
        for d in self.topology:
            d.manager = self.manager

    # place the application and bind sensors; nothing is simulated yet
    def submit_application(self, application, placement, hints=None):
        self.topology.validate()
        application.validate()
        for s in self.sensors:
            self.topology.get(s.gateway)
            edge = application.edge_for_type(s.tuple_type)
            if(edge is None or edge.kind is not Edge_Kind.SENSOR):
                raise InvalidEdgeError("{} emits {} but no sensor edge carries it".format(s, s.tuple_type))
        for a in self.actuators:
            self.topology.get(a.gateway)
        assignment = placement.place(self.topology, application, hints)
        for s in self.sensors:
            s.controller = self
        self.application = application
        self.assignment = assignment
        self.queues = {}
        for d in self.topology:
            d.resident = assignment.instance_count(d.id)
        dprint(self.name, "placed", application.app_id, ":", str(assignment), objn=DBG_CONTROLLER)
        return assignment

    def start(self):
        for s in self.sensors:
            s.start()

    def stop(self):
        for s in self.sensors:
            s.end()

    def next_id(self):
        self.tuple_count += 1
        return self.tuple_count

    # SensorEmit
    def sensor_emit(self, sensor):
        now = self.env.now
        edge = self.application.edge_for_type(sensor.tuple_type)
        tup = Tuple(self.next_id(), edge, sensor.gateway, now)
        tup.reach(sensor.tuple_type, now)
        self.manager.register_event(Event_Type.SENSOR_Emit, now, sensor, tup)
        self.send(tup, sensor.gateway, extra_latency=sensor.latency)
        return tup

    # InTransit: schedule arrival at the device hosting the destination
    def send(self, tup, device, extra_latency=0.0):
        try:
            target = self.resolve(tup, device)
        except UnroutableTupleError as e:
            self.drop(tup, e)
            return None
        if(tup.edge.kind is Edge_Kind.ACTUATOR):
            latency = self.topology.path_latency(device, target.gateway) + target.latency
            delay = self.topology.transmission_delay(device, target.gateway, tup.payload) + target.latency
            self.manager.record_transmission(latency, tup.payload)
            self.env.process(self._deliver(tup, target, delay))
        else:
            latency = self.topology.path_latency(device, target) + extra_latency
            delay = self.topology.transmission_delay(device, target, tup.payload) + extra_latency
            self.manager.record_transmission(latency, tup.payload)
            tup.dst_device = target
            self.env.process(self._transit(tup, target, delay))
        dprint(str(tup), "leaves device", device, "delay", delay, "at", self.env.now, objn=DBG_CONTROLLER)
        return delay

    def _transit(self, tup, device, delay):
        yield self.env.timeout(delay)
        tup.delay += delay
        self.tuple_arrive(tup, self.topology.get(device))

    def _deliver(self, tup, actuator, delay):
        yield self.env.timeout(delay)
        tup.delay += delay
        self.actuator_consume(tup, actuator)

    # TupleArrive
    def tuple_arrive(self, tup, device):
        now = self.env.now
        tup.arrival_time = now
        self.manager.register_event(Event_Type.TUPLE_Arrive, now, device, tup)
        processing_delay = tup.length / float(device.mips_share()) if device.mips > 0 else 0.0
        self.env.process(self._process(tup, device, processing_delay))

    # each module instance serves its tuples in arrival order
    def _process(self, tup, device, processing_delay):
        key = (tup.dst, device.id)
        if(key not in self.queues):
            self.queues[key] = simpy.Resource(self.env, capacity=1)
        with self.queues[key].request() as req:
            yield req
            device.start_work()
            yield self.env.timeout(processing_delay)
            device.end_work()
        tup.delay += self.env.now - tup.arrival_time
        self.module_process(tup, device)

    # ModuleProcess: account, then fan out through the selectivity
    def module_process(self, tup, device):
        now = self.env.now
        module = tup.dst
        tup.path.append(module)
        tup.stamps.append(tup.arrival_time)
        self.manager.register_event(Event_Type.MODULE_Process, now, module, device, tup)
        self.manager.record_execution(tup.type, now - tup.arrival_time)
        if(tup.edge.kind is Edge_Kind.SENSOR):
            self.manager.record_sensor_delay(self.topology.get(tup.origin_device).name, tup.type, now - tup.init_time)
        device.cost += device.rate_per_mips * tup.length
        self.check_loops(tup)
        children = []
        for out_type, selectivity in self.application.mappings_for(module, tup.type):
            key = (module, device.id, tup.type, out_type)
            count, self.credits[key] = selectivity.fire(self.credits.get(key, 0.0))
            edge = self.application.edge_for_type(out_type)
            for i in range(count):
                child = tup.derive(self.next_id(), edge, device.id, now)
                children.append(child)
                self.send(child, device.id)
        return children

    # ActuatorConsume
    def actuator_consume(self, tup, actuator):
        now = self.env.now
        actuator.put(tup)
        tup.reach(actuator.actuator_type, now)
        self.manager.register_event(Event_Type.ACTUATOR_Consume, now, actuator, tup)
        self.check_loops(tup)

    def check_loops(self, tup):
        now = self.env.now
        for loop in self.application.loops:
            if(loop.matches(tup.path)):
                start = tup.stamps[-len(loop.modules)]
                self.manager.record_loop(loop, now - start)

    def drop(self, tup, error):
        dprint("Dropping", str(tup), ":", error.message, "at", self.env.now, objn=DBG_CONTROLLER)
        self.manager.register_event(Event_Type.TUPLE_Dropped, self.env.now, tup, error)

    # device (or actuator) the tuple must reach from [device]
    def resolve(self, tup, device):
        edge = tup.edge
        if(edge.kind is Edge_Kind.ACTUATOR):
            return self._find_actuator(tup, device)
        candidates = self.assignment.devices_of(edge.dst)
        if(len(candidates) == 0):
            raise UnroutableTupleError(tup, "{} has no instance".format(edge.dst))
        if(edge.direction is Direction.UP):
            for d, latency in self.topology.path_to_root(device):
                if(d in candidates):
                    return d
            raise UnroutableTupleError(tup, "no instance of {} above device {}".format(edge.dst, device))
        # downward: nearest instance toward the origin gateway, else anywhere below
        below = [d.id for d in self.topology.subtree(device)]
        origin_path = [d for d, latency in self.topology.path_to_root(tup.origin_device)]
        if(device in origin_path):
            for d in reversed(origin_path[:origin_path.index(device) + 1]):
                if(d in candidates):
                    return d
        found = [d for d in candidates if d in below]
        if(len(found) == 0):
            raise UnroutableTupleError(tup, "no instance of {} below device {}".format(edge.dst, device))
        return min(found, key=lambda d: (self.topology.level_of(d), d))

    def _find_actuator(self, tup, device):
        below = set(d.id for d in self.topology.subtree(device))
        found = [a for a in self.actuators if a.actuator_type == tup.edge.dst and a.gateway in below]
        if(len(found) == 0):
            raise UnroutableTupleError(tup, "no {} actuator below device {}".format(tup.edge.dst, device))
        for a in found:
            if(a.gateway == tup.origin_device):
                return a
        return found[0]

    def finalize(self, now=None):
        if(now is None):
            now = self.env.now
        return dict((d.name, d.finalize(now)) for d in self.topology)

    def __repr__(self):
        return "Controller {}".format(self.name)
