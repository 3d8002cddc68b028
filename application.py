### Application DAG: modules, edges, selectivity and loops

from attributes import DBG_APPLICATION, SELECTIVITY_DEFAULT_FRACTION
from errors import FogSimError, InvalidEdgeError, UnknownModuleError
from utils import Direction, Edge_Kind, dprint


class App_Module(object):
    def __init__(self, name, mips):
        self.name = name
        self.mips = mips

    def __repr__(self):
        return "App Module {} ({} MIPS)".\
            format(self.name, self.mips)


class App_Edge(object):
    def __init__(self, src, dst, payload, processing_length, tuple_type, direction, kind):
        self.src = src
        self.dst = dst
        self.payload = payload
        self.processing_length = processing_length
        self.tuple_type = tuple_type
        self.direction = direction
        self.kind = kind

    def __repr__(self):
        return "App Edge {} -> {} [{}]".\
            format(self.src, self.dst, self.tuple_type)


# emits [fraction] tuples per incoming tuple, in expectation
class Fractional_Selectivity(object):
    def __init__(self, fraction=SELECTIVITY_DEFAULT_FRACTION):
        self.fraction = fraction

    # whole tuples to emit given the credit carried over; returns (count, credit)
    def fire(self, credit):
        credit += self.fraction
        count = int(credit + 1e-9)
        return count, max(credit - count, 0.0)

    def __repr__(self):
        return "Fractional Selectivity ({})".format(self.fraction)


class App_Loop(object):
    def __init__(self, modules, id=None):
        self.modules = list(modules)
        self.id = id

    # does the traversal end with this loop's sequence
    def matches(self, path):
        n = len(self.modules)
        return n > 0 and len(path) >= n and path[-n:] == self.modules

    def __repr__(self):
        return "App Loop #{} {}".\
            format(self.id, "->".join(self.modules))


def _as_direction(value):
    if(isinstance(value, Direction)):
        return value
    try:
        return Direction[str(value).upper()]
    except KeyError:
        raise InvalidEdgeError("Unknown direction: {}".format(value))

def _as_kind(value):
    if(isinstance(value, Edge_Kind)):
        return value
    try:
        return Edge_Kind[str(value).upper()]
    except KeyError:
        raise InvalidEdgeError("Unknown edge kind: {}".format(value))


class Application(object):
    def __init__(self, app_id):
        self.app_id = app_id
        self.modules = {}       # name -> App_Module, insertion ordered
        self.edges = []
        self.edge_by_type = {}  # tuple type -> App_Edge
        self.selectivity = {}   # module -> [(in type, out type, Fractional_Selectivity)]
        self.loops = []
        self.frozen = False

    def _check_open(self):
        if(self.frozen):
            raise InvalidEdgeError("Application {} is validated and cannot change".format(self.app_id))

    def add_module(self, name, mips):
        self._check_open()
        if(name in self.modules):
            raise FogSimError("Duplicated module: {}".format(name))
        if(mips < 0):
            raise FogSimError("Negative MIPS for module {}".format(name))
        self.modules[name] = App_Module(name, mips)
        dprint("Adding", str(self.modules[name]), objn=DBG_APPLICATION)
        return self.modules[name]

    def add_edge(self, src, dst, payload, processing_length, tuple_type, direction, kind):
        self._check_open()
        direction = _as_direction(direction)
        kind = _as_kind(kind)
        if(kind is Edge_Kind.SENSOR and direction is not Direction.UP):
            raise InvalidEdgeError("Sensor edge {} must go up".format(tuple_type))
        if(kind is Edge_Kind.ACTUATOR and direction is not Direction.DOWN):
            raise InvalidEdgeError("Actuator edge {} must go down".format(tuple_type))
        if(tuple_type in self.edge_by_type):
            raise InvalidEdgeError("Duplicated tuple type: {}".format(tuple_type))
        if(payload < 0 or processing_length < 0):
            raise InvalidEdgeError("Negative payload or length on edge {}".format(tuple_type))
        edge = App_Edge(src, dst, payload, processing_length, tuple_type, direction, kind)
        self.edges.append(edge)
        self.edge_by_type[tuple_type] = edge
        dprint("Adding", str(edge), objn=DBG_APPLICATION)
        return edge

    def add_selectivity(self, module, in_type, out_type, fraction=SELECTIVITY_DEFAULT_FRACTION):
        self._check_open()
        self.selectivity.setdefault(module, []).append((in_type, out_type, Fractional_Selectivity(fraction)))

    def set_loops(self, loops):
        self._check_open()
        self.loops = []
        for i, l in enumerate(loops):
            modules = l.modules if isinstance(l, App_Loop) else l
            self.loops.append(App_Loop(modules, id=i))

    def validate(self):
        if(self.frozen):
            return self
        sensor_types = set(self.sensor_types())
        actuator_types = set(self.actuator_types())
        for e in self.edges:
            if(e.kind is Edge_Kind.SENSOR):
                self._known(e.dst, e)
            elif(e.kind is Edge_Kind.MODULE):
                self._known(e.src, e)
                self._known(e.dst, e)
            else:
                self._known(e.src, e)
        for module, mappings in self.selectivity.items():
            self._known(module, "selectivity")
            for in_type, out_type, s in mappings:
                ein = self.edge_by_type.get(in_type)
                eout = self.edge_by_type.get(out_type)
                if(ein is None or ein.dst != module):
                    raise InvalidEdgeError("{} does not receive {}".format(module, in_type))
                if(eout is None or eout.src != module):
                    raise InvalidEdgeError("{} does not emit {}".format(module, out_type))
                if(not 0 < s.fraction <= 1):
                    raise InvalidEdgeError("Selectivity of {} out of (0, 1]: {}".format(module, s.fraction))
        for loop in self.loops:
            for name in loop.modules:
                if(name not in self.modules and name not in sensor_types and name not in actuator_types):
                    raise UnknownModuleError(name, str(loop))
        self._check_acyclic()
        self.frozen = True
        return self

    def _known(self, module, where):
        if(module not in self.modules):
            raise UnknownModuleError(module, str(where))

    def _check_acyclic(self):
        if(len(self.topological_order()) != len(self.modules)):
            raise InvalidEdgeError("Application {} has a cycle between modules".format(self.app_id))

    # modules ranked by their first incoming edge, then Kahn over module-to-module edges
    def topological_order(self):
        rank = {}
        for i, e in enumerate(self.edges):
            if(e.dst in self.modules and e.dst not in rank):
                rank[e.dst] = i
        for m in self.modules:
            rank.setdefault(m, len(self.edges))
        indegree = dict((m, 0) for m in self.modules)
        for e in self.edges:
            if(e.kind is Edge_Kind.MODULE):
                indegree[e.dst] += 1
        ready = sorted([m for m in self.modules if indegree[m] == 0], key=lambda m: rank[m])
        order = []
        while(ready):
            m = ready.pop(0)
            order.append(m)
            for e in self.out_edges(m):
                if(e.kind is Edge_Kind.MODULE):
                    indegree[e.dst] -= 1
                    if(indegree[e.dst] == 0):
                        ready.append(e.dst)
            ready.sort(key=lambda m: rank[m])
        return order

    # queries

    def edge_for_type(self, tuple_type):
        return self.edge_by_type.get(tuple_type)

    def sensor_edges(self):
        return [e for e in self.edges if e.kind is Edge_Kind.SENSOR]

    def sensor_types(self):
        return [e.src for e in self.sensor_edges()]

    def actuator_types(self):
        return [e.dst for e in self.edges if e.kind is Edge_Kind.ACTUATOR]

    def out_edges(self, module):
        return [e for e in self.edges if e.src == module and e.kind is not Edge_Kind.SENSOR]

    def in_edges(self, module):
        return [e for e in self.edges if e.dst == module and e.kind is not Edge_Kind.ACTUATOR]

    def is_fan_in(self, module):
        return len(self.in_edges(module)) > 1

    def mappings_for(self, module, in_type):
        return [(out_type, s) for t, out_type, s in self.selectivity.get(module, []) if t == in_type]

    # modules fed (transitively) by a sensor type, in edge order
    def modules_reachable_from(self, sensor_type):
        found = []
        frontier = [e.dst for e in self.sensor_edges() if e.src == sensor_type]
        while(frontier):
            m = frontier.pop(0)
            if(m in found):
                continue
            found.append(m)
            frontier += [e.dst for e in self.out_edges(m) if e.kind is Edge_Kind.MODULE]
        return found

    def sensor_types_reaching(self, module):
        return [s for s in self.sensor_types() if module in self.modules_reachable_from(s)]

    def __repr__(self):
        return "Application {} [modules:{},edges:{}]".\
            format(self.app_id, len(self.modules), len(self.edges))


def create_application(app_id, spec=None):
    application = Application(app_id)
    if(spec is None):
        return application
    for m in spec.get("modules", []):
        application.add_module(m["name"], m["mips"])
    for e in spec.get("edges", []):
        application.add_edge(e["src"], e["dst"], e["payload"], e["processing_length"],
                             e["tuple_type"], e["direction"], e["kind"])
    for s in spec.get("selectivity", []):
        application.add_selectivity(s["module"], s["in_type"], s["out_type"],
                                    s.get("fraction", SELECTIVITY_DEFAULT_FRACTION))
    application.set_loops(spec.get("loops", []))
    return application.validate()
