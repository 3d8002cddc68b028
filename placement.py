### Module placement: static mapping and edge-ward heuristic

from attributes import DBG_PLACEMENT
from errors import FogSimError, UnknownModuleError, UnplaceableModuleError
from utils import Direction, Edge_Kind, dprint


# module name -> device ids hosting an instance of it
class Module_Assignment(object):
    def __init__(self, topology):
        self.topology = topology
        self.instances = {}

    def add(self, module, device):
        devices = self.instances.setdefault(module, [])
        if(device not in devices):
            devices.append(device)

    def __getitem__(self, module):
        return list(self.instances[module])

    def __contains__(self, module):
        return module in self.instances

    def __iter__(self):
        return iter(self.instances)

    def devices_of(self, module):
        return list(self.instances.get(module, []))

    def modules_on(self, device):
        return [m for m, devices in self.instances.items() if device in devices]

    def instance_count(self, device):
        return len(self.modules_on(device))

    def used_mips(self, application, device):
        return sum(application.modules[m].mips for m in self.modules_on(device))

    # module -> device name (or names, for replicated modules)
    def as_names(self):
        names = {}
        for m, devices in self.instances.items():
            n = [self.topology.get(d).name for d in devices]
            names[m] = n[0] if len(n) == 1 else n
        return names

    def __eq__(self, other):
        return isinstance(other, Module_Assignment) and self.instances == other.instances

    def __repr__(self):
        return "Module Assignment {}".format(self.as_names())


class Module_Placement(object):
    name = None

    def place(self, topology, application, hints=None):
        raise NotImplementedError

    @staticmethod
    def _hint_devices(topology, module, hint):
        names = [hint] if isinstance(hint, (str, int)) else list(hint)
        devices = []
        for n in names:
            try:
                if(isinstance(n, int)):
                    devices.append(topology.get(n))
                else:
                    devices.append(topology.get_device_by_name(n))
            except FogSimError:
                raise UnplaceableModuleError(module, "unknown device {}".format(n))
        return devices


class Module_Placement_Mapping(Module_Placement):
    name = "mapping"

    def place(self, topology, application, hints=None):
        hints = hints or {}
        for m in hints:
            if(m not in application.modules):
                raise UnknownModuleError(m, "module mapping")
        assignment = Module_Assignment(topology)
        for m in application.modules:
            if(m not in hints):
                raise UnplaceableModuleError(m, "not present in the module mapping")
            for d in self._hint_devices(topology, m, hints[m]):
                dprint("Mapping", m, "to", str(d), objn=DBG_PLACEMENT)
                assignment.add(m, d.id)
        return assignment


class Module_Placement_Edgewards(Module_Placement):
    name = "edgewards"

    def __init__(self, sensors, actuators=None):
        self.sensors = list(sensors)
        self.actuators = list(actuators or [])

    def place(self, topology, application, hints=None):
        hints = hints or {}
        for m in hints:
            if(m not in application.modules):
                raise UnknownModuleError(m, "module mapping")
        assignment = Module_Assignment(topology)
        remaining = dict((d.id, d.mips) for d in topology)

        def put(module, device):
            mips = application.modules[module].mips
            if(remaining[device.id] < mips):
                raise UnplaceableModuleError(module, "{} lacks capacity".format(device.name))
            remaining[device.id] -= mips
            assignment.add(module, device.id)
            dprint("Placing", module, "on", str(device), objn=DBG_PLACEMENT)

        # pinned modules first
        for m in application.modules:
            if(m in hints):
                for d in self._hint_devices(topology, m, hints[m]):
                    put(m, d)

        root = topology.root
        for m in application.topological_order():
            if(m in hints):
                continue
            module = application.modules[m]
            preds = self._predecessor_devices(topology, application, assignment, m)
            if(len(preds) == 0):
                # no sensor ancestry: sinks default to the root
                put(m, root)
                continue
            if(application.is_fan_in(m)):
                top = preds[0]
                for p in preds[1:]:
                    top = topology.lca(top, p).id
                candidates = self._ascending(topology, top)
                device = self._first_fit(topology, candidates, remaining, module.mips)
                if(device is None):
                    raise UnplaceableModuleError(m, "no device from {} to the root has {} MIPS left".
                                                 format(topology.get(top).name, module.mips))
                put(m, device)
                continue
            edge = application.in_edges(m)[0]
            for p in preds:
                if(edge.direction is Direction.UP):
                    segments = [self._ascending(topology, p)]
                else:
                    segments = self._descending_segments(topology, application, p, m)
                for candidates in segments:
                    if(any(c in assignment.devices_of(m) for c in candidates)):
                        continue # an instance already serves this path
                    device = self._first_fit(topology, candidates, remaining, module.mips)
                    if(device is None):
                        raise UnplaceableModuleError(m, "no device on the path from {} has {} MIPS left".
                                                     format(topology.get(p).name, module.mips))
                    put(m, device)
        return assignment

    # devices that feed module m: sensor gateways or predecessor instances
    def _predecessor_devices(self, topology, application, assignment, m):
        devices = []
        for e in application.in_edges(m):
            if(e.kind is Edge_Kind.SENSOR):
                found = [s.gateway for s in self.sensors if s.tuple_type == e.src]
            else:
                found = assignment.devices_of(e.src)
            for d in found:
                if(d not in devices):
                    devices.append(d)
        return devices

    @staticmethod
    def _ascending(topology, device):
        return [d for d, latency in topology.path_to_root(device)]

    # paths from each sensor gateway below [device] up to [device]
    def _descending_segments(self, topology, application, device, m):
        segments = []
        sensor_types = application.sensor_types_reaching(m)
        for s in self.sensors:
            if(s.tuple_type not in sensor_types):
                continue
            if(s.gateway != device and not topology.is_ancestor(device, s.gateway)):
                continue
            segment = []
            for d in self._ascending(topology, s.gateway):
                segment.append(d)
                if(d == device):
                    break
            if(segment not in segments):
                segments.append(segment)
        if(len(segments) == 0):
            segments.append([device])
        return segments

    @staticmethod
    def _first_fit(topology, candidates, remaining, mips):
        for c in candidates:
            if(remaining[c] >= mips):
                return topology.get(c)
        return None


def create_placement(directive, sensors=None, actuators=None):
    # directive: {"strategy": "mapping"|"edgewards", "hints": {...}}
    strategy = directive.get("strategy", "mapping")
    if(strategy == Module_Placement_Mapping.name):
        return Module_Placement_Mapping(), directive.get("hints", {})
    elif(strategy == Module_Placement_Edgewards.name):
        return Module_Placement_Edgewards(sensors or [], actuators), directive.get("hints", {})
    raise ValueError("Unknown placement strategy: {}".format(strategy))
