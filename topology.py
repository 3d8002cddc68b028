### Device tree (cloud -> proxies -> edges)

from abstract_classes import Active_Node
from attributes import *
from errors import InvalidTopologyError
from utils import dprint

class Fog_Device(Active_Node):
    def __init__(self, env, id, name, mips, ram=DEVICE_DEFAULT_RAM, up_bw=DEVICE_DEFAULT_BANDWIDTH,
                 down_bw=DEVICE_DEFAULT_BANDWIDTH, rate_per_mips=DEVICE_DEFAULT_RATE_PER_MIPS,
                 busy_power=DEVICE_DEFAULT_BUSY_POWER, idle_power=DEVICE_DEFAULT_IDLE_POWER, level=None):
        self.id = id
        self.name = name
        self.mips = mips
        self.ram = ram
        self.up_bw = up_bw
        self.down_bw = down_bw
        self.rate_per_mips = rate_per_mips
        self.parent_id = NO_PARENT
        self.uplink_latency = 0.0
        self.children = []
        self.declared_level = level
        self.level = ROOT_LEVEL
        self.resident = 0 # module instances placed here (set by the controller)
        self.cost = 0.0
        Active_Node.__init__(self, env, busy_power, idle_power, env.now)

    # MIPS each resident module instance gets
    def mips_share(self):
        return self.mips / float(max(self.resident, 1))

    def __repr__(self):
        return "Fog Device #{} ({})".\
            format(self.id, self.name)


class Topology(object):
    def __init__(self, env):
        self.env = env
        self.devices = [] # arena, index = device id
        self.names = {}

    def __iter__(self):
        return iter(self.devices)

    def __len__(self):
        return len(self.devices)

    def get(self, device):
        if(isinstance(device, Fog_Device)):
            device = device.id
        if(not isinstance(device, int) or device < 0 or device >= len(self.devices)):
            raise InvalidTopologyError("Unknown device: {}".format(device))
        return self.devices[device]

    def get_device_by_name(self, name):
        if(name not in self.names):
            raise InvalidTopologyError("Unknown device: {}".format(name))
        return self.devices[self.names[name]]

    def add_device(self, spec):
        name = spec["name"]
        if(name in self.names):
            raise InvalidTopologyError("Duplicated device name: {}".format(name))
        # resolve the parent first so a bad spec leaves nothing behind
        parent = spec.get("parent")
        uplink_latency = spec.get("uplink_latency", 0.0)
        if(parent is not None):
            if(isinstance(parent, str)):
                parent = self.get_device_by_name(parent).id
            else:
                parent = self.get(parent).id
            if(uplink_latency < 0):
                raise InvalidTopologyError("Negative latency from {} to its parent".format(name))
        id = len(self.devices)
        device = Fog_Device(self.env, id, name, spec.get("mips", DEVICE_DEFAULT_MIPS),
                            ram=spec.get("ram", DEVICE_DEFAULT_RAM),
                            up_bw=spec.get("up_bw", DEVICE_DEFAULT_BANDWIDTH),
                            down_bw=spec.get("down_bw", DEVICE_DEFAULT_BANDWIDTH),
                            rate_per_mips=spec.get("rate_per_mips", DEVICE_DEFAULT_RATE_PER_MIPS),
                            busy_power=spec.get("busy_power", DEVICE_DEFAULT_BUSY_POWER),
                            idle_power=spec.get("idle_power", DEVICE_DEFAULT_IDLE_POWER),
                            level=spec.get("level"))
        self.devices.append(device)
        self.names[name] = id
        dprint("Creating", str(device), objn=DBG_DEVICE)
        if(parent is not None):
            self.set_parent(id, parent, uplink_latency)
        return id

    def set_parent(self, child, parent, uplink_latency):
        c = self.get(child)
        p = self.get(parent)
        if(uplink_latency < 0):
            raise InvalidTopologyError("Negative latency from {} to {}".format(c.name, p.name))
        if(c is p or self.is_ancestor(c.id, p.id)):
            raise InvalidTopologyError("Attaching {} to {} creates a cycle".format(c.name, p.name))
        if(c.parent_id != NO_PARENT):
            self.devices[c.parent_id].children.remove(c.id)
        dprint("Attaching", str(c), "to", str(p), "with a latency of", uplink_latency, objn=DBG_DEVICE)
        c.parent_id = p.id
        c.uplink_latency = uplink_latency
        p.children.append(c.id)
        self._relevel(c)

    def _relevel(self, device):
        stack = [device]
        while(stack):
            d = stack.pop()
            if(d.parent_id == NO_PARENT):
                d.level = ROOT_LEVEL
            else:
                d.level = self.devices[d.parent_id].level + 1
            stack += [self.devices[c] for c in d.children]

    def level_of(self, device):
        return self.get(device).level

    @property
    def root(self):
        roots = [d for d in self.devices if d.parent_id == NO_PARENT]
        if(len(roots) != 1):
            raise InvalidTopologyError("Topology must have exactly one root, found {}".format(len(roots)))
        return roots[0]

    def validate(self):
        root = self.root
        for d in self.devices:
            if(d.declared_level is not None and d.declared_level != d.level):
                raise InvalidTopologyError("{} declares level {} but sits at level {}".
                                           format(d.name, d.declared_level, d.level))
        return root

    # [(device id, uplink latency)] from device up to the root (root latency is 0)
    def path_to_root(self, device):
        d = self.get(device)
        path = []
        while(d.parent_id != NO_PARENT):
            path.append((d.id, d.uplink_latency))
            d = self.devices[d.parent_id]
        path.append((d.id, 0.0))
        return path

    def is_ancestor(self, ancestor, device):
        d = self.get(device)
        while(d.parent_id != NO_PARENT):
            d = self.devices[d.parent_id]
            if(d.id == ancestor):
                return True
        return False

    # least common ancestor by level-synchronized ascent
    def lca(self, a, b):
        da = self.get(a)
        db = self.get(b)
        while(da.level > db.level):
            da = self.devices[da.parent_id]
        while(db.level > da.level):
            db = self.devices[db.parent_id]
        while(da is not db):
            da = self.devices[da.parent_id]
            db = self.devices[db.parent_id]
        return da

    # links crossed going from a to b: [(from id, to id, latency, bandwidth)]
    def hops_between(self, a, b):
        top = self.lca(a, b)
        up = []
        d = self.get(a)
        while(d is not top):
            p = self.devices[d.parent_id]
            up.append((d.id, p.id, d.uplink_latency, d.up_bw))
            d = p
        down = []
        d = self.get(b)
        while(d is not top):
            p = self.devices[d.parent_id]
            down.append((p.id, d.id, d.uplink_latency, p.down_bw))
            d = p
        down.reverse()
        return up + down

    def path_latency(self, a, b):
        return sum(h[2] for h in self.hops_between(a, b))

    # latency of every hop + payload / bottleneck bandwidth
    def transmission_delay(self, a, b, payload):
        hops = self.hops_between(a, b)
        if(len(hops) == 0):
            return 0.0
        latency = sum(h[2] for h in hops)
        bandwidth = min(h[3] for h in hops)
        if(bandwidth > 0):
            return latency + payload / float(bandwidth)
        return latency

    def subtree(self, device):
        d = self.get(device)
        nodes = []
        queue = [d]
        while(queue):
            n = queue.pop(0)
            nodes.append(n)
            queue += [self.devices[c] for c in n.children]
        return nodes

    def __repr__(self):
        return "Topology [devices:{}]".\
            format(len(self.devices))


def create_topology(env, specs):
    # specs: list of dicts, parents referenced by name and listed before children
    topology = Topology(env)
    for s in specs:
        topology.add_device(s)
    topology.validate()
    dprint("Total devices:", len(topology), objn=DBG_DEVICE)
    return topology
