# data abstraction
class Tuple(object):
    def __init__(self, id, edge, src_device, init_time, origin_device=None, origin_time=None, path=None, stamps=None):
        self.id = id
        self.edge = edge # App_Edge carried
        self.type = edge.tuple_type
        self.payload = edge.payload
        self.length = edge.processing_length
        self.direction = edge.direction
        self.src_device = src_device # device it was emitted from
        self.init_time = init_time
        # sensor gateway and emission time of the first tuple in the chain
        self.origin_device = src_device if origin_device is None else origin_device
        self.origin_time = init_time if origin_time is None else origin_time
        # traversal: names reached (sensor type, modules, actuator type) and when
        self.path = [] if path is None else list(path)
        self.stamps = [] if stamps is None else list(stamps)
        self.delay = 0.0 # accumulated transmission + processing delay
        self.dst_device = None
        self.arrival_time = None

    # next processing step
    @property
    def dst(self):
        return self.edge.dst

    def reach(self, name, time):
        self.path.append(name)
        self.stamps.append(time)

    # child tuple on an outgoing edge, inheriting the traversal so far
    def derive(self, id, edge, src_device, init_time):
        t = Tuple(id, edge, src_device, init_time, self.origin_device, self.origin_time, self.path, self.stamps)
        t.delay = self.delay
        return t

    def __repr__(self):
        return "Tuple [id:{},type:{},init_time:{}]".\
            format(self.id, self.type, self.init_time)
