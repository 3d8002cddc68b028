# inter-arrival distributions for sensors

import random


class Distribution(object):
    def __init__(self, seed=None):
        self.rng = random.Random(seed)

    def next_interval(self):
        raise NotImplementedError

    def mean_interval(self):
        raise NotImplementedError

    # usable wherever a callable(generator) is expected
    def __call__(self, obj=None):
        return self.next_interval()


class Deterministic_Distribution(Distribution):
    def __init__(self, value):
        Distribution.__init__(self)
        self.value = value

    def next_interval(self):
        return self.value

    def mean_interval(self):
        return self.value

    def __repr__(self):
        return "Deterministic({})".format(self.value)


class Uniform_Distribution(Distribution):
    def __init__(self, low, high, seed=None):
        Distribution.__init__(self, seed)
        self.low = low
        self.high = high

    def next_interval(self):
        return self.rng.uniform(self.low, self.high)

    def mean_interval(self):
        return (self.low + self.high) / 2.0

    def __repr__(self):
        return "Uniform({}, {})".format(self.low, self.high)


class Normal_Distribution(Distribution):
    def __init__(self, mean, stdev, seed=None):
        Distribution.__init__(self, seed)
        self.mean = mean
        self.stdev = stdev

    def next_interval(self):
        # negative waits make no sense, resample
        while(True):
            v = self.rng.gauss(self.mean, self.stdev)
            if(v >= 0):
                return v

    def mean_interval(self):
        return self.mean

    def __repr__(self):
        return "Normal({}, {})".format(self.mean, self.stdev)


class Exponential_Distribution(Distribution):
    def __init__(self, mean, seed=None):
        Distribution.__init__(self, seed)
        self.mean = mean

    def next_interval(self):
        return self.rng.expovariate(1.0 / self.mean)

    def mean_interval(self):
        return self.mean

    def __repr__(self):
        return "Exponential({})".format(self.mean)


def create_distribution(spec):
    # spec: number (deterministic) or dict {"type": ..., params}
    if(isinstance(spec, (int, float))):
        return Deterministic_Distribution(spec)
    if(isinstance(spec, Distribution) or callable(spec)):
        return spec
    kind = spec.get("type", "deterministic")
    seed = spec.get("seed")
    if(kind == "deterministic"):
        return Deterministic_Distribution(spec["value"])
    elif(kind == "uniform"):
        return Uniform_Distribution(spec["low"], spec["high"], seed)
    elif(kind == "normal"):
        return Normal_Distribution(spec["mean"], spec["stdev"], seed)
    elif(kind == "exponential"):
        return Exponential_Distribution(spec["mean"], seed)
    raise ValueError("Unknown distribution type: {}".format(kind))
