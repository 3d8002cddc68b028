### Utilitary Functions/Classes

import time
from enum import Enum

DEBUG_SET = []
simlog = None

# open the simulation log file (lazily, on first use if not called)
def open_log(filename=None):
    global simlog
    if(simlog is not None):
        simlog.close()
    if(filename is None):
        filename = "simlog" + time.strftime("%H%M%S") + ".log"
    simlog = open(filename, "w")
    return simlog

def close_log():
    global simlog
    if(simlog is not None):
        simlog.close()
    simlog = None

# select which object classes print (see attributes.PRINTABLE_CLASS_NUMBERS)
def set_debug(debug):
    del DEBUG_SET[:]
    val = 1
    while(val <= debug):
        if(debug & val):
            DEBUG_SET.append(val)
        val *= 2

def dprint(*text, objn=0):
    if(objn == 0 or objn in DEBUG_SET):
        if(simlog is None):
            open_log()
        print("[", time.strftime("%H:%M:%S"),"]:", end="", file=simlog)
        for t in text:
            print("", t, end="", file=simlog)
        print("", file=simlog)

# Enums:

class Event_Type(Enum):
    SENSOR_Emit = 1
    TUPLE_Arrive = 2
    MODULE_Process = 3
    ACTUATOR_Consume = 4
    TUPLE_Dropped = 5
    DEVICE_Busy = 6
    DEVICE_Idle = 7
    LOOP_Completed = 8

class End_Sim(Enum):
    ByTimeCount = 1
    ByEmissionCount = 2
    ByLoopCount = 3

# tuple direction along the tree
class Direction(Enum):
    UP = 1
    DOWN = 2

class Edge_Kind(Enum):
    SENSOR = 1
    MODULE = 2
    ACTUATOR = 3
