from enum import Enum


class AMRStatus(Enum):
    IDLE      = "idle"
    MOVING    = "moving"
    LOADING   = "loading"
    UNLOADING = "unloading"
    CHARGING  = "charging"
    ERROR     = "error"         # mirrors a fault; see AMR.healthy


class StepAction(Enum):
    MOVE   = "move"
    LOAD   = "load"
    UNLOAD = "unload"
    WAIT   = "wait"


class WorkflowType(Enum):
    INBOUND  = "inbound"        # dock -> processing -> storage -> dock
    STORAGE  = "storage"
    CHARGING = "charging"


class TaskStatus(Enum):
    PENDING   = "pending"
    ACTIVE    = "active"
    COMPLETED = "completed"
    FAILED    = "failed"


class ZoneType(Enum):
    DOCK       = "dock"
    PROCESSING = "processing"
    STORAGE    = "storage"
    CHARGING   = "charging"


class CargoType(Enum):
    PALLET = "pallet"
    BOX    = "box"


class CargoStatus(Enum):
    WAITING    = "waiting"
    LOADING    = "loading"
    IN_TRANSIT = "in_transit"   # location is the carrying AMR's id
    STORED     = "stored"       # location is a node id
    UNLOADING  = "unloading"


class LogType(Enum):
    INFO    = "info"
    WARNING = "warning"
    ERROR   = "error"
