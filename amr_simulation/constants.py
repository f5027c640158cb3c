from .enums import AMRStatus, ZoneType

# ============================================================
# CONSTANTS
# ============================================================
MAP_WIDTH     = 800     # floor-plan units are drawn 1:1 as pixels
MAP_HEIGHT    = 600
PANEL_WIDTH   = 300
WINDOW_WIDTH  = MAP_WIDTH + PANEL_WIDTH  # 1100 px total
WINDOW_HEIGHT = MAP_HEIGHT               # 600 px
FPS = 30

SPEED_STEPS = [0.5, 1.0, 2.0, 5.0]
DEFAULT_FLEET_SIZE = 3

# Panel color palette
PANEL_BG        = (30, 30, 40)
PANEL_TEXT       = (200, 200, 210)
PANEL_HEADER     = (140, 160, 255)
PANEL_SEPARATOR  = (60, 60, 80)
PANEL_GREEN      = (80, 220, 100)
PANEL_YELLOW     = (230, 200, 60)
PANEL_RED        = (230, 70, 70)

# ============================================================
# COLOURS  (RGB)
# ============================================================
BG_COLOR       = (250, 250, 250)
GRID_DOT_COLOR = (226, 232, 240)
EDGE_COLOR     = (148, 163, 184)
NODE_COLOR     = (100, 116, 139)
LABEL_COLOR    = (35, 35, 35)
HEAT_COLOR     = (239, 68, 68)

ZONE_COLORS = {
    ZoneType.DOCK:       (59, 130, 246),
    ZoneType.PROCESSING: (245, 158, 11),
    ZoneType.STORAGE:    (34, 197, 94),
    ZoneType.CHARGING:   (16, 185, 129),
}

AMR_STATUS_COLORS = {
    AMRStatus.IDLE:      (100, 116, 139),
    AMRStatus.MOVING:    (59, 130, 246),
    AMRStatus.LOADING:   (245, 158, 11),
    AMRStatus.UNLOADING: (139, 92, 246),
    AMRStatus.CHARGING:  (16, 185, 129),
    AMRStatus.ERROR:     (239, 68, 68),
}
AMR_RADIUS = 12

# ============================================================
# MOVEMENT / TIMING  (logical milliseconds)
# ============================================================
TICK_INTERVAL_MS = 50.0     # one movement tick
MOVE_STEP        = 5.0      # floor units per tick at 1x speed
SAFETY_RADIUS    = 30.0     # min distance between two AMR centres
COLLISION_YIELD_TICKS = 40  # blocked ticks before the fleet-order tie-break

LOAD_DURATION_MS      = 2000.0
UNLOAD_DURATION_MS    = 2000.0
STEP_ADVANCE_DELAY_MS = 100.0   # step completion -> next step
START_DELAY_MS        = 100.0   # assignment commit -> first step
AUTO_ASSIGN_DELAY_MS  = 1000.0  # task completion -> next task
PATH_RETRY_DELAY_MS   = 2000.0
MAX_PATH_ATTEMPTS     = 3       # 0 leaves a stalled move step stalled

# Battery
BATTERY_DRAIN_PER_UNIT = 0.005  # percent per floor unit travelled
CHARGE_RATE            = 0.5    # percent per tick while charging
LOW_BATTERY_THRESHOLD  = 20.0

# ============================================================
# GRAPH / ZONES
# ============================================================
MAX_SEARCH_ITERATIONS = 100     # BFS dequeue cap
DEFAULT_DOCK_NODE       = "L1"
DEFAULT_PROCESSING_NODE = "M3"
DEFAULT_STORAGE_NODE    = "B3"
CHARGE_NODE             = "CHARGE"

INITIAL_POSITIONS = [
    (80.0, 100.0),   # L1 - Dock entrance
    (80.0, 200.0),   # L2 - Dock area
    (200.0, 100.0),  # T1 - Top aisle
    (400.0, 300.0),  # M2 - Central junction
    (600.0, 300.0),  # R3 - Right aisle
]
FALLBACK_POSITION = (50.0, 50.0)

# ============================================================
# LOGS / REPORT
# ============================================================
LOG_CAPACITY       = 50
REPORT_LOG_ENTRIES = 20
CARGO_WEIGHT_MIN   = 100        # kg
CARGO_WEIGHT_MAX   = 599
