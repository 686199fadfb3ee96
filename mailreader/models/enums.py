import enum


class ScanStatus(str, enum.Enum):
    idle = "idle"
    connecting = "connecting"
    scanning = "scanning"
    completed = "completed"
    cancelled = "cancelled"
    error = "error"
