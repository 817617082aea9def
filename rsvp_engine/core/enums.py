from enum import Enum


class Attendance(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


class InviteStatus(str, Enum):
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class HostingMethod(str, Enum):
    LOCAL = "local"
    EXTERNALLY_HOSTED = "externally-hosted"
