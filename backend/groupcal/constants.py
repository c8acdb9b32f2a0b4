"""
Permission and component bitmasks shared by calendars and backends.
"""
from enum import IntFlag


class Permissions(IntFlag):
    READ = 1
    UPDATE = 2
    CREATE = 4
    DELETE = 8
    SHARE = 16
    ALL = 31


class ObjectType(IntFlag):
    EVENT = 1
    JOURNAL = 2
    TODO = 4
    ALL = 7


# iCalendar component names, used when talking to remote CalDAV servers
COMPONENT_NAMES = {
    ObjectType.EVENT: "VEVENT",
    ObjectType.JOURNAL: "VJOURNAL",
    ObjectType.TODO: "VTODO",
}
