"""Router modules exposed for convenient imports."""

from . import (
    auth,
    contacts,
    dashboard,
    equipment,
    exercises,
    healthz,
    notifications,
    processes,
    readyz,
    reports,
    settings,
    users,
    workshops,
)

__all__ = [
    "auth",
    "contacts",
    "dashboard",
    "equipment",
    "exercises",
    "healthz",
    "notifications",
    "processes",
    "readyz",
    "reports",
    "settings",
    "users",
    "workshops",
]
