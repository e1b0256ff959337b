"""
Notekeep Backend: Health Report Schema
=======================================

What:  The body returned by GET /health.
How:   Python attributes are snake_case; the JSON keys are camelCase
       (memoryUsage, heapUsed, isConnected, actionableMessage) through a
       pydantic alias generator. Dump with `by_alias=True`.

Example (unhealthy):
    {
        "status": "unhealthy",
        "message": "Application is not connected to the database",
        "uptime": "3 minutes 12 seconds",
        "memoryUsage": {"rss": "48.20 MB", "heapTotal": "410.00 MB", ...},
        "memoryWarnings": {"rss": "Memory usage is within acceptable limits.", ...},
        "database": {"state": "disconnected", "isConnected": false, ...},
        "timestamp": "2024-01-15T12:00:00.000Z",
        "actionableMessage": "Please review the warnings and take ..."
    }
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MemoryUsage(_CamelModel):
    rss: str
    heap_total: str
    heap_used: str
    external: str


class MemoryWarnings(_CamelModel):
    rss: str
    heap_used: str


class DatabaseStatus(_CamelModel):
    state: str
    is_connected: bool
    suggestion: str


class HealthReport(_CamelModel):
    """Computed fresh on every call; never cached or stored."""

    status: str
    message: str
    uptime: str
    memory_usage: MemoryUsage
    memory_warnings: MemoryWarnings
    database: DatabaseStatus
    timestamp: str
    actionable_message: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        return self.status == "healthy"
