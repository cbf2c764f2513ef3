"""Permission entity - atomic capability such as ``topic.pin``."""

from dataclasses import dataclass


@dataclass
class Permission:
    """Permission - module.action capability identifier."""

    id: int
    slug: str
    name: str
    module: str
    action: str
    description: str | None = None
    is_system: bool = False
