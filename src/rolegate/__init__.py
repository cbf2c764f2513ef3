"""RoleGate - role-based authorization engine for the forum backend."""

__version__ = "0.1.0"
