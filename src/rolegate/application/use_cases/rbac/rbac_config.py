"""RBAC catalog for administration screens."""

from dataclasses import dataclass
from typing import Any

from rolegate.domain import catalog


@dataclass
class RbacConfig:
    modules: list[str]
    common_actions: list[str]
    special_actions: dict[str, list[str]]
    condition_types: dict[str, dict[str, Any]]
    permission_conditions: dict[str, list[str]]


class GetRbacConfigUseCase:
    """Modules, actions and condition types an administrator can choose from.

    ``permission_conditions`` covers every stored permission, custom ones
    included.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> RbacConfig:
        async with self._uow_factory() as uow:
            permissions = await uow.permissions.list_all()
        slugs = sorted({p.slug for p in permissions} | set(catalog.PERMISSION_CONDITIONS))
        return RbacConfig(
            modules=list(catalog.MODULES),
            common_actions=list(catalog.COMMON_ACTIONS),
            special_actions={m: list(a) for m, a in catalog.MODULE_SPECIAL_ACTIONS.items()},
            condition_types=dict(catalog.CONDITION_TYPES),
            permission_conditions={s: list(catalog.condition_keys_for(s)) for s in slugs},
        )
