"""Flatten the nested module forest of a Unity release into modules.json records."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from unity_modules.exceptions import ModuleDataError
from unity_modules.models import Module, ModuleOnline, SizeValue

logger = logging.getLogger(__name__)

# Upstream Unity Hub policy, not derivable from API data.
SELECTED_MODULE_ID = "android"
SYNC_PARENT_ID = "android-sdk-ndk-tools"

ForestNode = ModuleOnline | Mapping[str, Any]


def _size(size: SizeValue | None) -> int | float:
    if size is None or not size.value:
        return 0
    return size.value


def build_module(node: ModuleOnline, parent_id: str = "") -> Module:
    """Build the flat record for a single node.

    Args:
        node: Module node from the API
        parent_id: id of the immediate parent, "" for top-level modules

    Returns:
        Module with copied fields defaulted and derived fields filled in.
    """
    rename = node.extracted_path_rename
    rename_copy = rename.model_dump(by_alias=True, exclude_unset=True) if rename is not None else None
    # Only the first entry is projected; a null first entry projects to ""
    first_eula = node.eula[0] if node.eula else None

    return Module(
        url=node.url or "",
        integrity=node.integrity or "",
        type=node.type or "",
        id=node.id or "",
        name=node.name or "",
        slug=node.slug or "",
        description=node.description or "",
        category=node.category or "",
        download_size=_size(node.download_size),
        installed_size=_size(node.installed_size),
        required=bool(node.required),
        hidden=bool(node.hidden),
        extracted_path_rename=rename_copy or None,
        pre_selected=bool(node.pre_selected),
        destination=node.destination or None,
        eula=[e.model_dump(exclude_unset=True) if e is not None else None for e in node.eula] if node.eula else None,
        sub_modules=[],
        download_url=node.url or "",
        visible=not node.hidden,
        selected=node.id == SELECTED_MODULE_ID,
        sync=parent_id if parent_id == SYNC_PARENT_ID else "",
        parent=parent_id,
        eula_url1=(first_eula.url or "") if first_eula else "",
        eula_label1=(first_eula.label or "") if first_eula else "",
        eula_message=(first_eula.message or "") if first_eula else "",
        rename_to=(rename.to or "") if rename else "",
        rename_from=(rename.from_ or "") if rename else "",
        preselected=bool(node.pre_selected),
    )


def _as_node(raw: Any) -> ModuleOnline:
    if isinstance(raw, ModuleOnline):
        return raw
    try:
        return ModuleOnline.model_validate(raw)
    except ValidationError as e:
        raise ModuleDataError(
            f"Invalid module data ({e.error_count()} error(s)): {e.errors()[0]['msg']}",
            code="INVALID_MODULE_DATA",
        ) from e


def _check_forest(forest: Any) -> None:
    if isinstance(forest, (str, bytes)) or not isinstance(forest, Sequence):
        raise ModuleDataError(
            f"Module forest must be a list, got {type(forest).__name__}",
            code="INVALID_MODULE_DATA",
        )


def flatten_modules(forest: Sequence[ForestNode]) -> list[Module]:
    """Flatten a module forest into an ordered list of records.

    Every node at every depth yields exactly one record, emitted before
    its children. Hierarchy survives only through Module.parent. Nodes
    are validated one at a time, so nesting depth is unbounded.

    Args:
        forest: Top-level modules, as ModuleOnline or raw API mappings

    Returns:
        Flat list of Module records in pre-order.

    Raises:
        ModuleDataError: forest or a node has the wrong fundamental type
    """
    _check_forest(forest)
    modules: list[Module] = []
    # (raw node, parent id); siblings are pushed reversed so they pop in order
    stack: list[tuple[Any, str]] = [(raw, "") for raw in reversed(forest)]
    while stack:
        raw, parent_id = stack.pop()
        node = _as_node(raw)
        modules.append(build_module(node, parent_id))
        if node.sub_modules:
            current_id = node.id or ""
            stack.extend((child, current_id) for child in reversed(node.sub_modules))
    logger.debug("Flattened %d module(s) from %d top-level module(s)", len(modules), len(forest))
    return modules


def count_nodes(forest: Sequence[ForestNode]) -> int:
    """Count every node of a module forest, at every depth."""
    total = 0
    stack = list(forest)
    while stack:
        node = stack.pop()
        total += 1
        children = node.sub_modules if isinstance(node, ModuleOnline) else node.get("subModules")
        stack.extend(children or [])
    return total
