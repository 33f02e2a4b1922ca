"""
worldcal.engines.variants
-------------------------
Derivation of variant calendars from a base definition.

A variant is produced by copy-then-patch: every changed component is rebuilt
with dataclasses.replace and the base definition is never touched. The derived
id is "base(variant)".
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from worldcal.core.types import CalendarDefinition, VariantOverride

logger = logging.getLogger(__name__)


def variant_id(base_id: str, key: str) -> str:
    return f"{base_id}({key})"

def has_variant_suffix(calendar_id: str) -> bool:
    return "(" in calendar_id and ")" in calendar_id

def split_variant_id(calendar_id: str) -> Tuple[str, Optional[str]]:
    """'golarion(imperial)' -> ('golarion', 'imperial'); bare ids return (id, None)."""
    if not has_variant_suffix(calendar_id):
        return calendar_id, None
    base, _, rest = calendar_id.partition("(")
    return base, rest.rsplit(")", 1)[0]


def merge_date_formats(base: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow merge; the nested 'widgets' table is merged one level deeper."""
    merged: Dict[str, Any] = {**base, **patch}
    base_widgets = base.get("widgets")
    patch_widgets = patch.get("widgets")
    if isinstance(base_widgets, Mapping) or isinstance(patch_widgets, Mapping):
        merged["widgets"] = {**(base_widgets or {}), **(patch_widgets or {})}
    return merged


def apply_variant(base: CalendarDefinition, key: str, override: VariantOverride) -> CalendarDefinition:
    """
    Derive the variant `key` of `base`.

    year_offset sets the new epoch; current_year (and the world-time years when
    present) move by the same delta so "now" keeps its place in history.
    Month/weekday patches address entries by name; an unknown name is ignored.
    """
    year = base.year
    world_time = base.world_time
    if override.year_offset is not None:
        delta = override.year_offset - base.year.epoch
        year = replace(year, epoch=year.epoch + delta, current_year=year.current_year + delta)
        if world_time is not None:
            world_time = replace(
                world_time,
                epoch_year=world_time.epoch_year + delta,
                current_year=world_time.current_year + delta,
            )
    if override.year:
        year = replace(year, **dict(override.year))

    months = tuple(
        replace(m, **dict(override.months[m.name])) if m.name in override.months else m
        for m in base.months
    )
    weekdays = tuple(
        replace(w, **dict(override.weekdays[w.name])) if w.name in override.weekdays else w
        for w in base.weekdays
    )

    changes: Dict[str, Any] = dict(
        id=variant_id(base.id, key),
        name=f"{base.label} ({override.name})",
        year=year,
        world_time=world_time,
        months=months,
        weekdays=weekdays,
        variants={},
    )
    if override.date_formats:
        changes["date_formats"] = merge_date_formats(base.date_formats, override.date_formats)
    if override.moons is not None:
        changes["moons"] = override.moons
    if override.canonical_hours is not None:
        changes["canonical_hours"] = override.canonical_hours

    derived = replace(base, **changes)
    logger.debug("Derived calendar variant %s", derived.id)
    return derived


def expand_variants(
    base: CalendarDefinition,
    variants: Optional[Mapping[str, VariantOverride]] = None,
) -> List[CalendarDefinition]:
    """One derived definition per override, in the mapping's insertion order."""
    source = base.variants if variants is None else variants
    return [apply_variant(base, key, ov) for key, ov in source.items()]


def default_variant(base: CalendarDefinition) -> Optional[str]:
    for key, ov in base.variants.items():
        if ov.default:
            return key
    return None


def resolve_default_variant(calendar_id: str, bases: Mapping[str, CalendarDefinition]) -> str:
    """
    Substitute the flagged default variant for a bare base id.
    Ids already carrying a "(variant)" suffix come back unchanged.
    """
    if has_variant_suffix(calendar_id):
        return calendar_id
    base = bases.get(calendar_id)
    if base is None:
        return calendar_id
    key = default_variant(base)
    return calendar_id if key is None else variant_id(calendar_id, key)
