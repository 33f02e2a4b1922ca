from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from worldcal.core.errors import UnknownCalendarError
from worldcal.core.ingest import definition_from_dict, variant_set_from_dict
from worldcal.core.types import CalendarDefinition, EventOverrides, VariantOverride
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.events import EventsIndex
from worldcal.engines.recurrence import DEFAULT_HORIZON_YEARS
from worldcal.engines.variants import expand_variants, resolve_default_variant

logger = logging.getLogger(__name__)


class CalendarStore:
    """
    Arena of calendar definitions addressed by id.

    Registering a base also registers every declared variant as "base(variant)".
    Engines are built on first use and cached per id.
    """
    def __init__(self, definitions: Iterable[CalendarDefinition] = ()):
        self._definitions: Dict[str, CalendarDefinition] = {}
        self._bases: Dict[str, CalendarDefinition] = {}
        self._engines: Dict[str, CalendarEngine] = {}
        for d in definitions:
            self.register(d)

    def register(self, definition: CalendarDefinition, *, overwrite: bool = False) -> List[str]:
        """Register a base definition and its declared variants; returns the ids added."""
        if (not overwrite) and (definition.id in self._definitions):
            raise KeyError(f"Calendar '{definition.id}' already exists. Use overwrite=True to replace.")
        self._forget(definition.id)

        self._bases[definition.id] = definition
        self._definitions[definition.id] = definition
        ids = [definition.id]
        for derived in expand_variants(definition):
            self._definitions[derived.id] = derived
            ids.append(derived.id)
        logger.debug("Registered calendar %s with %d variant(s)", definition.id, len(ids) - 1)
        return ids

    def register_dict(self, data: Mapping[str, Any], *, overwrite: bool = False) -> List[str]:
        return self.register(definition_from_dict(data), overwrite=overwrite)

    def register_external_variants(
        self,
        base_id: str,
        variants: Mapping[str, VariantOverride],
        *,
        overwrite: bool = False,
    ) -> List[str]:
        """
        Attach variants shipped apart from their base. They are registered as
        ordinary "base(variant)" calendars but never become the base's default.
        """
        base = self._bases.get(base_id)
        if base is None:
            raise UnknownCalendarError(f"Base calendar '{base_id}' for external variants is not registered")
        ids: List[str] = []
        for derived in expand_variants(base, variants):
            if (not overwrite) and (derived.id in self._definitions):
                raise KeyError(f"Calendar '{derived.id}' already exists. Use overwrite=True to replace.")
            self._engines.pop(derived.id, None)
            self._definitions[derived.id] = derived
            ids.append(derived.id)
        logger.debug("Registered %d external variant(s) for %s", len(ids), base_id)
        return ids

    def register_variant_set(self, data: Mapping[str, Any], *, overwrite: bool = False) -> List[str]:
        base_id, variants = variant_set_from_dict(data)
        return self.register_external_variants(base_id, variants, overwrite=overwrite)

    def _forget(self, base_id: str) -> None:
        prefix = f"{base_id}("
        for cid in [c for c in self._definitions if c == base_id or c.startswith(prefix)]:
            self._definitions.pop(cid, None)
            self._engines.pop(cid, None)
        self._bases.pop(base_id, None)

    # ---------------------------------------------------------
    # Lookup
    # ---------------------------------------------------------

    def __contains__(self, calendar_id: object) -> bool:
        return calendar_id in self._definitions

    def list(self) -> List[str]:
        return sorted(self._definitions)

    def get(self, calendar_id: str) -> CalendarDefinition:
        """Exact lookup, no default-variant substitution."""
        if calendar_id not in self._definitions:
            raise UnknownCalendarError(f"Unknown calendar '{calendar_id}'. Available: {self.list()}")
        return self._definitions[calendar_id]

    def resolve(self, calendar_id: str) -> str:
        return resolve_default_variant(calendar_id, self._bases)

    def definition(self, calendar_id: str) -> CalendarDefinition:
        return self.get(self.resolve(calendar_id))

    def engine(self, calendar_id: str) -> CalendarEngine:
        cid = self.resolve(calendar_id)
        cached = self._engines.get(cid)
        if cached is not None:
            return cached
        return self._engines.setdefault(cid, CalendarEngine(self.get(cid)))

    def events_index(
        self,
        calendar_id: str,
        overrides: Optional[EventOverrides] = None,
        *,
        include_hidden: bool = True,
        horizon_years: int = DEFAULT_HORIZON_YEARS,
    ) -> EventsIndex:
        return EventsIndex(
            self.engine(calendar_id),
            overrides,
            include_hidden=include_hidden,
            horizon_years=horizon_years,
        )
