from typing import List, Optional

from mineore.src.common.constants import STAGE_UNITS
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.prototypes import UnitSpec
from mineore.src.common.settings import PlannerSettings
from mineore.src.layout.layout_plan import GridLayout

from .conflict_resolver import ConflictResolver
from .markers import ModuleRequest, PlaceholderMarker, PlacementReport, StageResult

"""Turn calculator entries into unit markers."""


def module_requests(
    module: Optional[str], count: Optional[int], slots: int, quality: str
) -> List[ModuleRequest]:
    """Requests for ``module``; ``count`` defaults to and is capped by ``slots``."""
    if not module or slots <= 0:
        return []
    wanted = slots if count is None else min(count, slots)
    if wanted <= 0:
        return []
    return [ModuleRequest(name=module, count=wanted, quality=quality)]


class UnitPlacer:
    """Places one unit marker per placement entry, in calculator order."""

    def __init__(self, resolver: ConflictResolver, diagnostics: PlannerDiagnostics):
        self.resolver = resolver
        self.diagnostics = diagnostics

    def place(
        self,
        layout: GridLayout,
        unit: UnitSpec,
        settings: PlannerSettings,
        report: PlacementReport,
    ) -> StageResult:
        quality = settings.quality_for(None)
        requests = module_requests(
            settings.unit_module, settings.unit_module_count, unit.module_slots, quality
        )
        if settings.unit_module and not requests:
            self.diagnostics.warning(
                f"'{unit.name}' has no module slots, ignoring '{settings.unit_module}'",
                stage=STAGE_UNITS,
            )

        for entry in layout.entries:
            marker = PlaceholderMarker(
                name=unit.name,
                position=entry.position,
                direction=entry.direction,
                quality=quality,
                footprint=(unit.width, unit.height),
                module_requests=list(requests),
                properties={"side": entry.side, "pair_index": entry.pair_index},
                stage=STAGE_UNITS,
            )
            outcome = self.resolver.place(marker)
            report.record(marker, outcome.ok)
            if not outcome.ok:
                self.diagnostics.debug(
                    f"Skipped {unit.name} ({outcome.value})",
                    stage=STAGE_UNITS,
                    position=entry.position.as_tuple(),
                )

        return report.stage(STAGE_UNITS)
