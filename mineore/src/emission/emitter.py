"""
Blueprint emission for placement runs.

Converts placeholder markers into Factorio entities using the
factorio-draftsman library so a planned layout can be imported in game as a
blueprint string.
"""

from __future__ import annotations

import json
from typing import Dict, Iterable, Optional

from draftsman.blueprintable import Blueprint
from draftsman.classes.entity import Entity
from draftsman.constants import Direction
from draftsman.entity import new_entity  # Use draftsman's factory

from mineore.src.common.constants import DEFAULT_CONFIG, STAGE_EMISSION, PlannerConfig
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.geometry import Facing
from mineore.src.placement.markers import ModuleRequest, PlaceholderMarker

FACING_TO_DIRECTION: Dict[Facing, Direction] = {
    Facing.NORTH: Direction.NORTH,
    Facing.EAST: Direction.EAST,
    Facing.SOUTH: Direction.SOUTH,
    Facing.WEST: Direction.WEST,
}


class BlueprintEmitter:
    """Materialize placeholder markers into a Factorio blueprint."""

    def __init__(
        self,
        diagnostics: PlannerDiagnostics,
        config: PlannerConfig = DEFAULT_CONFIG,
    ) -> None:
        self.diagnostics = diagnostics
        self.config = config
        self.blueprint = Blueprint()

    def emit(
        self,
        markers: Iterable[PlaceholderMarker],
        label: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Blueprint:
        """Emit a blueprint holding one entity per marker, in marker order."""
        self.blueprint = Blueprint()
        self.blueprint.label = label or self.config.default_blueprint_label
        self.blueprint.description = description or self.config.default_blueprint_description
        self.blueprint.version = (2, 0)

        for marker in markers:
            entity = self.create_entity(marker)
            if entity is None:
                continue
            self.blueprint.entities.append(entity, copy=False)

        return self.blueprint

    def create_entity(self, marker: PlaceholderMarker) -> Optional[Entity]:
        """Create a draftsman entity for ``marker``, or None if draftsman rejects it."""
        try:
            entity = new_entity(marker.name)
        except Exception as exc:  # pragma: no cover - draftsman errors
            self.diagnostics.error(
                f"Failed to instantiate entity '{marker.name}': {exc}",
                stage=STAGE_EMISSION,
                position=marker.position.as_tuple(),
            )
            return None

        if marker.direction is not None:
            entity.direction = FACING_TO_DIRECTION[marker.direction]

        io_type = marker.properties.get("io_type")
        if io_type is not None:
            self._set_io_type(entity, io_type, marker)

        if marker.quality != self.config.default_quality:
            try:
                entity.quality = marker.quality
            except Exception as exc:  # pragma: no cover - draftsman errors
                self.diagnostics.warning(
                    f"Could not set quality '{marker.quality}' on '{marker.name}': {exc}",
                    stage=STAGE_EMISSION,
                )

        for request in marker.module_requests:
            self._request_modules(entity, request, marker)

        entity.position = marker.position.as_tuple()
        return entity

    def _set_io_type(self, entity: Entity, io_type: str, marker: PlaceholderMarker) -> None:
        # Underground belts call it io_type from draftsman 2.0 on, type before
        attribute = "io_type" if hasattr(entity, "io_type") else "type"
        try:
            setattr(entity, attribute, io_type)
        except Exception as exc:  # pragma: no cover - draftsman errors
            self.diagnostics.warning(
                f"Could not set io type '{io_type}' on '{marker.name}': {exc}",
                stage=STAGE_EMISSION,
            )

    def _request_modules(
        self, entity: Entity, request: ModuleRequest, marker: PlaceholderMarker
    ) -> None:
        try:
            if hasattr(entity, "request_modules"):
                entity.request_modules(request.name, range(request.count), request.quality)
            else:
                entity.set_item_request(request.name, request.count)
        except Exception as exc:  # pragma: no cover - draftsman errors
            self.diagnostics.warning(
                f"Could not request {request.count} x '{request.name}' for '{marker.name}': {exc}",
                stage=STAGE_EMISSION,
            )


def emit_blueprint(
    markers: Iterable[PlaceholderMarker],
    label: Optional[str] = None,
    description: Optional[str] = None,
    diagnostics: Optional[PlannerDiagnostics] = None,
) -> Blueprint:
    """Convenience wrapper returning a blueprint for ``markers``."""
    emitter = BlueprintEmitter(diagnostics or PlannerDiagnostics())
    return emitter.emit(markers, label=label, description=description)


def emit_blueprint_string(
    markers: Iterable[PlaceholderMarker],
    label: Optional[str] = None,
    description: Optional[str] = None,
    diagnostics: Optional[PlannerDiagnostics] = None,
    use_json: bool = False,
) -> str:
    """Blueprint string (or JSON text with ``use_json``) for ``markers``."""
    blueprint = emit_blueprint(markers, label, description, diagnostics)
    if use_json:
        return json.dumps(blueprint.to_dict())
    return blueprint.to_string()
