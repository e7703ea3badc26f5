from .emitter import (
    FACING_TO_DIRECTION,
    BlueprintEmitter,
    emit_blueprint,
    emit_blueprint_string,
)

__all__ = [
    # Main API
    "BlueprintEmitter",
    "emit_blueprint",
    "emit_blueprint_string",
    "FACING_TO_DIRECTION",
]
