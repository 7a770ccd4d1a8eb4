"""Error types raised by the block engine."""

from __future__ import annotations


class BlockError(ValueError):
    """Base class for block engine failures."""


class DuplicateTypeError(BlockError):
    """Two renderers claimed the same block type or alias."""

    def __init__(self, block_type: str, *, alias: bool = False) -> None:
        self.block_type = block_type
        kind = "block alias" if alias else "block type"
        super().__init__(f"{kind} '{block_type}' is already registered.")


class UnknownTypeError(BlockError):
    """No renderer is registered for a block type."""

    def __init__(self, block_type: str, *, valid: tuple[str, ...] = ()) -> None:
        self.block_type = block_type
        msg = f"unknown block type '{block_type}'."
        if valid:
            msg = f"{msg} Valid types: {', '.join(sorted(valid))}."
        super().__init__(msg)


class _BlockHookError(BlockError):
    stage = "render"

    def __init__(self, block_type: str, block_id: str, reason: object) -> None:
        self.block_type = block_type
        self.block_id = block_id
        super().__init__(
            f"failed to {self.stage} block '{block_id}' of type '{block_type}': {reason}"
        )


class LoadError(_BlockHookError):
    """A renderer's load hook failed."""

    stage = "load"


class RenderError(_BlockHookError):
    """A renderer's execute hook failed."""

    stage = "render"


class BlockLookupError(BlockError):
    """A block referenced by name could not be found."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no block named '{name}'.")
