"""Block type registry."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace

from .contracts import BlockType, RendererDescriptor
from .errors import BlockError, DuplicateTypeError, UnknownTypeError


@dataclass
class BlockTypeRegistry:
    """In-memory registry of renderer descriptors, keyed by block type."""

    _descriptors: dict[str, RendererDescriptor] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict)
    _frozen: bool = False

    def register(self, descriptor: RendererDescriptor) -> None:
        if self._frozen:
            msg = f"cannot register '{descriptor.block_type}': registry is frozen."
            raise BlockError(msg)

        block_type = descriptor.block_type.strip()
        if not block_type:
            msg = "block_type cannot be empty."
            raise BlockError(msg)
        if block_type in self._descriptors or block_type in self._aliases:
            raise DuplicateTypeError(block_type)

        alias_keys: list[str] = []
        for alias in descriptor.aliases:
            alias_key = alias.strip()
            if not alias_key:
                msg = "block alias cannot be empty."
                raise BlockError(msg)
            if alias_key == block_type:
                msg = f"alias '{alias_key}' duplicates block type '{block_type}'."
                raise BlockError(msg)
            if alias_key in self._descriptors or alias_key in self._aliases or alias_key in alias_keys:
                raise DuplicateTypeError(alias_key, alias=True)
            alias_keys.append(alias_key)

        if block_type != descriptor.block_type or tuple(alias_keys) != descriptor.aliases:
            descriptor = replace(descriptor, block_type=block_type, aliases=tuple(alias_keys))
        self._descriptors[block_type] = descriptor
        for alias_key in alias_keys:
            self._aliases[alias_key] = block_type

    def register_many(self, descriptors: Iterable[RendererDescriptor]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    @contextmanager
    def staged(self) -> Iterator[BlockTypeRegistry]:
        """Undo every registration made inside the block if it raises."""
        descriptors = dict(self._descriptors)
        aliases = dict(self._aliases)
        try:
            yield self
        except BaseException:
            self._descriptors = descriptors
            self._aliases = aliases
            raise

    def freeze(self) -> None:
        """Reject further registrations; lookups stay available."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve_id(self, block_type: BlockType) -> str:
        if block_type in self._descriptors:
            return block_type
        if block_type in self._aliases:
            return self._aliases[block_type]
        raise UnknownTypeError(block_type, valid=self.block_types())

    def lookup(self, block_type: BlockType) -> RendererDescriptor:
        return self._descriptors[self.resolve_id(block_type)]

    def list_descriptors(self) -> tuple[RendererDescriptor, ...]:
        return tuple(self._descriptors.values())

    def block_types(self) -> tuple[str, ...]:
        return tuple(self._descriptors)

    def __contains__(self, block_type: object) -> bool:
        return block_type in self._descriptors or block_type in self._aliases
