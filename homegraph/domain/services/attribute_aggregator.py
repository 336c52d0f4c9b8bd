"""Domain service merging per-trait attributes and state into one document."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable

from homegraph.domain.entities.errors import AttributeCollision
from homegraph.domain.entities.traits import Trait


@dataclass(frozen=True)
class AttributeDocument:
    """Combined view of a device's static attributes and current state."""

    attributes: Dict[str, Any] = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)


def _concatenate(
    traits: Iterable[Trait], section: Callable[[Trait], Dict[str, Any]]
) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    owners: Dict[str, str] = {}
    for trait in traits:
        for key, value in section(trait).items():
            if key in owners:
                raise AttributeCollision(key, owners[key], trait.name)
            owners[key] = trait.name
            merged[key] = value
    return merged


def merge(traits: Iterable[Trait]) -> AttributeDocument:
    """Merge the attribute and state key sets of ``traits`` in order.

    The result depends only on the traits passed in, so callers rebuild it
    from scratch after every state change instead of patching it.

    Raises:
        AttributeCollision: If two traits contribute the same key.
    """

    traits = list(traits)
    return AttributeDocument(
        attributes=_concatenate(traits, lambda trait: trait.attributes()),
        state=_concatenate(traits, lambda trait: trait.state()),
    )
