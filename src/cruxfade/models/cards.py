"""Card model.

Each card instance carries its own ``effect_key``; the id only identifies
the instance, so two cards may share an effect while staying distinct in
hand and discard.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cruxfade.models.enums import CardType, EffectKind


class Card(BaseModel):
    """A playable card instance.

    Attributes:
        id: Unique instance id.
        name: Display name.
        type: Card category.
        effect_key: Key of the effect resolved when the card is played.
        description: Rules text.
        owner_id: Party member that contributed the card, if any.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str
    name: str
    type: CardType
    effect_key: str
    description: str = ""
    owner_id: str | None = Field(default=None, description="Contributing party member")

    @property
    def effect(self) -> EffectKind | None:
        """The effect to resolve, or None for keys the engine does not know."""
        try:
            return EffectKind(self.effect_key)
        except ValueError:
            return None


__all__ = ["Card"]
