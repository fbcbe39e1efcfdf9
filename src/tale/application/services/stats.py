from __future__ import annotations

from typing import Any, Dict

from tale.domain.models.player import METER_NAMES, STAT_NAMES


def recalculate_stats(game: Any) -> Dict[str, float]:
    """Rebuild derived stats from basestats, active cards and worn items.

    Meters are clamped to 0..100 after all modifiers ran.
    """
    player = game.player
    stats: Dict[str, float] = {name: player.basestats.get(name, 0) for name in STAT_NAMES}
    for name, value in player.basestats.items():
        stats.setdefault(name, value)

    for card in list(player.cards):
        definition = game.definitions.cards.require(card.id)
        if definition.calc_stats is not None:
            definition.calc_stats(game, card, stats)

    for item_id in sorted(set(player.worn.values())):
        definition = game.definitions.items.require(item_id)
        if definition.calc_stats is not None:
            definition.calc_stats(game, item_id, stats)

    for name in METER_NAMES:
        stats[name] = max(0, min(100, stats.get(name, 0)))
    player.stats = stats
    return stats
