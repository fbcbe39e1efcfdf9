import logging
import os
from typing import Optional

from tale.application.services.event_bus import EventBus
from tale.application.services.game_service import GameService
from tale.application.services.save_service import SaveService
from tale.application.services.script_registry import default_script_registry
from tale.domain.events import HourChanged, WaitInterrupted
from tale.domain.models.game import DEFAULT_LOCATION, GameState
from tale.domain.models.player import Player
from tale.domain.repositories import SaveRepository
from tale.infrastructure.inmemory.demo_world import build_demo_definitions, register_demo_scripts
from tale.infrastructure.inmemory.inmemory_save_repo import InMemorySaveRepository


logger = logging.getLogger(__name__)

DEFAULT_SAVE_SLOT = "autosave"
NEW_GAME_SCRIPT = "startGame"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in {"1", "true", "yes"}


def default_save_slot() -> str:
    return os.getenv("TALE_SAVE_SLOT", "").strip() or DEFAULT_SAVE_SLOT


def new_game_state(player_name: Optional[str] = None) -> GameState:
    name = (player_name or os.getenv("TALE_PLAYER_NAME", "")).strip()
    player = Player(name=name) if name else Player()
    return GameState(current_location=DEFAULT_LOCATION, player=player)


def _register_session_handlers(event_bus: EventBus) -> None:
    def _log_hour(event: HourChanged) -> None:
        logger.debug("Hour changed to %s (%s crossed)", event.hour_after, event.hours_crossed)

    def _log_interrupt(event: WaitInterrupted) -> None:
        logger.debug("Wait interrupted by %s after %s minutes", event.source, event.minutes_waited)

    event_bus.subscribe(HourChanged, _log_hour)
    event_bus.subscribe(WaitInterrupted, _log_interrupt)


def create_game_service(player_name: Optional[str] = None) -> GameService:
    """Build a session on the demo world and run its opening script."""
    registry = default_script_registry()
    register_demo_scripts(registry)
    definitions = build_demo_definitions()
    event_bus = EventBus()
    _register_session_handlers(event_bus)

    game = GameService(
        new_game_state(player_name),
        registry,
        definitions,
        event_bus=event_bus,
        debug=_env_flag("TALE_DEBUG"),
    )
    start_new_game(game)
    return game


def start_new_game(game: GameService) -> None:
    game.move_to_location(game.current_location)
    game.location.discovered = True
    game.location.num_visits += 1
    for npc_id in game.definitions.npcs.list_ids():
        game.get_npc(npc_id)
    game.update_npcs_present()
    game.recalculate()
    if NEW_GAME_SCRIPT in game.registry:
        game.run(NEW_GAME_SCRIPT)


def _build_sql_save_repository(database_url: str) -> SaveRepository:
    from tale.infrastructure.db.sql.connection import build_session_factory
    from tale.infrastructure.db.sql.save_repo import SqlSaveRepository

    return SqlSaveRepository(build_session_factory(database_url))


def create_save_repository() -> SaveRepository:
    database_url = os.getenv("TALE_DATABASE_URL", "").strip()
    if database_url:
        try:
            return _build_sql_save_repository(database_url)
        except Exception as exc:  # pragma: no cover - best-effort fallback
            logger.warning("Save database unavailable, falling back to in-memory saves: %s", exc)
            print(f"Save database unavailable, falling back to in-memory. Reason: {exc}")
    return InMemorySaveRepository()


def create_save_service() -> SaveService:
    return SaveService(create_save_repository())
