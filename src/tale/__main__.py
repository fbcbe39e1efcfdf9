from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from tale.bootstrap import create_game_service, create_save_service, default_save_slot
from tale.presentation.game_loop import run_game_loop


def _configure_logging() -> None:
    level_name = os.getenv("TALE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- In game: type the number of a choice and press ENTER; Q quits.")
    print("- Startup issues: verify TALE_DATABASE_URL or unset it to keep saves in memory.")


def main():
    load_dotenv()
    _configure_logging()
    try:
        game_service = create_game_service()
        save_service = create_save_service()
        run_game_loop(game_service, save_service, default_save_slot())
    except (KeyboardInterrupt, EOFError):
        print("\nSession ended.")
    except Exception as exc:
        logging.getLogger(__name__).debug("Session crashed", exc_info=True)
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()
