"""Конфигурация приложения."""
import os
from functools import lru_cache


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@lru_cache
def get_config():
    return type("Config", (), {
        "debug": _flag("DEBUG", "0"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "3000")),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        # пауза между концом партии и сбросом доски, чтобы клиенты успели показать "game over"
        "reset_delay_seconds": float(os.environ.get("RESET_DELAY_SECONDS", "1.0")),
        # можно ли ходить, пока второе место пустое
        "allow_solo_moves": _flag("ALLOW_SOLO_MOVES", "1"),
        "frontend_dir": os.environ.get("FRONTEND_DIR", ""),
    })()
