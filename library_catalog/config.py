import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")

    # Output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")

    # Seed data loaded at startup
    seed_enabled: bool = _flag("LIBRARY_SEED", "True")
    seed_file: Optional[str] = os.getenv("LIBRARY_SEED_FILE")

    # Menu behaviour
    pause_after_command: bool = _flag("LIBRARY_PAUSE", "True")

    # Catalog
    id_strategy: str = os.getenv("LIBRARY_ID_STRATEGY", "uuid")  # uuid | counter
    strict_isbn: bool = _flag("LIBRARY_STRICT_ISBN", "False")


settings = Settings()
