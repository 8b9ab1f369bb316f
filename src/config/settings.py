from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr


class AuthoritySettings(BaseModel):
    """
    Process-level settings, read once at start-up.

      * password      : keystore password (env PW). Never logged: it is a
                         SecretStr and renders as '**********'.
      * keystore_path : encrypted authority key (env KEYSTORE_PATH).
      * chains_file   : optional JSON registry replacing the built-in
                         chain tables (env CHAINS_FILE).
      * log_level     : root log level for the runner (env LOG_LEVEL).
    """

    password: Optional[SecretStr] = None
    keystore_path: Path = Field(default=Path(".keystore.json"))
    chains_file: Optional[Path] = None
    log_level: str = "INFO"

    class Config:
        frozen = True

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        *,
        dotenv_path: Optional[Path] = None,
    ) -> "AuthoritySettings":
        """
        Build settings from the environment. When `env` is not given, a
        .env file (or `dotenv_path`) is loaded into os.environ first,
        without overriding variables that are already set.
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ

        values: Dict[str, Any] = {}
        if env.get("PW"):
            values["password"] = env["PW"]
        if env.get("KEYSTORE_PATH"):
            values["keystore_path"] = env["KEYSTORE_PATH"]
        if env.get("CHAINS_FILE"):
            values["chains_file"] = env["CHAINS_FILE"]
        if env.get("LOG_LEVEL"):
            values["log_level"] = env["LOG_LEVEL"].upper()
        return cls(**values)


def load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
