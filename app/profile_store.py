"""
Best-effort persistence for the AI config and resume/job-description context.

One JSON file with two keys, "aiConfig" and "resumeContext". Writes rewrite
the whole file; there is no locking or transactional guarantee. A missing or
unreadable file yields defaults.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.config import get_settings
from app.schemas.config import AIConfig, ResumeContext

logger = logging.getLogger(__name__)

CONFIG_KEY = "aiConfig"
CONTEXT_KEY = "resumeContext"


class ProfileStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Profile store %s unreadable, using defaults: %s", self.path, e)
            return {}
        return raw if isinstance(raw, dict) else {}

    def _save(self, key: str, value: dict[str, Any]) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def has_config(self) -> bool:
        return isinstance(self._load().get(CONFIG_KEY), dict)

    def get_config(self) -> AIConfig:
        raw = self._load().get(CONFIG_KEY)
        if not isinstance(raw, dict):
            return AIConfig()
        try:
            return AIConfig.model_validate(raw)
        except ValidationError as e:
            logger.warning("Stored AI config invalid, using defaults: %s", e)
            return AIConfig()

    def save_config(self, config: AIConfig) -> AIConfig:
        self._save(CONFIG_KEY, config.model_dump())
        return config

    def get_context(self) -> ResumeContext:
        raw = self._load().get(CONTEXT_KEY)
        if not isinstance(raw, dict):
            return ResumeContext()
        try:
            return ResumeContext.model_validate(raw)
        except ValidationError as e:
            logger.warning("Stored resume context invalid, using empty: %s", e)
            return ResumeContext()

    def save_context(self, context: ResumeContext) -> ResumeContext:
        self._save(CONTEXT_KEY, context.model_dump())
        return context


def get_profile_store() -> ProfileStore:
    return ProfileStore(get_settings().PROFILE_STORE_PATH)
