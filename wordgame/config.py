import logging
import os
from typing import Literal, Optional

from pydantic import BaseModel

from .constants import DEFAULT_CHALLENGE_WINDOW_SECONDS, DEFAULT_ORACLE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

ConnectivityPolicy = Literal['adjacent', 'line', 'component']
OracleFailurePolicy = Literal['reject', 'accept']
DictionarySource = Literal['file', 'nltk']


class GameConfig(BaseModel):
    """Policy switches for the rule variants that older revisions of the game disagreed on."""

    challenge_window_seconds: Optional[float] = DEFAULT_CHALLENGE_WINDOW_SECONDS
    challenger_loses_turn: bool = True
    center_bonus_first_move_only: bool = True
    connectivity: ConnectivityPolicy = 'line'
    oracle_failure_policy: OracleFailurePolicy = 'reject'
    oracle_timeout_seconds: Optional[float] = DEFAULT_ORACLE_TIMEOUT_SECONDS
    permissive_shuffle: bool = False
    dictionary_source: DictionarySource = 'file'
    dictionary_path: Optional[str] = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_seconds(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in ('', 'none', 'off', '0'):
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}; using {default}.")
        return default


def load_config() -> GameConfig:
    """Builds the game configuration from WORDGAME_* environment variables."""
    defaults = GameConfig()
    config = GameConfig(
        challenge_window_seconds=_env_seconds(
            'WORDGAME_CHALLENGE_WINDOW', defaults.challenge_window_seconds),
        challenger_loses_turn=_env_bool(
            'WORDGAME_CHALLENGER_LOSES_TURN', defaults.challenger_loses_turn),
        center_bonus_first_move_only=_env_bool(
            'WORDGAME_CENTER_FIRST_MOVE_ONLY', defaults.center_bonus_first_move_only),
        connectivity=os.environ.get('WORDGAME_CONNECTIVITY', defaults.connectivity),
        oracle_failure_policy=os.environ.get(
            'WORDGAME_ORACLE_FAILURE_POLICY', defaults.oracle_failure_policy),
        oracle_timeout_seconds=_env_seconds(
            'WORDGAME_ORACLE_TIMEOUT', defaults.oracle_timeout_seconds),
        permissive_shuffle=_env_bool('WORDGAME_PERMISSIVE_SHUFFLE', defaults.permissive_shuffle),
        dictionary_source=os.environ.get('WORDGAME_DICTIONARY_SOURCE', defaults.dictionary_source),
        dictionary_path=os.environ.get('WORDGAME_DICTIONARY_PATH', defaults.dictionary_path),
    )
    logger.info(f"Loaded game config: {config.model_dump()}")
    return config
