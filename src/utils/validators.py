"""Payload validation for the osu! API v1"""
import math
from typing import Any, Dict, List, Optional, Tuple

from src.base import BaseValidator, ScoreData, UserData


class PayloadValidationError(ValueError):
    """An API payload does not match the expected schema"""


def _to_int(value: Any) -> Optional[int]:
    try:
        if isinstance(value, bool):
            return None
        if isinstance(value, float):
            return int(value) if value.is_integer() else None
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def _to_float(value: Any) -> Optional[float]:
    try:
        if isinstance(value, bool):
            return None
        number = float(str(value).strip())
    except (ValueError, TypeError):
        return None
    return number if math.isfinite(number) else None


def _check_int(data: Dict, field: str, errors: List[str], minimum: int = 0):
    if field not in data or data[field] is None:
        errors.append(f"Missing required field: {field}")
        return
    value = _to_int(data[field])
    if value is None:
        errors.append(f"Invalid integer: {field} = {data[field]!r}")
    elif value < minimum:
        errors.append(f"Out of range: {field} = {value}")


def _check_float(data: Dict, field: str, errors: List[str]):
    if field not in data or data[field] is None:
        errors.append(f"Missing required field: {field}")
        return
    value = _to_float(data[field])
    if value is None:
        errors.append(f"Invalid number: {field} = {data[field]!r}")
    elif value < 0:
        errors.append(f"Negative value: {field} = {value}")


class UserValidator(BaseValidator):
    """Validate get_user payloads"""

    def validate(self, data: Dict) -> Tuple[bool, Optional[str]]:
        """Validate user data"""
        if not isinstance(data, dict):
            return False, f"Expected an object, got {type(data).__name__}"

        errors = []

        if not data.get('username'):
            errors.append("Missing required field: username")

        _check_int(data, 'user_id', errors, minimum=1)
        _check_int(data, 'playcount', errors)
        _check_float(data, 'pp_raw', errors)

        return len(errors) == 0, '; '.join(errors) if errors else None


class ScoreValidator(BaseValidator):
    """Validate get_user_best entries"""

    COUNT_FIELDS = ['count300', 'count100', 'count50', 'countmiss', 'countkatu', 'countgeki']

    def validate(self, data: Dict) -> Tuple[bool, Optional[str]]:
        """Validate score data"""
        if not isinstance(data, dict):
            return False, f"Expected an object, got {type(data).__name__}"

        errors = []

        _check_int(data, 'beatmap_id', errors, minimum=1)
        _check_int(data, 'enabled_mods', errors)
        _check_int(data, 'maxcombo', errors)
        for field in self.COUNT_FIELDS:
            _check_int(data, field, errors)
        _check_float(data, 'pp', errors)

        if data.get('score_id') is not None and _to_int(data['score_id']) is None:
            errors.append(f"Invalid integer: score_id = {data['score_id']!r}")

        return len(errors) == 0, '; '.join(errors) if errors else None


def parse_user(data: Dict) -> UserData:
    """Validate a get_user entry and convert it to UserData."""
    is_valid, error = UserValidator().validate(data)
    if not is_valid:
        raise PayloadValidationError(f"Invalid user payload: {error}")

    return UserData(
        user_id=_to_int(data['user_id']),
        username=str(data['username']),
        playcount=_to_int(data['playcount']),
        pp_raw=_to_float(data['pp_raw']),
    )


def parse_score(data: Dict) -> ScoreData:
    """Validate a get_user_best entry and convert it to ScoreData."""
    is_valid, error = ScoreValidator().validate(data)
    if not is_valid:
        raise PayloadValidationError(f"Invalid score payload: {error}")

    score_id = data.get('score_id')
    return ScoreData(
        beatmap_id=_to_int(data['beatmap_id']),
        enabled_mods=_to_int(data['enabled_mods']),
        max_combo=_to_int(data['maxcombo']),
        count300=_to_int(data['count300']),
        count100=_to_int(data['count100']),
        count50=_to_int(data['count50']),
        count_miss=_to_int(data['countmiss']),
        count_katu=_to_int(data['countkatu']),
        count_geki=_to_int(data['countgeki']),
        pp=_to_float(data['pp']),
        score_id=_to_int(score_id) if score_id is not None else None,
    )
