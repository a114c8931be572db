import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DecodeError
from .utils import is_zero_time

# O Alertmanager envia nanossegundos; datetime guarda até microssegundos
_EXTRA_FRACTION = re.compile(r'(\.\d{6})\d+')


def _null_as_empty_mapping(value):
    if value is None:
        return {}
    if isinstance(value, dict):
        return {k: ("" if v is None else v) for k, v in value.items()}
    return value


def _timestamp_input(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return _EXTRA_FRACTION.sub(r'\1', value)
    if isinstance(value, datetime):
        return value
    raise ValueError(f"esperado timestamp RFC 3339, recebido {type(value).__name__}")


def _timestamp_output(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        raise ValueError("timestamp sem timezone")
    # Instante zero (0001-01-01T00:00:00Z) = não definido
    if is_zero_time(value):
        return None
    return value


class Alert(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)

    @field_validator('status', 'generator_url', mode='before')
    @classmethod
    def _null_string(cls, value):
        return "" if value is None else value

    @field_validator('labels', 'annotations', mode='before')
    @classmethod
    def _null_mapping(cls, value):
        return _null_as_empty_mapping(value)

    @field_validator('starts_at', 'ends_at', mode='before')
    @classmethod
    def _trim_timestamp(cls, value):
        return _timestamp_input(value)

    @field_validator('starts_at', 'ends_at')
    @classmethod
    def _zero_timestamp(cls, value):
        return _timestamp_output(value)


class AlertGroup(BaseModel):
    """
    Uma entrega de webhook do Alertmanager.
    Campos desconhecidos (version, groupKey, truncatedAlerts...) são ignorados.
    """

    model_config = ConfigDict(populate_by_name=True)

    receiver: str = ""
    status: str = ""
    external_url: str = Field(default="", alias="externalURL")
    common_labels: Dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_annotations: Dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    alerts: List[Alert] = Field(default_factory=list)

    @field_validator('receiver', 'status', 'external_url', mode='before')
    @classmethod
    def _null_string(cls, value):
        return "" if value is None else value

    @field_validator('common_labels', 'group_labels', 'common_annotations', mode='before')
    @classmethod
    def _null_mapping(cls, value):
        return _null_as_empty_mapping(value)

    @field_validator('alerts', mode='before')
    @classmethod
    def _null_alerts(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [{} if item is None else item for item in value]
        return value

    @classmethod
    def from_dict(cls, data: Any) -> 'AlertGroup':
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(_describe(exc)) from exc

    @classmethod
    def from_json(cls, raw: Union[bytes, str]) -> 'AlertGroup':
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise DecodeError(_describe(exc)) from exc
        except RecursionError as exc:
            raise DecodeError(f"JSON inválido: aninhamento excessivo ({exc})") from exc


def _describe(exc: ValidationError) -> str:
    errors = exc.errors()
    if any(e.get('type') == 'json_invalid' for e in errors):
        return "JSON inválido: " + "; ".join(e.get('msg', '') for e in errors)
    parts = []
    for e in errors:
        loc = ".".join(str(p) for p in e.get('loc', ())) or 'payload'
        parts.append(f"campo '{loc}': {e.get('msg', '')}")
    return "payload inválido: " + "; ".join(parts)
