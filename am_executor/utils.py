import calendar
from datetime import datetime
from typing import Optional


# Instante zero do Alertmanager (Go time.Time{}): 0001-01-01T00:00:00Z
ZERO_EPOCH = calendar.timegm((1, 1, 1, 0, 0, 0))


def epoch_seconds(value: datetime) -> int:
    # Sem normalizar para UTC: evita overflow em datas próximas de datetime.min
    seconds = calendar.timegm(value.replace(tzinfo=None).timetuple())
    offset = value.utcoffset()
    if offset:
        seconds -= int(offset.total_seconds())
    return seconds


def is_zero_time(value: Optional[datetime]) -> bool:
    if value is None:
        return True
    return value.microsecond == 0 and epoch_seconds(value) == ZERO_EPOCH


def format_timestamp(value: Optional[datetime]) -> str:
    """Segundos Unix em decimal, ou "0" para timestamp zero/ausente."""
    if is_zero_time(value):
        return "0"
    return str(epoch_seconds(value))
