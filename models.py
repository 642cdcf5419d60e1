import re
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StrictStr
from pydantic_core import PydanticCustomError

# RFC 3339: fecha, separador T/t/espacio, hora, fracción opcional y zona obligatoria
# (Z, ±HH:MM, ±HHMM o ±HH)
DATE_TIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|([+-])(\d{2})(?::?(\d{2}))?)$"
)


def date_time_error():
    return PydanticCustomError("date_time_format", 'String should match format "date-time"')


def check_date_time(value: str) -> str:
    match = DATE_TIME_PATTERN.match(value)
    if match is None:
        raise date_time_error()
    year, month, day, hour, minute, second = (int(part) for part in match.group(1, 2, 3, 4, 5, 6))
    tz_sign = -1 if match.group(9) == "-" else 1
    tz_hour = int(match.group(10) or 0)
    tz_minute = int(match.group(11) or 0)
    if tz_hour > 23 or tz_minute > 59:
        raise date_time_error()
    try:
        datetime(year, month, day, hour, minute, min(second, 59))
    except ValueError:
        raise date_time_error() from None
    if second == 60:
        # Segundo intercalar: solo a las 23:59 UTC
        utc_minute = minute - tz_minute * tz_sign
        utc_hour = hour - tz_hour * tz_sign - (1 if utc_minute < 0 else 0)
        if utc_hour not in (23, -1) or utc_minute not in (59, -1):
            raise date_time_error()
    elif second > 60:
        raise date_time_error()
    return value


def coerce_integer(value):
    # 10.0 cuenta como entero, igual que en JSON Schema
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise PydanticCustomError("int_type", "Input should be a valid integer")


DateTimeString = Annotated[StrictStr, AfterValidator(check_date_time)]
JsonInteger = Annotated[int, BeforeValidator(coerce_integer)]


# --- Registros en memoria ---
@dataclass(frozen=True)
class User:
    handle: str
    password_hash: str


# --- Modelos Pydantic ---
class UserPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_handle: StrictStr = Field(alias="userHandle", min_length=6)
    password: StrictStr = Field(min_length=6)


class ScorePayload(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    level: StrictStr
    user_handle: StrictStr = Field(alias="userHandle")
    score: JsonInteger
    timestamp: DateTimeString


# Los puntajes se guardan tal como llegaron
Score = ScorePayload


class TokenResponse(BaseModel):
    json_web_token: str = Field(alias="jsonWebToken")
