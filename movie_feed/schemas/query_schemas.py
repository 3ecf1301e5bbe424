import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Annotated, Any, Iterable, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .credits_schemas import Credit

DEFAULT_SIZE = 20
MAX_SIZE = 50

assert DEFAULT_SIZE <= MAX_SIZE, 'DEFAULT_SIZE must not exceed MAX_SIZE'

DURATION_PARAMS = ('max_time_until_release', 'max_age', 'min_age')

_SECONDS_PER_UNIT = {
    'nsec': 1e-9, 'ns': 1e-9,
    'usec': 1e-6, 'us': 1e-6,
    'millis': 1e-3, 'msec': 1e-3, 'ms': 1e-3,
    'seconds': 1, 'second': 1, 'secs': 1, 'sec': 1, 's': 1,
    'minutes': 60, 'minute': 60, 'mins': 60, 'min': 60, 'm': 60,
    'hours': 3600, 'hour': 3600, 'hrs': 3600, 'hr': 3600, 'h': 3600,
    'days': 86400, 'day': 86400, 'd': 86400,
    'weeks': 604800, 'week': 604800, 'w': 604800,
    'months': 2630016, 'month': 2630016, 'M': 2630016,
    'years': 31557600, 'year': 31557600, 'y': 31557600,
}

_DURATION_PART = re.compile(r'\s*(\d+)\s*([A-Za-z]+)\s*')


def parse_duration(text: str) -> timedelta:
    """
    Parse a human readable duration such as ``"5h"``, ``"2 months"`` or
    ``"1y 6M"``. ``m`` is minutes and ``M`` is months; a month is 30.44
    days and a year 365.25 days.

    :param text: Duration string taken from the query string.
    :return: The parsed duration.
    :raises ValueError: If the string is empty or contains an unknown unit.
    """
    if not text or not text.strip():
        raise ValueError('value was empty')

    total = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration: {text!r}")
        number, unit = match.groups()
        if unit not in _SECONDS_PER_UNIT:
            raise ValueError(f"unknown time unit {unit!r}")
        total += int(number) * _SECONDS_PER_UNIT[unit]
        position = match.end()
    try:
        return timedelta(seconds=total)
    except OverflowError:
        raise ValueError('duration is too large') from None


def _shift(today: date, delta: timedelta, forwards: bool) -> Optional[date]:
    # Only whole days count towards a calendar date.
    days = timedelta(days=delta.days)
    try:
        return today + days if forwards else today - days
    except OverflowError:
        return None


def _within_max_time_until_release(
    today: date,
    release_date: date,
    max_time_until_release: Optional[timedelta]
) -> bool:
    if max_time_until_release is None:
        return True
    max_release_date = _shift(today, max_time_until_release, forwards=True)
    if max_release_date is None:
        return False
    return release_date < max_release_date


def _within_max_age(
    today: date,
    release_date: date,
    max_age: Optional[timedelta]
) -> bool:
    if max_age is None:
        return True
    oldest_release_date = _shift(today, max_age, forwards=False)
    if oldest_release_date is None:
        return False
    return release_date >= oldest_release_date


def _beyond_min_age(
    today: date,
    release_date: date,
    min_age: Optional[timedelta]
) -> bool:
    if min_age is None:
        return True
    newest_release_date = _shift(today, min_age, forwards=False)
    if newest_release_date is None:
        return False
    return release_date <= newest_release_date


class _ReleaseStatusBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    @field_validator(*DURATION_PARAMS, mode='before', check_fields=False)
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    def check(self, release_date: Optional[date], today: date) -> bool:
        raise NotImplementedError


class Unreleased(_ReleaseStatusBase):
    """
    Credits releasing after today, plus credits without a release date.
    ``max_time_until_release`` limits how far into the future they may be.
    """
    release_status: Literal['Unreleased'] = 'Unreleased'
    max_time_until_release: Optional[timedelta] = None

    def check(self, release_date: Optional[date], today: date) -> bool:
        if release_date is None:
            return True
        return release_date > today and _within_max_time_until_release(
            today, release_date, self.max_time_until_release
        )


class Released(_ReleaseStatusBase):
    """
    Credits released on or before today. ``max_age`` drops releases older
    than the bound, ``min_age`` drops releases more recent than the bound.
    """
    release_status: Literal['Released'] = 'Released'
    max_age: Optional[timedelta] = None
    min_age: Optional[timedelta] = None

    @model_validator(mode='after')
    def _max_age_not_smaller(self) -> 'Released':
        if self.max_age is not None and self.min_age is not None \
                and self.max_age < self.min_age:
            raise ValueError('max_age must be larger than min_age')
        return self

    def check(self, release_date: Optional[date], today: date) -> bool:
        if release_date is None:
            return False
        return (
            release_date <= today
            and _within_max_age(today, release_date, self.max_age)
            and _beyond_min_age(today, release_date, self.min_age)
        )


class HasReleaseDate(_ReleaseStatusBase):
    """
    Credits with a known release date, past or future, optionally bounded
    in both directions.
    """
    release_status: Literal['HasReleaseDate'] = 'HasReleaseDate'
    max_time_until_release: Optional[timedelta] = None
    max_age: Optional[timedelta] = None

    def check(self, release_date: Optional[date], today: date) -> bool:
        if release_date is None:
            return False
        return (
            _within_max_time_until_release(today, release_date, self.max_time_until_release)
            and _within_max_age(today, release_date, self.max_age)
        )


class NoReleaseDate(_ReleaseStatusBase):
    release_status: Literal['NoReleaseDate'] = 'NoReleaseDate'

    def check(self, release_date: Optional[date], today: date) -> bool:
        return release_date is None


class All(_ReleaseStatusBase):
    release_status: Literal['All'] = 'All'

    def check(self, release_date: Optional[date], today: date) -> bool:
        return True


ReleaseStatus = Annotated[
    Union[Unreleased, Released, HasReleaseDate, NoReleaseDate, All],
    Field(discriminator='release_status'),
]


class SortOrder(str, Enum):
    DESCENDING = 'Descending'
    ASCENDING = 'Ascending'

    def sort_key(self, release_date: Optional[date]) -> Tuple[int, int]:
        """
        Undated credits always sort last, whichever the direction.
        """
        if release_date is None:
            return 1, 0
        ordinal = release_date.toordinal()
        return 0, -ordinal if self is SortOrder.DESCENDING else ordinal

    def sort_credits(self, credits: Iterable[Credit]) -> List[Credit]:
        return sorted(credits, key=lambda credit: self.sort_key(credit.release_date))


class SizeError(ValueError):
    pass


class ZeroSizeError(SizeError):
    pass


class ExceedsMaxSizeError(SizeError):
    pass


@dataclass(frozen=True)
class Size:
    """Number of credits to return, between 1 and MAX_SIZE."""
    value: int = DEFAULT_SIZE

    def __post_init__(self):
        if self.value < 1:
            raise ZeroSizeError('size must be a nonzero positive integer')
        if self.value > MAX_SIZE:
            raise ExceedsMaxSizeError('size must not exceed the max size')


class QueryArgs(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: Size = Field(default_factory=Size)
    release_status: ReleaseStatus = Field(default_factory=HasReleaseDate)
    sort_order: SortOrder = SortOrder.DESCENDING

    @field_validator('size', mode='before')
    @classmethod
    def _coerce_size(cls, value: Any) -> Size:
        if isinstance(value, Size):
            return value
        if isinstance(value, str):
            value = value.strip()
            if not value.lstrip('-').isdigit():
                raise ValueError('invalid digit found in string')
        return Size(int(value))

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> 'QueryArgs':
        """
        Build the request configuration from flat query string parameters.
        Duration parameters that do not apply to the selected release
        status are ignored.

        :param params: Query string parameters.
        :return: Validated QueryArgs.
        :raises pydantic.ValidationError: If any parameter is invalid.
        """
        data: dict = {}
        if 'size' in params:
            data['size'] = params['size']
        if 'sort_order' in params:
            data['sort_order'] = params['sort_order']

        status = {'release_status': params.get('release_status', 'HasReleaseDate')}
        for name in DURATION_PARAMS:
            if name in params:
                status[name] = params[name]
        data['release_status'] = status

        return cls.model_validate(data)
