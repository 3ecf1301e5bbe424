from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from movie_feed.schemas.query_schemas import (
    DEFAULT_SIZE,
    MAX_SIZE,
    All,
    ExceedsMaxSizeError,
    HasReleaseDate,
    NoReleaseDate,
    QueryArgs,
    Released,
    Size,
    SortOrder,
    Unreleased,
    ZeroSizeError,
    parse_duration,
)


# --- size ---


def test_default_size_within_max():
    assert DEFAULT_SIZE <= MAX_SIZE


def test_size_default():
    assert Size().value == 20


def test_size_accepts_full_range():
    for value in range(1, MAX_SIZE + 1):
        assert Size(value).value == value


def test_size_rejects_zero():
    with pytest.raises(ZeroSizeError):
        Size(0)


def test_size_rejects_exceeding_max():
    with pytest.raises(ExceedsMaxSizeError, match='size must not exceed the max size'):
        Size(MAX_SIZE + 1)


# --- durations ---


@pytest.mark.parametrize('text, expected', [
    ('5m', timedelta(minutes=5)),
    ('5h', timedelta(hours=5)),
    ('1s', timedelta(seconds=1)),
    ('52w', timedelta(weeks=52)),
    ('3 days', timedelta(days=3)),
    ('2 months', timedelta(seconds=2 * 2630016)),
    ('1y 6M', timedelta(seconds=31557600 + 6 * 2630016)),
    ('1h30min', timedelta(minutes=90)),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize('text', ['', '   ', '5', 'h', '5 fortnights', '-5h', '5h!'])
def test_parse_duration_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


# --- sort order ---


def _dates():
    return [
        None,
        date(2025, 4, 10),
        None,
        date(2025, 5, 14),
        date(2026, 1, 1),
        None,
        date(1990, 6, 1),
    ]


def test_sort_descending_puts_undated_last():
    ordered = sorted(_dates(), key=SortOrder.DESCENDING.sort_key)

    assert ordered == [
        date(2026, 1, 1),
        date(2025, 5, 14),
        date(2025, 4, 10),
        date(1990, 6, 1),
        None,
        None,
        None,
    ]


def test_sort_ascending_puts_undated_last():
    ordered = sorted(_dates(), key=SortOrder.ASCENDING.sort_key)

    assert ordered == [
        date(1990, 6, 1),
        date(2025, 4, 10),
        date(2025, 5, 14),
        date(2026, 1, 1),
        None,
        None,
        None,
    ]


@pytest.mark.parametrize('sort_order', list(SortOrder))
def test_sort_credits_is_stable(sort_order, make_cast, make_crew):
    same_day = date(2020, 2, 2)
    credits = [
        make_cast(id=1, release_date=same_day),
        make_cast(id=2, release_date=None),
        make_cast(id=3, release_date=same_day),
        make_crew(id=4, release_date=same_day),
        make_crew(id=5, release_date=None),
    ]

    ordered = sort_order.sort_credits(credits)

    assert [credit.id for credit in ordered] == [1, 3, 4, 2, 5]


def test_sort_order_default_is_descending():
    assert QueryArgs().sort_order is SortOrder.DESCENDING


# --- query args ---


def test_query_args_defaults():
    args = QueryArgs.from_query({})

    assert args == QueryArgs()
    assert args.size.value == DEFAULT_SIZE
    assert args.release_status == HasReleaseDate()
    assert args.sort_order is SortOrder.DESCENDING


def test_query_args_size():
    assert QueryArgs.from_query({'size': '10'}).size == Size(10)


@pytest.mark.parametrize('size, message', [
    ('-5', 'nonzero'),
    ('0', 'nonzero'),
    (str(MAX_SIZE + 1), 'size must not exceed the max size'),
    ('ten', 'invalid digit found in string'),
])
def test_query_args_rejects_invalid_size(size, message):
    with pytest.raises(ValidationError, match=message):
        QueryArgs.from_query({'size': size})


def test_query_args_unreleased():
    args = QueryArgs.from_query({'release_status': 'Unreleased'})
    assert args.release_status == Unreleased(max_time_until_release=None)

    args = QueryArgs.from_query({
        'release_status': 'Unreleased',
        'max_time_until_release': '5m',
    })
    assert args.release_status == Unreleased(max_time_until_release=timedelta(minutes=5))


def test_query_args_released():
    args = QueryArgs.from_query({'release_status': 'Released'})
    assert args.release_status == Released(max_age=None, min_age=None)

    args = QueryArgs.from_query({
        'release_status': 'Released',
        'max_age': '5h',
        'min_age': '5m',
    })
    assert args.release_status == Released(
        max_age=timedelta(hours=5), min_age=timedelta(minutes=5)
    )


def test_query_args_released_rejects_max_age_smaller():
    with pytest.raises(ValidationError, match='max_age must be larger than min_age'):
        QueryArgs.from_query({
            'release_status': 'Released',
            'max_age': '1s',
            'min_age': '5m',
        })


def test_query_args_has_release_date():
    args = QueryArgs.from_query({
        'release_status': 'HasReleaseDate',
        'max_time_until_release': '52w',
        'max_age': '5h',
    })
    assert args.release_status == HasReleaseDate(
        max_time_until_release=timedelta(weeks=52), max_age=timedelta(hours=5)
    )


def test_query_args_variants_without_parameters():
    assert QueryArgs.from_query({'release_status': 'NoReleaseDate'}).release_status == NoReleaseDate()
    assert QueryArgs.from_query({'release_status': 'All'}).release_status == All()


def test_query_args_ignores_parameters_of_other_variants():
    args = QueryArgs.from_query({'release_status': 'Unreleased', 'max_age': '5h'})
    assert args.release_status == Unreleased()


def test_query_args_rejects_unknown_release_status():
    with pytest.raises(ValidationError):
        QueryArgs.from_query({'release_status': 'Someday'})


def test_query_args_rejects_invalid_duration():
    with pytest.raises(ValidationError, match='unknown time unit'):
        QueryArgs.from_query({'release_status': 'Released', 'max_age': '5 fortnights'})


def test_query_args_sort_order():
    assert QueryArgs.from_query({'sort_order': 'Ascending'}).sort_order is SortOrder.ASCENDING
    with pytest.raises(ValidationError):
        QueryArgs.from_query({'sort_order': 'Sideways'})
