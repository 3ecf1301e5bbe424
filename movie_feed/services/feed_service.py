from datetime import date, datetime, timezone
from itertools import chain
from typing import List, Optional, Sequence

from ..logging_config import get_logger
from ..schemas.credits_schemas import (
    CastCredit,
    CombinedCredits,
    Credit,
    CrewCredit,
    PersonDetails,
)
from ..schemas.feed_schemas import Channel, FeedItem
from ..schemas.query_schemas import QueryArgs
from ..utils.utils_feed import (
    credit_categories,
    credit_description,
    credit_guid,
    sanitise_text,
)

logger = get_logger(__name__)

GENERATOR = 'movie-feed'
DOCS_URL = 'https://www.rssboard.org/rss-specification'
TTL_MINUTES = 60


def merge_credits(
    cast: Sequence[CastCredit],
    crew: Sequence[CrewCredit]
) -> List[Credit]:
    """
    Merge cast and crew into one list: every cast credit in source order,
    then every crew credit in source order.
    """
    return list(chain(cast, crew))


def select_credits(
    credits: CombinedCredits,
    query: QueryArgs,
    today: date
) -> List[Credit]:
    """
    Filter, order and cap a person's credits for one feed.

    :param credits: The person's cast and crew credits.
    :param query: Size, release status and sort order of the request.
    :param today: The single date every release status check is made against.
    :return: At most ``query.size.value`` credits.
    """
    merged = merge_credits(credits.cast, credits.crew)
    eligible = [
        credit for credit in merged
        if query.release_status.check(credit.release_date, today)
    ]
    ordered = query.sort_order.sort_credits(eligible)
    selected = ordered[:query.size.value]

    logger.debug(
        'Credits selected',
        total=len(merged),
        eligible=len(eligible),
        selected=len(selected),
        release_status=query.release_status.release_status,
        sort_order=query.sort_order.value,
    )
    return selected


def build_item(credit: Credit) -> FeedItem:
    return FeedItem(
        guid=credit_guid(credit),
        guid_is_permalink=False,
        categories=credit_categories(credit),
        link=credit.media_url,
        title=credit.title,
        description=credit_description(credit),
    )


def build_feed(
    details: PersonDetails,
    credits: CombinedCredits,
    query: QueryArgs,
    now: Optional[datetime] = None
) -> Channel:
    """
    Build the combined credits channel for a person.

    ``now`` is read once here, when not supplied, and its UTC date is used
    for every release status check of this feed.

    :param details: The person the feed is about.
    :param credits: The person's cast and crew credits.
    :param query: Size, release status and sort order of the request.
    :param now: Build time; defaults to the current UTC time.
    :return: Channel ready for rendering.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date() if now.tzinfo else now.date()

    items = [build_item(credit) for credit in select_credits(credits, query, today)]

    return Channel(
        title=sanitise_text(f"{details.name} - Combined Credits"),
        link=details.tmdb_url,
        description=sanitise_text(details.biography) if details.biography else None,
        generator=GENERATOR,
        docs=DOCS_URL,
        ttl=TTL_MINUTES,
        last_build_date=now,
        items=items,
    )
