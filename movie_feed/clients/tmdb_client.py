import asyncio
from typing import Tuple

import httpx

from ..schemas.credits_schemas import CombinedCredits, PersonDetails
from ..utils.utils_tmdb_client import fetch_combined_credits, fetch_person_details


async def fetch_person_credits(person_id: int) -> Tuple[PersonDetails, CombinedCredits]:
    """
    Fetch everything needed to build a person's combined credits feed.
    Both requests run concurrently; if either fails the error propagates
    and no feed is built.

    :param person_id: TMDB id of the person.
    :return: Tuple of the person's details and their combined credits.
    """
    async with httpx.AsyncClient(timeout=10.0) as client:
        details, credits = await asyncio.gather(
            fetch_person_details(client, person_id),
            fetch_combined_credits(client, person_id),
        )
    return details, credits
