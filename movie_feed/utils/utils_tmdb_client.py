from typing import Dict, Optional, Tuple

import httpx

from ..config import settings
from ..logging_config import get_logger
from ..schemas.credits_schemas import CombinedCredits, PersonDetails

logger = get_logger(__name__)

API_VERSION_PATH = '3/'

# (http status, tmdb status_code) -> message
TMDB_ERRORS: Dict[Tuple[int, int], str] = {
    (200, 1): 'Success.',
    (501, 2): 'Invalid service: this service does not exist.',
    (401, 3): 'Authentication failed: You do not have permissions to access the service.',
    (405, 4): "Invalid format: This service doesn't exist in that format.",
    (422, 5): 'Invalid parameters: Your request parameters are incorrect.',
    (404, 6): 'Invalid id: The pre-requisite id is invalid or not found.',
    (401, 7): 'Invalid API key: You must be granted a valid key.',
    (403, 8): 'Duplicate entry: The data you tried to submit already exists.',
    (503, 9): 'Service offline: This service is temporarily offline, try again later.',
    (401, 10): 'Suspended API key: Access to your account has been suspended, contact TMDB.',
    (500, 11): 'Internal error: Something went wrong, contact TMDB.',
    (201, 12): 'The item/record was updated successfully.',
    (200, 13): 'The item/record was deleted successfully.',
    (401, 14): 'Authentication failed.',
    (500, 15): 'Failed.',
    (401, 16): 'Device denied.',
    (401, 17): 'Session denied.',
    (400, 18): 'Validation failed.',
    (406, 19): 'Invalid accept header.',
    (422, 20): 'Invalid date range: Should be a range no longer than 14 days.',
    (200, 21): 'Entry not found: The item you are trying to edit cannot be found.',
    (400, 22): 'Invalid page: Pages start at 1 and max at 500. They are expected to be an integer.',
    (400, 23): 'Invalid date: Format needs to be YYYY-MM-DD.',
    (504, 24): 'Your request to the backend server timed out. Try again.',
    (429, 25): 'Your request count (#) is over the allowed limit of (40).',
    (400, 26): 'You must provide a username and password.',
    (400, 27): 'Too many append to response objects: The maximum number of remote calls is 20.',
    (400, 28): 'Invalid timezone: Please consult the documentation for a valid timezone.',
    (400, 29): 'You must confirm this action: Please provide a confirm=true parameter.',
    (401, 30): 'Invalid username and/or password: You did not provide a valid login.',
    (401, 31): 'Account disabled: Your account is no longer active. Contact TMDB if this is an error.',
    (401, 32): 'Email not verified: Your email address has not been verified.',
    (401, 33): 'Invalid request token: The request token is either expired or invalid.',
    (404, 34): 'The resource you requested could not be found.',
    (401, 35): 'Invalid token.',
    (401, 36): "This token hasn't been granted write permission by the user.",
    (404, 37): 'The requested session could not be found.',
    (401, 38): "You don't have permission to edit this resource.",
    (401, 39): 'This resource is private.',
    (200, 40): 'Nothing to update.',
    (422, 41): "This request token hasn't been approved by the user.",
    (405, 42): 'This request method is not supported for this resource.',
    (502, 43): "Couldn't connect to the backend server.",
    (500, 44): 'The ID is invalid.',
    (403, 45): 'This user has been suspended.',
    (503, 46): 'The API is undergoing maintenance. Try again later.',
    (400, 47): 'The input is not valid.',
}

# Codes pointing at our credentials or at TMDB itself rather than the request.
SEVERE_TMDB_CODES = frozenset({
    2, 3, 4, 7, 9, 10, 11, 14, 16, 17, 19, 26, 30, 31, 32,
    33, 35, 36, 37, 38, 39, 41, 42, 43, 45, 46,
})

_KNOWN_STATUSES = frozenset(status for status, _ in TMDB_ERRORS)


class TmdbError(Exception):
    """A documented TMDB error, identified by HTTP status and TMDB code."""

    def __init__(self, status_code: int, code: int):
        self.status_code = status_code
        self.code = code
        self.message = TMDB_ERRORS[(status_code, code)]
        super().__init__(self.message)

    @property
    def is_severe(self) -> bool:
        return self.code in SEVERE_TMDB_CODES


class UnknownTmdbError(Exception):
    """A non-success response that does not match the TMDB error table."""

    def __init__(self, status_code: int, code: Optional[int] = None):
        self.status_code = status_code
        self.code = code
        if code is None:
            message = f"unknown status code: {status_code}"
        else:
            message = f"unknown error, status code: {status_code}, tmdb code: {code}"
        super().__init__(message)


def error_from_response(response: httpx.Response) -> Exception:
    """
    Map a non-success TMDB response to TmdbError, or UnknownTmdbError when
    the status or the body's ``status_code`` is not recognised.

    :param response: The failed response.
    :return: The exception to raise.
    """
    status = response.status_code
    if status not in _KNOWN_STATUSES:
        return UnknownTmdbError(status)

    try:
        code = int(response.json()['status_code'])
    except (ValueError, KeyError, TypeError) as e:
        logger.warning('Unable to extract error data', error=str(e))
        return UnknownTmdbError(status)

    if (status, code) not in TMDB_ERRORS:
        return UnknownTmdbError(status, code)
    return TmdbError(status, code)


async def _get(client: httpx.AsyncClient, path: str) -> httpx.Response:
    """
    Perform an authenticated GET against the v3 API.

    :param client: HTTP client for making API requests.
    :param path: Path relative to the API version root.
    :return: The successful response.
    :raises TmdbError: On a documented TMDB error.
    :raises UnknownTmdbError: On any other non-200 response.
    """
    url = f"{settings.tmdb_api_url.rstrip('/')}/{API_VERSION_PATH}{path}"
    resp = await client.get(
        url,
        headers={
            'Authorization': f"Bearer {settings.tmdb_token.get_secret_value()}",
            'Accept': 'application/json',
        }
    )
    if resp.status_code != 200:
        raise error_from_response(resp)
    return resp


async def fetch_person_details(
    client: httpx.AsyncClient,
    person_id: int
) -> PersonDetails:
    """
    Fetch a person's details from ``person/{person_id}``.

    :param client: HTTP client for making API requests.
    :param person_id: TMDB id of the person.
    :return: PersonDetails for the person.
    """
    resp = await _get(client, f"person/{person_id}")
    return PersonDetails.model_validate(resp.json())


async def fetch_combined_credits(
    client: httpx.AsyncClient,
    person_id: int
) -> CombinedCredits:
    """
    Fetch a person's movie and TV credits from
    ``person/{person_id}/combined_credits``.

    :param client: HTTP client for making API requests.
    :param person_id: TMDB id of the person.
    :return: CombinedCredits holding the cast and crew lists.
    """
    resp = await _get(client, f"person/{person_id}/combined_credits")
    return CombinedCredits.model_validate(resp.json())
