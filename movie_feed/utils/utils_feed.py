from typing import List, Union

import nh3
import xxhash

from ..schemas.credits_schemas import CastCredit, Credit, CrewCredit

ALLOWED_TAGS = {'p', 'br'}
RELEASE_DATE_FORMAT = '%d-%b-%Y'


def sanitise_text(text: str) -> str:
    """
    Convert newlines to ``<br>`` and strip every tag except ``<p>`` and
    ``<br>``.

    :param text: Untrusted text, possibly containing HTML.
    :return: Sanitised HTML fragment.
    """
    return nh3.clean(text.replace('\n', '<br>'), tags=ALLOWED_TAGS)


def credit_guid(credit: Credit) -> str:
    """
    Stable item id derived from the credit's id, title, release date,
    media type and credit type, in that order. Any other field (overview,
    genres, ...) can change without changing the guid.

    :param credit: Credit to fingerprint.
    :return: Decimal string of the xxh3-64 digest.
    """
    hasher = xxhash.xxh3_64()
    fields = (
        str(credit.id),
        credit.title,
        credit.release_date.isoformat() if credit.release_date else '',
        credit.media_type.value,
        credit.credit_type.value,
    )
    for field in fields:
        encoded = field.encode('utf-8')
        # length prefix keeps ("ab", "c") and ("a", "bc") apart
        hasher.update(f"{len(encoded)}:".encode('ascii'))
        hasher.update(encoded)
    return str(hasher.intdigest())


def credit_categories(credit: Credit) -> List[str]:
    categories = [credit.media_type.label]
    if isinstance(credit, CastCredit) and credit.character:
        categories.append(sanitise_text(credit.character))
    categories.extend(credit.genres)
    return categories


def _role_line(credit: Union[CastCredit, CrewCredit]) -> str:
    if isinstance(credit, CastCredit):
        return f"Character: {credit.character or 'TBA'}"
    return f"Department: {credit.department or 'TBA'}<br>Job: {credit.job or 'TBA'}"


def credit_description(credit: Credit) -> str:
    """
    HTML description of a credit: the role, genres, language and release
    date in one paragraph, followed by the overview when there is one.

    :param credit: Credit to describe.
    :return: Sanitised HTML.
    """
    if credit.release_date is None:
        release_date = 'TBA'
    else:
        release_date = credit.release_date.strftime(RELEASE_DATE_FORMAT)

    description = (
        f"<p>{_role_line(credit)}"
        f"<br>Genres: {', '.join(credit.genres)}"
        f"<br>Language: {credit.original_language}"
        f"<br>Release Date: {release_date}</p>"
    )
    if credit.overview:
        description += f"<p>{credit.overview}</p>"

    return sanitise_text(description)
