import os

# must be set before movie_feed.config is imported
os.environ['MOVIE_FEED_TMDB_TOKEN'] = 'THIS_IS_A_TEST'
os.environ.pop('MOVIE_FEED_TMDB_TOKEN_FILE', None)

from datetime import date  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402

from movie_feed.schemas.credits_schemas import CastCredit, CrewCredit  # noqa: E402


@pytest.fixture
def make_cast():
    def factory(
        id: int = 273481,
        title: str = 'Sicario',
        release_date: Optional[date] = date(2015, 9, 17),
        media_type: str = 'movie',
        **fields
    ) -> CastCredit:
        data = {
            'id': id,
            'title': title,
            'original_title': title,
            'character': 'Ted',
            'genres': ['Action', 'Crime', 'Thriller'],
            'release_date': release_date,
            'original_language': 'en',
            'overview': 'An idealistic FBI agent is enlisted by a government task force.',
            'credit_id': 'example-credit-id',
            'media_type': media_type,
        }
        data.update(fields)
        return CastCredit.model_validate(data)
    return factory


@pytest.fixture
def make_crew():
    def factory(
        id: int = 236235,
        title: str = 'The Gentlemen',
        release_date: Optional[date] = date(2024, 3, 7),
        media_type: str = 'tv',
        **fields
    ) -> CrewCredit:
        data = {
            'id': id,
            'title': title,
            'original_title': title,
            'department': 'Creator',
            'job': 'Creator',
            'genres': ['Comedy', 'Drama', 'Crime'],
            'release_date': release_date,
            'original_language': 'en',
            'overview': 'Eddie inherits the family estate.',
            'credit_id': 'example-credit-id',
            'media_type': media_type,
        }
        data.update(fields)
        return CrewCredit.model_validate(data)
    return factory
