from datetime import date
from enum import Enum, IntEnum
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

SITE_URL = 'https://www.themoviedb.org/'
IMDB_SITE_URL = 'https://www.imdb.com/'

UNKNOWN_GENRE = 'Unknown Genre'

MOVIE_GENRES: Dict[int, str] = {
    28: 'Action',
    12: 'Adventure',
    16: 'Animation',
    35: 'Comedy',
    80: 'Crime',
    99: 'Documentary',
    18: 'Drama',
    10751: 'Family',
    14: 'Fantasy',
    36: 'History',
    27: 'Horror',
    10402: 'Music',
    9648: 'Mystery',
    10749: 'Romance',
    878: 'Science Fiction',
    10770: 'TV Movie',
    53: 'Thriller',
    10752: 'War',
    37: 'Western',
}

TV_GENRES: Dict[int, str] = {
    10759: 'Action & Adventure',
    16: 'Animation',
    35: 'Comedy',
    80: 'Crime',
    99: 'Documentary',
    18: 'Drama',
    10751: 'Family',
    10762: 'Kids',
    9648: 'Mystery',
    10763: 'News',
    10764: 'Reality',
    10765: 'Sci-Fi & Fantasy',
    10766: 'Soap',
    10767: 'Talk',
    10768: 'War & Politics',
    37: 'Western',
}


class MediaType(str, Enum):
    MOVIE = 'movie'
    TV = 'tv'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalised = value.strip().lower()
            for member in cls:
                if member.value == normalised:
                    return member
        return None

    @property
    def label(self) -> str:
        return 'Movie' if self is MediaType.MOVIE else 'TV'

    @property
    def url_prefix(self) -> str:
        return self.value

    @property
    def genres(self) -> Dict[int, str]:
        return MOVIE_GENRES if self is MediaType.MOVIE else TV_GENRES


class CreditType(str, Enum):
    CAST = 'cast'
    CREW = 'crew'


class Gender(IntEnum):
    NOT_SPECIFIED = 0
    FEMALE = 1
    MALE = 2
    NON_BINARY = 3


def _empty_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value:
        return None
    return value


def _parse_date(value: Any) -> Optional[date]:
    """
    Parse an upstream ``YYYY-MM-DD`` string. Empty or malformed values
    are treated as an unknown date rather than an error.
    """
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _infer_media_type(data: Dict[str, Any]) -> Any:
    media_type = data.get('media_type')
    if media_type:
        return media_type
    if data.get('title') or data.get('original_title'):
        return MediaType.MOVIE
    if data.get('name') or data.get('original_name'):
        return MediaType.TV
    raise ValueError('unable to discern the media type')


class BaseCredit(BaseModel):
    """
    A single engagement of a person on a movie or TV show, normalised from
    the TMDB combined credits payload. Shows are exposed through the same
    fields as movies (``name`` -> ``title``, ``first_air_date`` ->
    ``release_date``).
    """
    model_config = ConfigDict(frozen=True)

    credit_type: ClassVar[CreditType]

    id: int
    title: str
    original_title: str
    genres: List[str] = []
    release_date: Optional[date] = None
    original_language: str = ''
    overview: Optional[str] = None
    credit_id: Optional[str] = None
    media_type: MediaType

    @model_validator(mode='before')
    @classmethod
    def _normalise_upstream(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {key: _empty_to_none(value) for key, value in data.items()}

        media_type = MediaType(_infer_media_type(data))
        data['media_type'] = media_type

        if media_type is MediaType.TV:
            if data.get('title') is None:
                data['title'] = data.pop('name', None)
            if data.get('original_title') is None:
                data['original_title'] = data.pop('original_name', None)
            if data.get('release_date') is None:
                data['release_date'] = data.pop('first_air_date', None)

        title, original_title = data.get('title'), data.get('original_title')
        if title is None and original_title is None:
            name = 'title' if media_type is MediaType.MOVIE else 'name'
            raise ValueError(f'missing {name} or original_{name}')
        data['title'] = title if title is not None else original_title
        data['original_title'] = original_title if original_title is not None else title

        data['release_date'] = _parse_date(data.get('release_date'))

        if 'genres' not in data:
            table = media_type.genres
            data['genres'] = [
                table.get(genre_id, UNKNOWN_GENRE)
                for genre_id in data.pop('genre_ids', None) or []
            ]
        return data

    @property
    def media_url(self) -> str:
        return f"{SITE_URL}{self.media_type.url_prefix}/{self.id}"


class CastCredit(BaseCredit):
    credit_type: ClassVar[CreditType] = CreditType.CAST

    character: Optional[str] = None


class CrewCredit(BaseCredit):
    credit_type: ClassVar[CreditType] = CreditType.CREW

    department: Optional[str] = None
    job: Optional[str] = None


Credit = Union[CastCredit, CrewCredit]


class CombinedCredits(BaseModel):
    id: Optional[int] = None
    cast: List[CastCredit] = []
    crew: List[CrewCredit] = []


class PersonDetails(BaseModel):
    adult: bool = True
    also_known_as: List[str] = []
    biography: Optional[str] = None
    birthday: Optional[date] = None
    deathday: Optional[date] = None
    gender: Gender = Gender.NOT_SPECIFIED
    homepage: Optional[str] = None
    id: int = 0
    imdb_id: Optional[str] = None
    known_for_department: Optional[str] = None
    name: str
    place_of_birth: Optional[str] = None
    popularity: float = 0.0
    profile_path: Optional[str] = None

    @field_validator('biography', 'homepage', 'imdb_id', 'place_of_birth', mode='before')
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @field_validator('birthday', 'deathday', mode='before')
    @classmethod
    def _lenient_date(cls, value: Any) -> Optional[date]:
        return _parse_date(value)

    @field_validator('gender', mode='before')
    @classmethod
    def _known_gender(cls, value: Any) -> Gender:
        try:
            return Gender(value)
        except ValueError:
            return Gender.NOT_SPECIFIED

    @property
    def tmdb_url(self) -> str:
        return f"{SITE_URL}person/{self.id}"

    @property
    def imdb_url(self) -> Optional[str]:
        if self.imdb_id is None:
            return None
        return f"{IMDB_SITE_URL}name/{self.imdb_id}"
