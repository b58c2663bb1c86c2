"""Series, seasons, episodes, movie listings and movies.

Every media object shares one envelope, :class:`Media`, parametrized by the
metadata type it carries. Listings that mix media types decode into
:class:`MediaCollection`, which picks the concrete envelope from the metadata
key present in the JSON object.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Generic, TypeVar, Union

from pydantic import (
    AliasChoices,
    BeforeValidator,
    Discriminator,
    Field,
    RootModel,
    Tag,
    model_validator,
)

from crunchyroll_sdk.errors import DecodeError, InputError, InternalError, RequestError
from crunchyroll_sdk.models._serde import (
    broken_locale_list,
    millis_to_duration,
    null_to_zero,
    stream_id_from_links,
)
from crunchyroll_sdk.models.base import CrunchyModel, ExecutorModel
from crunchyroll_sdk.models.common import BulkResult, Image, V2BulkResult
from crunchyroll_sdk.models.enums import CollectionKind
from crunchyroll_sdk.models.options import SimilarOptions
from crunchyroll_sdk.models.stream import PlaybackStream, VideoStream
from crunchyroll_sdk.pagination import PageFn, Pagination

if TYPE_CHECKING:
    from crunchyroll_sdk.executor import Executor

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Duration = Annotated[timedelta, BeforeValidator(millis_to_duration)]


def _duration_field() -> Any:
    return Field(timedelta(0), validation_alias=AliasChoices("duration", "duration_ms"))


class Video(CrunchyModel):
    """Base for the metadata payload of a :class:`Media`."""

    kind: ClassVar[CollectionKind | None] = None


class SearchMetadata(CrunchyModel):
    last_public: datetime | None = None
    rank: int | None = None
    score: float = 0.0
    # only set for similar_to results
    popularity_score: float | None = None


class Series(Video):
    kind = CollectionKind.series

    extended_description: str = ""
    series_launch_year: int | None = None

    episode_count: int = 0
    season_count: int = 0

    is_subbed: bool = False
    is_dubbed: bool = False
    is_simulcast: bool = False
    audio_locales: list[str] = []
    subtitle_locales: list[str] = []

    categories: list[str] = Field(default_factory=list, alias="tenant_categories")

    maturity_ratings: list[str] = []
    is_mature: bool = False
    mature_blocked: bool = False

    availability_notes: str = ""


class Season(Video):
    kind = CollectionKind.season

    audio_locales: Annotated[list[str], BeforeValidator(broken_locale_list)] = []
    subtitle_locales: list[str] = []

    # only populated by the seasons listing
    season_number: int = 0

    maturity_ratings: list[str] = []
    is_mature: bool = False
    mature_blocked: bool = False


class Episode(Video):
    kind = CollectionKind.episode

    series_id: str = ""
    series_title: str = ""
    series_slug_title: str = ""

    season_id: str = ""
    season_title: str = ""
    season_slug_title: str = ""
    season_number: int = 0

    episode: str = ""
    episode_number: Annotated[int, BeforeValidator(null_to_zero)] = 0
    sequence_number: float = 0
    duration: Duration = _duration_field()

    episode_air_date: datetime = EPOCH
    upload_date: datetime = EPOCH
    free_available_date: datetime = EPOCH
    premium_available_date: datetime = EPOCH
    availability_starts: datetime = EPOCH
    availability_ends: datetime = EPOCH

    is_subbed: bool = False
    is_dubbed: bool = False
    closed_captions_available: bool = False
    audio_locale: str = ""
    subtitle_locales: list[str] = []

    is_clip: bool = False
    is_premium_only: bool = False

    categories: list[str] = Field(default_factory=list, alias="tenant_categories")

    maturity_ratings: list[str] = []
    is_mature: bool = False
    mature_blocked: bool = False

    available_offline: bool = False
    availability_notes: str = ""

    eligible_region: str = ""


class MovieListing(Video):
    kind = CollectionKind.movie_listing

    first_movie_id: str = ""
    extended_description: str = ""
    movie_release_year: int = 0
    duration: Duration = _duration_field()

    is_subbed: bool = False
    is_dubbed: bool = False
    subtitle_locales: list[str] = []

    is_premium_only: bool = False

    free_available_date: datetime = EPOCH
    premium_available_date: datetime = EPOCH

    categories: list[str] = Field(default_factory=list, alias="tenant_categories")

    maturity_ratings: list[str] = []
    is_mature: bool = False
    mature_blocked: bool = False

    available_offline: bool = False
    availability_notes: str = ""


class Movie(Video):
    kind = CollectionKind.movie

    movie_listing_id: str = ""
    movie_listing_title: str = ""
    movie_listing_slug_title: str = ""

    duration: Duration = _duration_field()

    is_subbed: bool = False
    is_dubbed: bool = False
    closed_captions_available: bool = False

    is_premium_only: bool = False

    maturity_ratings: list[str] = []
    is_mature: bool = False
    mature_blocked: bool = False

    available_offline: bool = False
    availability_notes: str = ""


class MediaImages(CrunchyModel):
    thumbnail: list[list[Image]] | None = None
    poster_tall: list[list[Image]] | None = None
    poster_wide: list[list[Image]] | None = None
    promo_image: list[list[Image]] | None = None


class VideoIntroResult(CrunchyModel):
    media_id: str = ""
    start_time: float = Field(0.0, alias="startTime")
    end_time: float = Field(0.0, alias="endTime")
    duration: float = 0.0
    # id of the next episode
    compared_with: str = Field("", alias="comparedWith")
    ordering: str = ""
    last_updated: datetime = EPOCH


M = TypeVar("M", bound=Video)

_METADATA_ALIASES = AliasChoices(*(kind.marker for kind in CollectionKind), "metadata")


def _exactly_one(items: list[Any], id: str) -> Any:
    if not items:
        raise InputError(f"no media could be found for id '{id}'")
    if len(items) >= 2:
        raise InternalError(f"multiple media were found for id '{id}'")
    return items[0]


def _nest_metadata(raw: dict[str, Any], kind: CollectionKind) -> dict[str, Any]:
    # The flat cms listings put metadata fields next to the envelope fields.
    if kind.marker in raw:
        return raw
    return {**raw, kind.marker: raw}


def bulk_page_fn(endpoint: str, model: Any) -> PageFn[Any]:
    """Page function for listings taking a ``start`` offset.

    ``model`` is a :class:`BulkResult` or :class:`V2BulkResult` type.
    """

    async def next_page(
        count: int, executor: Executor, query: list[tuple[str, str]]
    ) -> tuple[list[Any], int]:
        result = await (
            executor.get(endpoint)
            .query(query)
            .query([("start", count)])
            .apply_locale_query()
            .request(model)
        )
        if isinstance(result, V2BulkResult):
            return result.data, result.total
        return result.items, result.total

    return next_page


async def _flat_listing(
    executor: Executor,
    endpoint: str,
    query: list[tuple[str, str]],
    kind: CollectionKind,
    model: Any,
) -> list[Any]:
    result = await (
        executor.get(endpoint)
        .query(query)
        .apply_media_query()
        .apply_locale_query()
        .request(BulkResult[dict[str, Any]])
    )
    return [executor.decode(_nest_metadata(item, kind), model) for item in result.items]


class Media(ExecutorModel, Generic[M]):
    """Envelope shared by every media type; ``metadata`` holds the specifics."""

    executor_fields = ("metadata",)

    id: str = ""
    stream_id: Annotated[str | None, BeforeValidator(stream_id_from_links)] = Field(
        None, alias="__links__"
    )
    playback_url: str | None = Field(None, alias="playback")
    external_id: str = ""
    channel_id: str = ""

    slug: str = ""
    title: str = ""
    slug_title: str = ""
    promo_title: str = ""
    description: str = ""
    promo_description: str = ""

    metadata: M = Field(validation_alias=_METADATA_ALIASES)

    # only set for search results
    search_metadata: SearchMetadata | None = None
    images: MediaImages | None = None

    def _require_executor(self) -> Executor:
        executor = self.get_executor()
        if executor is None:
            raise InternalError(f"media '{self.id}' has no executor attached")
        return executor

    def _expect(self, *types: type[Video], action: str) -> None:
        if not isinstance(self.metadata, types):
            expected = " or ".join(t.__name__ for t in types)
            raise InputError(
                f"'{action}' is only available for {expected}, "
                f"not '{type(self.metadata).__name__}'"
            )

    @classmethod
    async def from_id(cls, executor: Executor, id: str) -> Media[Any]:
        """Fetch a single media by id, decoded as this (parametrized) class."""
        if not cls.__pydantic_generic_metadata__["args"]:
            raise InputError(
                "the metadata type is unknown, use e.g. 'Media[Series].from_id' "
                "or 'MediaCollection.from_id'"
            )
        endpoint = f"/cms/v2/{executor.details.bucket}/objects/{id}"
        result = await (
            executor.get(endpoint)
            .apply_media_query()
            .apply_locale_query()
            .request(BulkResult[cls])
        )
        return _exactly_one(result.items, id)

    @staticmethod
    async def from_series_id(executor: Executor, series_id: str) -> list[Media[Season]]:
        return await _flat_listing(
            executor,
            f"/cms/v2/{executor.details.bucket}/seasons",
            [("series_id", series_id)],
            CollectionKind.season,
            Media[Season],
        )

    @staticmethod
    async def from_season_id(executor: Executor, season_id: str) -> list[Media[Episode]]:
        return await _flat_listing(
            executor,
            f"/cms/v2/{executor.details.bucket}/episodes",
            [("season_id", season_id)],
            CollectionKind.episode,
            Media[Episode],
        )

    @staticmethod
    async def from_movie_listing_id(
        executor: Executor, movie_listing_id: str
    ) -> list[Media[Movie]]:
        return await _flat_listing(
            executor,
            f"/cms/v2/{executor.details.bucket}/movies",
            [("movie_listing_id", movie_listing_id)],
            CollectionKind.movie,
            Media[Movie],
        )

    async def seasons(self) -> list[Media[Season]]:
        self._expect(Series, action="seasons")
        return await Media.from_series_id(self._require_executor(), self.id)

    async def episodes(self) -> list[Media[Episode]]:
        self._expect(Season, action="episodes")
        return await Media.from_season_id(self._require_executor(), self.id)

    async def movies(self) -> list[Media[Movie]]:
        self._expect(MovieListing, action="movies")
        return await Media.from_movie_listing_id(self._require_executor(), self.id)

    def similar(self, options: SimilarOptions | None = None) -> Pagination[MediaCollection]:
        """Series and movie listings similar to this one, fetched lazily."""
        self._expect(Series, MovieListing, action="similar")
        executor = self._require_executor()
        options = options or SimilarOptions()
        endpoint = f"/content/v1/{executor.details.account_id}/similar_to"
        return Pagination(
            bulk_page_fn(endpoint, BulkResult[MediaCollection]),
            executor,
            [("guid", self.id), *options.into_query()],
        )

    async def streams(self) -> VideoStream:
        self._expect(Episode, Movie, action="streams")
        return await VideoStream.from_id(self._require_executor(), self.stream_id or self.id)

    async def playback(self) -> PlaybackStream:
        if not self.playback_url:
            raise RequestError("no playback id available")
        return await self._require_executor().get(self.playback_url).request(PlaybackStream)

    def available(self) -> bool:
        """Whether the episode / movie can be watched with the current account."""
        self._expect(Episode, Movie, action="available")
        executor = self._require_executor()
        return executor.details.premium or not self.metadata.is_premium_only

    async def intro(self) -> tuple[float, float] | None:
        """Start and end of the intro in seconds, if the intro is known."""
        self._expect(Episode, Movie, action="intro")
        endpoint = f"https://static.crunchyroll.com/datalab-intro-v2/{self.id}.json"
        try:
            result = await self._require_executor().get(endpoint).request(VideoIntroResult)
        except RequestError as exc:
            if "</Error>" in exc.body:
                return None
            raise
        return result.start_time, result.end_time


def _present_kinds(raw: Mapping[str, Any]) -> list[CollectionKind]:
    return [kind for kind in CollectionKind if kind.marker in raw]


def resolve_collection_kind(raw: Mapping[str, Any]) -> CollectionKind:
    """Pick the media kind of a raw JSON object from its metadata key."""
    kinds = _present_kinds(raw)
    if not kinds:
        raise DecodeError("no metadata were found")
    if len(kinds) > 1:
        markers = ", ".join(kind.marker for kind in kinds)
        raise DecodeError(f"multiple metadata were found: {markers}")
    return kinds[0]


def _collection_tag(value: Any) -> str | None:
    if isinstance(value, Media):
        kind = type(value.metadata).kind
        return kind.value if kind is not None else None
    if isinstance(value, Mapping):
        kinds = _present_kinds(value)
        return kinds[0].value if kinds else None
    return None


_AnyMedia = Annotated[
    Union[
        Annotated[Media[Series], Tag(CollectionKind.series.value)],
        Annotated[Media[Season], Tag(CollectionKind.season.value)],
        Annotated[Media[Episode], Tag(CollectionKind.episode.value)],
        Annotated[Media[MovieListing], Tag(CollectionKind.movie_listing.value)],
        Annotated[Media[Movie], Tag(CollectionKind.movie.value)],
    ],
    Discriminator(_collection_tag),
]


class MediaCollection(RootModel[_AnyMedia]):
    """Any one of the five media types, picked from the JSON it was decoded from."""

    @model_validator(mode="before")
    @classmethod
    def _check_metadata(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            resolve_collection_kind(data)
        return data

    @property
    def media(self) -> Media[Any]:
        return self.root

    @property
    def kind(self) -> CollectionKind:
        return type(self.root.metadata).kind

    def into(self, metadata_type: type[M]) -> Media[M]:
        """Return the wrapped media if it carries ``metadata_type``."""
        if isinstance(self.root.metadata, metadata_type):
            return self.root
        raise InputError(f"collection is no '{metadata_type.__name__}'")

    def set_executor(self, executor: Executor) -> None:
        self.root.set_executor(executor)

    def get_executor(self) -> Executor | None:
        return self.root.get_executor()

    @classmethod
    async def from_id(cls, executor: Executor, id: str) -> MediaCollection:
        endpoint = f"/cms/v2/{executor.details.bucket}/objects/{id}"
        result = await (
            executor.get(endpoint)
            .apply_media_query()
            .apply_locale_query()
            .request(BulkResult[cls])
        )
        return _exactly_one(result.items, id)
