"""SDK response models."""

from crunchyroll_sdk.models.base import CrunchyModel, ExecutorModel, bind_executor
from crunchyroll_sdk.models.common import BulkResult, CrappyBulkResult, Image, V2BulkResult
from crunchyroll_sdk.models.enums import BrowseMediaType, CollectionKind, Locale, SortType
from crunchyroll_sdk.models.media import (
    Episode,
    Media,
    MediaCollection,
    MediaImages,
    Movie,
    MovieListing,
    SearchMetadata,
    Season,
    Series,
    Video,
    resolve_collection_kind,
)
from crunchyroll_sdk.models.options import BrowseOptions, SimilarOptions
from crunchyroll_sdk.models.stream import (
    PlaybackStream,
    PlaybackVariant,
    PlaybackVariants,
    StreamSubtitle,
    VideoStream,
    VideoVariant,
    VideoVariants,
    normalize_stream_variants,
)

__all__ = [
    "CrunchyModel",
    "ExecutorModel",
    "bind_executor",
    # common
    "BulkResult",
    "CrappyBulkResult",
    "Image",
    "V2BulkResult",
    # enums
    "BrowseMediaType",
    "CollectionKind",
    "Locale",
    "SortType",
    # media
    "Episode",
    "Media",
    "MediaCollection",
    "MediaImages",
    "Movie",
    "MovieListing",
    "SearchMetadata",
    "Season",
    "Series",
    "Video",
    "resolve_collection_kind",
    # options
    "BrowseOptions",
    "SimilarOptions",
    # stream
    "PlaybackStream",
    "PlaybackVariant",
    "PlaybackVariants",
    "StreamSubtitle",
    "VideoStream",
    "VideoVariant",
    "VideoVariants",
    "normalize_stream_variants",
]
