from enum import Enum


class Locale(str, Enum):
    ar_ME = "ar-ME"
    ar_SA = "ar-SA"
    de_DE = "de-DE"
    en_IN = "en-IN"
    en_US = "en-US"
    es_419 = "es-419"
    es_ES = "es-ES"
    es_LA = "es-LA"
    fr_FR = "fr-FR"
    hi_IN = "hi-IN"
    it_IT = "it-IT"
    ja_JP = "ja-JP"
    ko_KR = "ko-KR"
    pt_BR = "pt-BR"
    pt_PT = "pt-PT"
    ru_RU = "ru-RU"
    zh_CN = "zh-CN"


class CollectionKind(str, Enum):
    series = "series"
    season = "season"
    episode = "episode"
    movie_listing = "movie_listing"
    movie = "movie"

    @property
    def marker(self) -> str:
        """The JSON key whose presence identifies this kind."""
        return f"{self.value}_metadata"


class SortType(str, Enum):
    popularity = "popularity"
    newly_added = "newly_added"
    alphabetical = "alphabetical"


class BrowseMediaType(str, Enum):
    series = "series"
    movie_listing = "movie_listing"
