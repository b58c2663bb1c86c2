from crunchyroll_sdk.models.base import CrunchyModel
from crunchyroll_sdk.models.enums import BrowseMediaType, SortType


class SimilarOptions(CrunchyModel):
    # page size; the offset is driven by the pagination cursor
    limit: int = 20

    def into_query(self) -> list[tuple[str, str]]:
        return [("n", str(self.limit))]


class BrowseOptions(CrunchyModel):
    limit: int = 20
    sort: SortType = SortType.newly_added
    media_type: BrowseMediaType | None = None
    categories: list[str] = []
    is_simulcast: bool | None = None

    def into_query(self) -> list[tuple[str, str]]:
        query = [("n", str(self.limit)), ("sort_by", self.sort.value)]
        if self.media_type is not None:
            query.append(("type", self.media_type.value))
        if self.categories:
            query.append(("categories", ",".join(self.categories)))
        if self.is_simulcast is not None:
            query.append(("is_simulcast", "true" if self.is_simulcast else "false"))
        return query
