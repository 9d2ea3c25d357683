"""Categories and promotional banners.

Plain content with last-write-wins semantics; the only rule enforced here is
that a category cannot be removed while events still point at it.
"""

import logging
from dataclasses import replace
from typing import Any

from django.utils.text import slugify

from ticketing.domain import BannerId, BannerPosition, Category, CategoryId, PromoBanner
from ticketing.domain.errors import BannerNotFoundError, CategoryNotFoundError, InvalidIdError
from ticketing.stores.interfaces import BannerStore, CategoryStore

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, store: CategoryStore) -> None:
        self._store = store

    def list_categories(self) -> list[Category]:
        return self._store.list_categories()

    def create_category(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        icon: str | None = None,
    ) -> Category:
        category = Category(
            id=CategoryId.generate(),
            name=name,
            slug=slugify(slug or name),
            description=description,
            icon=icon,
        )
        return self._store.save_category(category)

    def update_category(self, category_id: str, **changes: Any) -> Category:
        category = self._load(category_id)
        if changes.get("slug"):
            changes["slug"] = slugify(changes["slug"])
        else:
            changes.pop("slug", None)
        return self._store.save_category(replace(category, **changes))

    def delete_category(self, category_id: str) -> None:
        """Raises CategoryInUseError while events reference the category."""
        category = self._load(category_id)
        self._store.delete_category(category.id)
        logger.info("Deleted category %s", category.slug)

    def _load(self, category_id: str) -> Category:
        try:
            cid = CategoryId.from_string(category_id)
        except ValueError as exc:
            raise InvalidIdError("category") from exc
        category = self._store.get_category(cid)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category


class BannerService:
    def __init__(self, store: BannerStore) -> None:
        self._store = store

    def active_banners(self, position: BannerPosition) -> list[PromoBanner]:
        """Banners shown on the home page carousel for `position`."""
        return self._store.list_banners(position=position, active_only=True)

    def list_banners(self) -> list[PromoBanner]:
        return self._store.list_banners()

    def create_banner(self, **fields: Any) -> PromoBanner:
        fields["position"] = BannerPosition(fields.get("position", BannerPosition.TOP))
        banner = PromoBanner(id=BannerId.generate(), **fields)
        return self._store.save_banner(banner)

    def update_banner(self, banner_id: str, **changes: Any) -> PromoBanner:
        banner = self._load(banner_id)
        if "position" in changes:
            changes["position"] = BannerPosition(changes["position"])
        return self._store.save_banner(replace(banner, **changes))

    def delete_banner(self, banner_id: str) -> None:
        banner = self._load(banner_id)
        self._store.delete_banner(banner.id)

    def _load(self, banner_id: str) -> PromoBanner:
        try:
            bid = BannerId.from_string(banner_id)
        except ValueError as exc:
            raise InvalidIdError("banner") from exc
        banner = self._store.get_banner(bid)
        if banner is None:
            raise BannerNotFoundError(banner_id)
        return banner
