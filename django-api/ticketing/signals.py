"""Django signals for cache invalidation.

Inventory counters and ticket statuses change through queryset updates,
which bypass these signals; the back-office overview relies on its TTL for
those.
"""

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from ticketing import cache_keys
from ticketing.domain import BannerPosition
from ticketing.models import Category, Event, PromoBanner, Ticket


@receiver([post_save, post_delete], sender=Category)
def invalidate_category_cache(sender, instance, **kwargs):
    """Invalidate the category list when a category is saved or deleted."""
    cache.delete(cache_keys.CATEGORIES)


@receiver([post_save, post_delete], sender=PromoBanner)
def invalidate_banner_cache(sender, instance, **kwargs):
    """Banners may have moved between positions, so clear every position."""
    cache.delete_many([cache_keys.banners(position.value) for position in BannerPosition])


@receiver([post_save, post_delete], sender=Event)
@receiver([post_save, post_delete], sender=Ticket)
@receiver([post_save, post_delete], sender=get_user_model())
def invalidate_overview_cache(sender, instance, **kwargs):
    cache.delete(cache_keys.ADMIN_OVERVIEW)
