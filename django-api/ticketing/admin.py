from django.contrib import admin

from ticketing.models import Category, Event, PriceTier, Profile, PromoBanner, Ticket, UserRole


class PriceTierInline(admin.TabularInline):
    model = PriceTier
    extra = 1
    # Sold counts move only through the inventory ledger.
    readonly_fields = ["quantity_sold"]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "slug"]
    search_fields = ["name"]
    prepopulated_fields = {"slug": ["name"]}


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "city", "event_date", "is_published", "is_featured"]
    list_filter = ["is_published", "is_featured", "category"]
    search_fields = ["title", "location", "city"]
    inlines = [PriceTierInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["qr_code", "event", "price_tier", "status", "purchased_at", "checked_in_at"]
    list_filter = ["status", "event"]
    search_fields = ["qr_code"]
    readonly_fields = ["qr_code", "status", "checked_in_at"]


@admin.register(PromoBanner)
class PromoBannerAdmin(admin.ModelAdmin):
    list_display = ["title", "position", "display_order", "is_active"]
    list_filter = ["position", "is_active"]


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ["user", "role"]
    list_filter = ["role"]


admin.site.register(Profile)
