from django.urls import path

from ticketing.handlers import (
    AdminBannerDetailView,
    AdminBannerListView,
    AdminEventListView,
    AdminOverviewView,
    AdminTicketDetailView,
    AdminTicketListView,
    AdminUserListView,
    AdminUserRoleView,
    BannerListView,
    CategoryDetailView,
    CategoryListView,
    CheckInView,
    CurrentUserView,
    EventDetailView,
    EventFeatureView,
    EventListView,
    EventPublishView,
    MyTicketsView,
    PriceTierListView,
    ProfileView,
    PurchaseView,
    RecentCheckInsView,
    SignInView,
    SignUpView,
)

urlpatterns = [
    path("auth/sign-up", SignUpView.as_view(), name="sign-up"),
    path("auth/sign-in", SignInView.as_view(), name="sign-in"),
    path("auth/me", CurrentUserView.as_view(), name="current-user"),
    path("profile", ProfileView.as_view(), name="profile"),
    path("categories", CategoryListView.as_view(), name="category-list"),
    path("categories/<str:category_id>", CategoryDetailView.as_view(), name="category-detail"),
    path("banners", BannerListView.as_view(), name="banner-list"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_ref>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/tiers", PriceTierListView.as_view(), name="tier-list"),
    path("events/<str:event_id>/publish", EventPublishView.as_view(), name="event-publish"),
    path("events/<str:event_id>/feature", EventFeatureView.as_view(), name="event-feature"),
    path("events/<str:event_id>/purchase", PurchaseView.as_view(), name="event-purchase"),
    path("me/tickets", MyTicketsView.as_view(), name="my-tickets"),
    path("check-in", CheckInView.as_view(), name="check-in"),
    path("check-in/recent", RecentCheckInsView.as_view(), name="check-in-recent"),
    path("admin/overview", AdminOverviewView.as_view(), name="admin-overview"),
    path("admin/events", AdminEventListView.as_view(), name="admin-event-list"),
    path("admin/tickets", AdminTicketListView.as_view(), name="admin-ticket-list"),
    path("admin/tickets/<str:ticket_id>", AdminTicketDetailView.as_view(), name="admin-ticket-detail"),
    path("admin/banners", AdminBannerListView.as_view(), name="admin-banner-list"),
    path("admin/banners/<str:banner_id>", AdminBannerDetailView.as_view(), name="admin-banner-detail"),
    path("admin/users", AdminUserListView.as_view(), name="admin-user-list"),
    path("admin/users/<str:user_id>/roles", AdminUserRoleView.as_view(), name="admin-user-roles"),
]
