from ticketing.handlers.views import (
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

__all__ = [
    "AdminBannerDetailView",
    "AdminBannerListView",
    "AdminEventListView",
    "AdminOverviewView",
    "AdminTicketDetailView",
    "AdminTicketListView",
    "AdminUserListView",
    "AdminUserRoleView",
    "BannerListView",
    "CategoryDetailView",
    "CategoryListView",
    "CheckInView",
    "CurrentUserView",
    "EventDetailView",
    "EventFeatureView",
    "EventListView",
    "EventPublishView",
    "MyTicketsView",
    "PriceTierListView",
    "ProfileView",
    "PurchaseView",
    "RecentCheckInsView",
    "SignInView",
    "SignUpView",
]
