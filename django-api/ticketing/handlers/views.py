"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing import cache_keys
from ticketing.conf import ticketing_setting
from ticketing.domain import BannerPosition, RedeemResult, Role, TicketStatus, UserId
from ticketing.handlers import dependencies
from ticketing.handlers.permissions import (
    CanCheckIn,
    CanManageBanners,
    CanManageCatalog,
    CanManageCatalogOrReadOnly,
    CanManageEventsOrReadOnly,
    CanManageTickets,
    CanManageUsers,
    CanViewBackoffice,
)
from ticketing.handlers.serializers import (
    BannerInputSerializer,
    BannerQuerySerializer,
    BannerSerializer,
    CategoryInputSerializer,
    CategorySerializer,
    EventInputSerializer,
    EventSerializer,
    EventUpdateSerializer,
    FlagSerializer,
    IdentitySerializer,
    OverviewSerializer,
    PriceTierSerializer,
    ProfileSerializer,
    PurchaseSerializer,
    RedeemOutcomeSerializer,
    RedeemSerializer,
    RoleSerializer,
    SignInSerializer,
    SignUpSerializer,
    TicketDetailSerializer,
    TicketSerializer,
    TicketStatusSerializer,
)
from ticketing.services.event_service import TierInput

REDEEM_HTTP_STATUS = {
    RedeemResult.SUCCESS: status.HTTP_200_OK,
    RedeemResult.ALREADY_USED: status.HTTP_200_OK,
    RedeemResult.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RedeemResult.INVALID: status.HTTP_409_CONFLICT,
}


def _flag(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes")


# Catalog


class CategoryListView(APIView):
    """Handler for GET/POST /api/categories"""

    permission_classes = [CanManageCatalogOrReadOnly]

    def get(self, request: Request) -> Response:
        data = cache.get_or_set(
            cache_keys.CATEGORIES,
            lambda: CategorySerializer(dependencies.category_service().list_categories(), many=True).data,
            ticketing_setting("CATALOG_CACHE_TTL"),
        )
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = dependencies.category_service().create_category(**serializer.validated_data)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


class CategoryDetailView(APIView):
    """Handler for PATCH/DELETE /api/categories/{category_id}"""

    permission_classes = [CanManageCatalog]

    def patch(self, request: Request, category_id: str) -> Response:
        serializer = CategoryInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = dependencies.category_service().update_category(category_id, **serializer.validated_data)
        return Response(CategorySerializer(category).data)

    def delete(self, request: Request, category_id: str) -> Response:
        dependencies.category_service().delete_category(category_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    permission_classes = [CanManageEventsOrReadOnly]

    def get(self, request: Request) -> Response:
        params = request.query_params
        events = dependencies.event_service().list_events(
            category_id=params.get("category"),
            city=params.get("city"),
            search=params.get("q"),
            featured=_flag(params.get("featured")),
        )
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = EventInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        tiers = [TierInput(**tier) for tier in fields.pop("price_tiers")]
        actor = dependencies.request_identity(request)
        event = dependencies.event_service().create_event(actor, tiers=tiers, **fields)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_ref}"""

    permission_classes = [CanManageEventsOrReadOnly]

    def get(self, request: Request, event_ref: str) -> Response:
        viewer = dependencies.request_identity(request)
        event = dependencies.event_service().get_event(event_ref, viewer)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_ref: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = dependencies.request_identity(request)
        event = dependencies.event_service().update_event(actor, event_ref, **serializer.validated_data)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_ref: str) -> Response:
        actor = dependencies.request_identity(request)
        dependencies.event_service().delete_event(actor, event_ref)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventPublishView(APIView):
    """Handler for POST /api/events/{event_id}/publish"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, event_id: str) -> Response:
        serializer = FlagSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = dependencies.request_identity(request)
        event = dependencies.event_service().set_published(actor, event_id, serializer.validated_data["value"])
        return Response(EventSerializer(event).data)


class EventFeatureView(APIView):
    """Handler for POST /api/events/{event_id}/feature"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, event_id: str) -> Response:
        serializer = FlagSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = dependencies.request_identity(request)
        event = dependencies.event_service().set_featured(actor, event_id, serializer.validated_data["value"])
        return Response(EventSerializer(event).data)


class PriceTierListView(APIView):
    """Handler for GET /api/events/{event_id}/tiers"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        viewer = dependencies.request_identity(request)
        tiers = dependencies.event_service().get_tiers_for_event(event_id, viewer)
        return Response(PriceTierSerializer(tiers, many=True).data)


class BannerListView(APIView):
    """Handler for GET /api/banners?position=top"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        query = BannerQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        position = BannerPosition(query.validated_data["position"])
        data = cache.get_or_set(
            cache_keys.banners(position.value),
            lambda: BannerSerializer(dependencies.banner_service().active_banners(position), many=True).data,
            ticketing_setting("CATALOG_CACHE_TTL"),
        )
        return Response(data)


# Purchase and check-in


class PurchaseView(APIView):
    """Handler for POST /api/events/{event_id}/purchase"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, event_id: str) -> Response:
        serializer = PurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tickets = dependencies.ticket_issuer().purchase(
            UserId(request.user.pk),
            event_id,
            serializer.validated_data["tier_id"],
            serializer.validated_data["quantity"],
        )
        return Response(TicketSerializer(tickets, many=True).data, status=status.HTTP_201_CREATED)


class MyTicketsView(APIView):
    """Handler for GET /api/me/tickets"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        tickets = dependencies.ticket_issuer().tickets_for_user(UserId(request.user.pk))
        return Response(TicketDetailSerializer(tickets, many=True).data)


class CheckInView(APIView):
    """Handler for POST /api/check-in

    Shared by the camera scanner and manual code entry.
    """

    permission_classes = [CanCheckIn]

    def post(self, request: Request) -> Response:
        serializer = RedeemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = dependencies.checkin_validator().redeem(serializer.validated_data["qr_code"])
        return Response(RedeemOutcomeSerializer(outcome).data, status=REDEEM_HTTP_STATUS[outcome.result])


class RecentCheckInsView(APIView):
    """Handler for GET /api/check-in/recent"""

    permission_classes = [CanCheckIn]

    def get(self, request: Request) -> Response:
        limit = ticketing_setting("RECENT_CHECK_INS_LIMIT")
        rows = dependencies.checkin_validator().recent_check_ins(limit)
        return Response(TicketDetailSerializer(rows, many=True).data)


# Back office


class AdminOverviewView(APIView):
    """Handler for GET /api/admin/overview"""

    permission_classes = [CanViewBackoffice]

    def get(self, request: Request) -> Response:
        data = cache.get_or_set(
            cache_keys.ADMIN_OVERVIEW,
            lambda: OverviewSerializer(dependencies.admin_query_service().overview()).data,
            ticketing_setting("ADMIN_STATS_TTL"),
        )
        return Response(data)


class AdminEventListView(APIView):
    """Handler for GET /api/admin/events"""

    permission_classes = [CanViewBackoffice]

    def get(self, request: Request) -> Response:
        events = dependencies.event_service().list_all_events()
        return Response(EventSerializer(events, many=True).data)


class AdminTicketListView(APIView):
    """Handler for GET /api/admin/tickets?status=&q="""

    permission_classes = [CanManageTickets]

    def get(self, request: Request) -> Response:
        raw_status = request.query_params.get("status")
        ticket_status = None
        if raw_status and raw_status != "all":
            serializer = TicketStatusSerializer(data={"status": raw_status})
            serializer.is_valid(raise_exception=True)
            ticket_status = TicketStatus(serializer.validated_data["status"])
        rows = dependencies.admin_query_service().list_tickets(ticket_status, request.query_params.get("q"))
        return Response(TicketDetailSerializer(rows, many=True).data)


class AdminTicketDetailView(APIView):
    """Handler for PATCH /api/admin/tickets/{ticket_id}"""

    permission_classes = [CanManageTickets]

    def patch(self, request: Request, ticket_id: str) -> Response:
        serializer = TicketStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ticket = dependencies.checkin_validator().override_status(
            ticket_id, TicketStatus(serializer.validated_data["status"])
        )
        return Response(TicketSerializer(ticket).data)


class AdminBannerListView(APIView):
    """Handler for GET/POST /api/admin/banners"""

    permission_classes = [CanManageBanners]

    def get(self, request: Request) -> Response:
        banners = dependencies.banner_service().list_banners()
        return Response(BannerSerializer(banners, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = BannerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        banner = dependencies.banner_service().create_banner(**serializer.validated_data)
        return Response(BannerSerializer(banner).data, status=status.HTTP_201_CREATED)


class AdminBannerDetailView(APIView):
    """Handler for PATCH/DELETE /api/admin/banners/{banner_id}"""

    permission_classes = [CanManageBanners]

    def patch(self, request: Request, banner_id: str) -> Response:
        serializer = BannerInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        banner = dependencies.banner_service().update_banner(banner_id, **serializer.validated_data)
        return Response(BannerSerializer(banner).data)

    def delete(self, request: Request, banner_id: str) -> Response:
        dependencies.banner_service().delete_banner(banner_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminUserListView(APIView):
    """Handler for GET /api/admin/users?role="""

    permission_classes = [CanManageUsers]

    def get(self, request: Request) -> Response:
        role = None
        raw_role = request.query_params.get("role")
        if raw_role and raw_role != "all":
            serializer = RoleSerializer(data={"role": raw_role})
            serializer.is_valid(raise_exception=True)
            role = Role(serializer.validated_data["role"])
        users = dependencies.admin_query_service().list_users(role)
        return Response(IdentitySerializer(users, many=True).data)


class AdminUserRoleView(APIView):
    """Handler for POST/DELETE /api/admin/users/{user_id}/roles"""

    permission_classes = [CanManageUsers]

    def post(self, request: Request, user_id: str) -> Response:
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        roles = dependencies.admin_query_service().grant_role(user_id, Role(serializer.validated_data["role"]))
        return Response({"roles": sorted(r.value for r in roles)})

    def delete(self, request: Request, user_id: str) -> Response:
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        roles = dependencies.admin_query_service().revoke_role(user_id, Role(serializer.validated_data["role"]))
        return Response({"roles": sorted(r.value for r in roles)})


# Accounts


class SignUpView(APIView):
    """Handler for POST /api/auth/sign-up"""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = dependencies.account_service().sign_up(**serializer.validated_data)
        body = {"token": session.token, "user": IdentitySerializer(session.identity).data}
        return Response(body, status=status.HTTP_201_CREATED)


class SignInView(APIView):
    """Handler for POST /api/auth/sign-in"""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        serializer = SignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = dependencies.account_service().sign_in(**serializer.validated_data)
        return Response({"token": session.token, "user": IdentitySerializer(session.identity).data})


class CurrentUserView(APIView):
    """Handler for GET /api/auth/me"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        accounts = dependencies.account_service()
        identity = accounts.current_user(UserId(request.user.pk))
        body = IdentitySerializer(identity).data
        body["permissions"] = sorted(p.value for p in accounts.permissions_of(identity))
        body["is_admin"] = accounts.is_admin(identity)
        return Response(body)


class ProfileView(APIView):
    """Handler for GET/PATCH /api/profile"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        profile = dependencies.account_service().get_profile(UserId(request.user.pk))
        return Response(ProfileSerializer(profile).data)

    def patch(self, request: Request) -> Response:
        serializer = ProfileSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        profile = dependencies.account_service().update_profile(
            UserId(request.user.pk), **serializer.validated_data
        )
        return Response(ProfileSerializer(profile).data)
