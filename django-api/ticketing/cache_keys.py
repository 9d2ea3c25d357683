"""Cache keys shared by the handlers that fill them and the signals that clear them."""

CATEGORIES = "catalog:categories"
ADMIN_OVERVIEW = "backoffice:overview"


def banners(position: str) -> str:
    return f"catalog:banners:{position}"
