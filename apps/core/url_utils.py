"""URL utilities for generating absolute URLs."""

from django.conf import settings
from django.urls import reverse


def get_absolute_url(path_or_view_name, *args, **kwargs):
    """
    Build an absolute URL from a path or a view name using ``SITE_URL``.

    Used for links that leave the site: invitation emails, checkout
    success/cancel pages and connected-account onboarding returns.

        get_absolute_url("/payments/")
        get_absolute_url("onboarding:progress", token="abc123")
    """
    site_url = settings.SITE_URL.rstrip("/")

    if ":" in path_or_view_name or not path_or_view_name.startswith("/"):
        path = reverse(path_or_view_name, args=args, kwargs=kwargs)
    else:
        path = path_or_view_name

    return f"{site_url}{path}"
