import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from apps.core.exceptions import LifecycleError

logger = logging.getLogger(__name__)


def api_view(methods=("GET",), login=True):
    """
    Wrap a JSON endpoint.

    Restricts the HTTP methods, requires an authenticated user unless
    ``login`` is False, parses a JSON body into ``request.data`` and turns
    ``LifecycleError`` into a JSON error response with its status code.
    """
    allowed = {m.upper() for m in methods}

    def decorator(view_func):
        @csrf_exempt
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if request.method not in allowed:
                return JsonResponse(
                    {"error": "Method not allowed.", "code": "method_not_allowed"}, status=405
                )
            if login and not request.user.is_authenticated:
                return JsonResponse(
                    {"error": "Authentication required.", "code": "unauthenticated"}, status=401
                )

            request.data = {}
            if request.body and request.content_type == "application/json":
                try:
                    request.data = json.loads(request.body)
                except ValueError:
                    return JsonResponse(
                        {"error": "Request body is not valid JSON.", "code": "bad_request"},
                        status=400,
                    )

            try:
                return view_func(request, *args, **kwargs)
            except LifecycleError as e:
                logger.info(
                    "%s %s rejected: %s (%s)", request.method, request.path, e.message, e.code
                )
                return JsonResponse(e.as_dict(), status=e.status_code)
        return wrapper
    return decorator


def admin_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse(
                {"error": "Authentication required.", "code": "unauthenticated"}, status=401
            )
        if not request.user.is_admin_user:
            return JsonResponse({"error": "Access denied.", "code": "forbidden"}, status=403)
        return view_func(request, *args, **kwargs)
    return wrapper
