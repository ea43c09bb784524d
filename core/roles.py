import logging
from functools import wraps

from django.contrib.auth.mixins import AccessMixin
from django.contrib.auth.views import redirect_to_login
from django.core.exceptions import PermissionDenied

logger = logging.getLogger(__name__)

ROLE_CONFIG = {
    'admin': {
        'label': 'Administrador',
        'capabilities': [
            'view_sales',
            'delete_sale',
            'export_sale_pdf',
            'export_sales_excel',
        ]
    },
    'member': {
        'label': 'Usuario',
        'capabilities': [
            'view_sales',
        ]
    },
}


def has_capability(user, capability):
    """Return True when the user's role grants ``capability``."""
    if not getattr(user, 'is_authenticated', False):
        return False
    config = ROLE_CONFIG.get(getattr(user, 'role', None), {})
    return capability in config.get('capabilities', [])


class RoleRequiredMixin(AccessMixin):
    """Reject authenticated users whose role lacks ``capability_required``.

    Anonymous users are redirected to the login page like LoginRequiredMixin.
    """
    capability_required = None

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        if not has_capability(request.user, self.capability_required):
            logger.warning("User %s denied %s on %s", request.user.pk, self.capability_required, request.path)
            raise PermissionDenied(f"Role '{request.user.role}' lacks '{self.capability_required}'")
        return super().dispatch(request, *args, **kwargs)


def role_required(capability):
    """Function-view counterpart of RoleRequiredMixin."""
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return redirect_to_login(request.get_full_path())
            if not has_capability(request.user, capability):
                logger.warning("User %s denied %s on %s", request.user.pk, capability, request.path)
                raise PermissionDenied(f"Role '{request.user.role}' lacks '{capability}'")
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
