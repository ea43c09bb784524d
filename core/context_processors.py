# core/context_processors.py
from django.urls import reverse

from .roles import ROLE_CONFIG


def navigation(request):
    """Navigation entries and role flags shared by every authenticated page."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return {'is_admin': False, 'nav_items': []}

    menu_items = [
        {
            'name': 'Dashboard',
            'url': reverse('dashboard'),
            'key': 'dashboard',
        },
    ]
    if user.is_admin:
        menu_items.append({
            'name': 'Administrar Ventas',
            'url': reverse('sales.index'),
            'key': 'sales',
        })

    active_key = 'sales' if request.path.startswith('/sales') else 'dashboard'
    for item in menu_items:
        item['active'] = item['key'] == active_key

    return {
        'is_admin': user.is_admin,
        'role_label': ROLE_CONFIG.get(user.role, {}).get('label', user.role),
        'nav_items': menu_items,
    }
