"""
URL configuration for the salesdesk project.

Route names are flat (no namespace) so views and templates reverse them as
``login``, ``dashboard``, ``sales.index`` and so on.
"""
from django.contrib import admin
from django.urls import include, path
from django.shortcuts import render


# Custom error handlers
def custom_permission_denied_view(request, exception=None):
    return render(request, '403.html', status=403)


def custom_page_not_found_view(request, exception=None):
    return render(request, '404.html', status=404)


handler403 = custom_permission_denied_view
handler404 = custom_page_not_found_view

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('core.urls')),
    path('sales/', include('sales.urls')),
]
