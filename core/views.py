import logging

from django.contrib.auth import views as auth_views
from django.contrib.auth.mixins import LoginRequiredMixin
from django.db.models import Count, Sum
from django.shortcuts import render
from django.views import View

from sales.models import Sale
from .forms import LoginForm

logger = logging.getLogger(__name__)


def home(request):
    return render(request, 'core/home.html')


class LoginView(auth_views.LoginView):
    template_name = 'registration/login.html'
    authentication_form = LoginForm
    redirect_authenticated_user = True

    def form_valid(self, form):
        response = super().form_valid(form)
        if not form.cleaned_data.get('remember'):
            # Expire at browser close unless the user asked to be remembered.
            self.request.session.set_expiry(0)
        logger.info("User %s logged in", form.get_user().pk)
        return response

    def form_invalid(self, form):
        logger.info("Failed login attempt for %s", self.request.POST.get('email', ''))
        return super().form_invalid(form)


class LogoutView(auth_views.LogoutView):
    def post(self, request, *args, **kwargs):
        user_id = request.user.pk
        response = super().post(request, *args, **kwargs)
        logger.info("User %s logged out", user_id)
        return response


class DashboardView(LoginRequiredMixin, View):
    def get(self, request):
        stats = Sale.objects.aggregate(count=Count('id'), total=Sum('total'))
        context = {
            'sales_count': stats['count'],
            'sales_total': stats['total'] or 0,
        }
        return render(request, 'core/dashboard.html', context)
