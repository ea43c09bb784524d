from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse

from sales.models import Sale

from .roles import has_capability


class AuthGuardTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(email='member@example.com', name='Marta Gil', password='secreto-123')

    def test_anonymous_dashboard_redirects_to_login(self):
        response = self.client.get(reverse('dashboard'))
        self.assertRedirects(response, f"{reverse('login')}?next={reverse('dashboard')}")

    def test_anonymous_sales_routes_redirect_to_login(self):
        for url in (reverse('sales.index'), reverse('sales.generatePDF', args=[1]), reverse('sales.exportExcel')):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 302)
            self.assertTrue(response.url.startswith(reverse('login')))
        response = self.client.delete(reverse('sales.destroy', args=[1]))
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.url.startswith(reverse('login')))

    def test_authenticated_user_sees_dashboard(self):
        self.client.force_login(self.user)
        response = self.client.get(reverse('dashboard'))
        self.assertEqual(response.status_code, 200)

    def test_dashboard_summarises_sales(self):
        Sale.objects.create(seller='Ana Torres', customer='Cafetería Aroma', payment='Efectivo', total=Decimal('10.50'))
        Sale.objects.create(seller='Luis Ramírez', customer='Farmacia San Rafael', payment='Tarjeta', total=Decimal('20.00'))
        self.client.force_login(self.user)
        response = self.client.get(reverse('dashboard'))
        self.assertEqual(response.context['sales_count'], 2)
        self.assertEqual(response.context['sales_total'], Decimal('30.50'))
        self.assertContains(response, '$30.50')

    def test_anonymous_sales_index_keeps_next(self):
        response = self.client.get(reverse('sales.index'))
        self.assertRedirects(response, f"{reverse('login')}?next={reverse('sales.index')}")

    def test_member_navigation_hides_sales_admin_link(self):
        self.client.force_login(self.user)
        response = self.client.get(reverse('dashboard'))
        self.assertNotContains(response, 'Administrar Ventas')
        self.assertContains(response, 'Marta Gil')


class AdminNavigationTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_user(
            email='admin@example.com', name='Rosa Vidal', password='secreto-123', role='admin'
        )
        self.client.force_login(self.admin)

    def test_admin_reaches_sales_admin_from_navigation(self):
        response = self.client.get(reverse('dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Administrar Ventas')
        self.assertContains(response, f'href="{reverse("sales.index")}"')

        response = self.client.get(reverse('sales.index'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Administrar Ventas')
        self.assertContains(response, f'href="{reverse("sales.index")}"')

    def test_user_menu_offers_logout(self):
        response = self.client.get(reverse('sales.index'))
        self.assertContains(response, 'Rosa Vidal')
        self.assertContains(response, 'Cerrar Sesión')
        self.assertContains(response, f'action="{reverse("logout")}"')


class LoginTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(email='member@example.com', name='Marta Gil', password='secreto-123')

    def test_login_form_renders_fields(self):
        response = self.client.get(reverse('login'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'name="email"')
        self.assertContains(response, 'name="password"')
        self.assertContains(response, 'name="remember"')
        self.assertContains(response, 'autofocus')

    def test_valid_credentials_start_session(self):
        response = self.client.post(reverse('login'), {'email': 'member@example.com', 'password': 'secreto-123'})
        self.assertRedirects(response, reverse('dashboard'))
        self.assertEqual(int(self.client.session['_auth_user_id']), self.user.pk)
        self.assertTrue(self.client.session.get_expire_at_browser_close())

    def test_remember_keeps_persistent_session(self):
        self.client.post(reverse('login'), {'email': 'member@example.com', 'password': 'secreto-123', 'remember': 'on'})
        self.assertFalse(self.client.session.get_expire_at_browser_close())

    def test_login_form_carries_next_through_post(self):
        response = self.client.get(f"{reverse('login')}?next={reverse('sales.index')}")
        self.assertContains(response, f'name="next" value="{reverse("sales.index")}"')

    def test_login_honours_safe_next(self):
        response = self.client.post(
            f"{reverse('login')}?next={reverse('sales.index')}",
            {'email': 'member@example.com', 'password': 'secreto-123'},
        )
        self.assertRedirects(response, reverse('sales.index'))

    def test_login_ignores_external_next(self):
        response = self.client.post(
            f"{reverse('login')}?next=https://evil.example.com/",
            {'email': 'member@example.com', 'password': 'secreto-123'},
        )
        self.assertRedirects(response, reverse('dashboard'))

    def test_wrong_password_reports_email_error(self):
        response = self.client.post(reverse('login'), {'email': 'member@example.com', 'password': 'incorrecta'})
        self.assertEqual(response.status_code, 200)
        form = response.context['form']
        self.assertEqual(form.errors['email'], ['Estas credenciales no coinciden con nuestros registros.'])
        self.assertContains(response, 'Estas credenciales no coinciden con nuestros registros.')
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_missing_fields_are_reported_individually(self):
        response = self.client.post(reverse('login'), {'email': '', 'password': ''})
        self.assertEqual(response.status_code, 200)
        form = response.context['form']
        self.assertIn('email', form.errors)
        self.assertIn('password', form.errors)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save(update_fields=['is_active'])
        response = self.client.post(reverse('login'), {'email': 'member@example.com', 'password': 'secreto-123'})
        self.assertEqual(response.status_code, 200)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_authenticated_user_skips_login_form(self):
        self.client.force_login(self.user)
        response = self.client.get(reverse('login'))
        self.assertRedirects(response, reverse('dashboard'))


class LogoutTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email='admin@example.com', name='Rosa Vidal', password='secreto-123', role='admin'
        )
        self.client.force_login(self.user)

    def test_logout_ends_session_and_redirects_home(self):
        response = self.client.post(reverse('logout'))
        self.assertRedirects(response, '/')
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_logout_rejects_get(self):
        response = self.client.get(reverse('logout'))
        self.assertEqual(response.status_code, 405)
        self.assertIn('_auth_user_id', self.client.session)


class UserModelTests(TestCase):
    def test_default_role_is_member(self):
        user = get_user_model().objects.create_user(email='Nuevo@Example.com', name='Nuevo', password='x')
        self.assertEqual(user.role, 'member')
        self.assertFalse(user.is_admin)
        self.assertEqual(user.email, 'Nuevo@example.com')

    def test_superuser_is_admin(self):
        user = get_user_model().objects.create_superuser(email='root@example.com', name='Root', password='x')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_staff)

    def test_unknown_role_rejected_by_database(self):
        with transaction.atomic():
            with self.assertRaises(IntegrityError):
                get_user_model().objects.create_user(email='x@example.com', name='X', password='x', role='owner')

    def test_capabilities_follow_role(self):
        admin = get_user_model()(role='admin')
        member = get_user_model()(role='member')
        self.assertTrue(has_capability(admin, 'delete_sale'))
        self.assertTrue(has_capability(member, 'view_sales'))
        self.assertFalse(has_capability(member, 'delete_sale'))
        self.assertFalse(has_capability(member, 'export_sale_pdf'))


class CreateUserCommandTests(TestCase):
    def test_creates_admin_account(self):
        out = StringIO()
        call_command('create_user', 'jefa@example.com', 'Laura Pérez', role='admin', password='secreto-123', stdout=out)
        user = get_user_model().objects.get(email='jefa@example.com')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.check_password('secreto-123'))
        self.assertIn('Created Administrador', out.getvalue())

    def test_rejects_duplicate_email(self):
        get_user_model().objects.create_user(email='jefa@example.com', name='Laura', password='x')
        with self.assertRaises(CommandError):
            call_command('create_user', 'JEFA@example.com', 'Otra', password='x', stdout=StringIO())
