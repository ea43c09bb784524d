import io
from decimal import Decimal

import openpyxl
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse

from .models import Sale

SALE_ROWS = [
    ('Ana Torres', 'Ferretería El Martillo', 'Efectivo', Decimal('150.50')),
    ('Luis Ramírez', 'Papelería La Estrella', 'Tarjeta', Decimal('89.99')),
    ('Carmen Ortega', 'Abarrotes Don Pepe', 'Transferencia', Decimal('1200.00')),
    ('Jorge Medina', 'Farmacia San Rafael', 'Efectivo', Decimal('45.10')),
    ('Ana Torres', 'Cafetería Aroma', 'Tarjeta', Decimal('0.00')),
]


def make_sale(seller='Ana Torres', customer='Ferretería El Martillo', payment='Efectivo', total=Decimal('150.50')):
    return Sale.objects.create(seller=seller, customer=customer, payment=payment, total=total)


class SalesListTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_user(
            email='admin@example.com', name='Rosa Vidal', password='pass', role='admin'
        )
        self.member = get_user_model().objects.create_user(email='member@example.com', name='Marta Gil', password='pass')

    def test_empty_store_shows_empty_state(self):
        self.client.force_login(self.admin)
        Sale.objects.all().delete()
        response = self.client.get(reverse('sales.index'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'No hay ventas registradas.')
        self.assertNotContains(response, '<tbody>')

    def test_lists_every_sale_with_admin_controls(self):
        sales = [make_sale(*row) for row in SALE_ROWS]
        self.client.force_login(self.admin)
        response = self.client.get(reverse('sales.index'))
        self.assertEqual(response.status_code, 200)
        for sale in sales:
            self.assertContains(response, f'<td>{sale.id}</td>')
            self.assertContains(response, sale.seller)
            self.assertContains(response, sale.customer)
            self.assertContains(response, sale.payment)
            self.assertContains(response, str(sale.total))
            self.assertContains(response, reverse('sales.generatePDF', args=[sale.id]))
        self.assertContains(response, 'Eliminar')
        self.assertContains(response, 'Generar PDF')
        self.assertNotContains(response, 'No hay ventas registradas.')
        self.assertEqual(list(response.context['sales']), sorted(sales, key=lambda s: s.id, reverse=True))

    def test_member_sees_sales_without_admin_controls(self):
        sale = make_sale()
        self.client.force_login(self.member)
        response = self.client.get(reverse('sales.index'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, sale.customer)
        self.assertFalse(response.context['is_admin'])
        self.assertNotContains(response, 'Eliminar')
        self.assertNotContains(response, 'Generar PDF')


class SaleDeleteTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_user(
            email='admin@example.com', name='Rosa Vidal', password='pass', role='admin'
        )
        self.client.force_login(self.admin)

    def test_delete_removes_sale_and_flashes_success(self):
        sale = make_sale(customer='Taller Mecánico Hernández')
        response = self.client.get(reverse('sales.index'))
        self.assertContains(response, sale.customer)

        response = self.client.delete(reverse('sales.destroy', args=[sale.id]))
        self.assertRedirects(response, reverse('sales.index'), fetch_redirect_response=False)
        flashed = [(m.level_tag, m.message) for m in get_messages(response.wsgi_request)]
        self.assertEqual(flashed, [('success', 'Venta eliminada con éxito.')])
        self.assertFalse(Sale.objects.filter(pk=sale.id).exists())

        response = self.client.get(reverse('sales.index'))
        self.assertNotContains(response, sale.customer)
        self.assertContains(response, 'No hay ventas registradas.')

    def test_form_post_deletes_sale(self):
        sale = make_sale()
        other = make_sale(customer='Cafetería Aroma')
        response = self.client.post(reverse('sales.destroy', args=[sale.id]), follow=True)
        self.assertRedirects(response, reverse('sales.index'))
        self.assertContains(response, 'Venta eliminada con éxito.')
        self.assertEqual(list(Sale.objects.values_list('pk', flat=True)), [other.pk])

    def test_repeated_delete_is_a_no_op(self):
        sale = make_sale()
        self.client.delete(reverse('sales.destroy', args=[sale.id]), follow=True)
        response = self.client.delete(reverse('sales.destroy', args=[sale.id]))
        self.assertRedirects(response, reverse('sales.index'), fetch_redirect_response=False)
        flashed = [m.message for m in get_messages(response.wsgi_request)]
        self.assertEqual(flashed, ['Venta eliminada con éxito.'])

    def test_get_is_not_allowed(self):
        sale = make_sale()
        response = self.client.get(reverse('sales.destroy', args=[sale.id]))
        self.assertEqual(response.status_code, 405)
        self.assertTrue(Sale.objects.filter(pk=sale.id).exists())

    def test_member_cannot_delete(self):
        sale = make_sale()
        member = get_user_model().objects.create_user(email='member@example.com', name='Marta Gil', password='pass')
        self.client.force_login(member)
        response = self.client.delete(reverse('sales.destroy', args=[sale.id]))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(Sale.objects.filter(pk=sale.id).exists())


class SalePdfTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_user(
            email='admin@example.com', name='Rosa Vidal', password='pass', role='admin'
        )

    def test_generates_pdf_for_sale(self):
        sale = make_sale()
        self.client.force_login(self.admin)
        response = self.client.get(reverse('sales.generatePDF', args=[sale.id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(response['Content-Disposition'], f'inline; filename="venta_{sale.id}.pdf"')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_missing_sale_returns_404(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('sales.generatePDF', args=[999]))
        self.assertEqual(response.status_code, 404)
        self.assertNotEqual(response.get('Content-Type'), 'application/pdf')

    def test_member_cannot_generate_pdf(self):
        sale = make_sale()
        member = get_user_model().objects.create_user(email='member@example.com', name='Marta Gil', password='pass')
        self.client.force_login(member)
        response = self.client.get(reverse('sales.generatePDF', args=[sale.id]))
        self.assertEqual(response.status_code, 403)


class SalesExcelExportTests(TestCase):
    def test_admin_downloads_workbook(self):
        sales = [make_sale(*row) for row in SALE_ROWS[:3]]
        admin = get_user_model().objects.create_user(email='admin@example.com', name='Rosa Vidal', password='pass', role='admin')
        self.client.force_login(admin)
        response = self.client.get(reverse('sales.exportExcel'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        ws = openpyxl.load_workbook(io.BytesIO(response.content)).active
        rows = list(ws.iter_rows(values_only=True))
        self.assertEqual(rows[0][:3], ('ID', 'Vendedor', 'Cliente'))
        self.assertEqual({row[0] for row in rows[1:]}, {sale.id for sale in sales})

    def test_member_cannot_export(self):
        member = get_user_model().objects.create_user(email='member@example.com', name='Marta Gil', password='pass')
        self.client.force_login(member)
        response = self.client.get(reverse('sales.exportExcel'))
        self.assertEqual(response.status_code, 403)


class SaleModelTests(TestCase):
    def test_negative_total_fails_validation(self):
        sale = Sale(seller='Ana', customer='Cliente', payment='Efectivo', total=Decimal('-1.00'))
        with self.assertRaises(ValidationError):
            sale.full_clean()

    def test_negative_total_rejected_by_database(self):
        with transaction.atomic():
            with self.assertRaises(IntegrityError):
                make_sale(total=Decimal('-5.00'))

    def test_seed_command_creates_sales(self):
        call_command('seed_sales', count=4, stdout=io.StringIO())
        self.assertEqual(Sale.objects.count(), 4)
        self.assertFalse(Sale.objects.filter(total__lt=0).exists())
