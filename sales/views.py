import logging

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views import View

from core.roles import RoleRequiredMixin, role_required
from .exports import build_sale_pdf, build_sales_workbook
from .models import Sale

logger = logging.getLogger(__name__)

DELETE_SUCCESS_MESSAGE = 'Venta eliminada con éxito.'


class SalesIndexView(RoleRequiredMixin, View):
    capability_required = 'view_sales'

    def get(self, request):
        sales = Sale.objects.all()
        return render(request, 'sales/index.html', {'sales': sales})


class SaleDestroyView(RoleRequiredMixin, View):
    capability_required = 'delete_sale'
    http_method_names = ['delete', 'post']

    def delete(self, request, pk):
        deleted, _ = Sale.objects.filter(pk=pk).delete()
        if deleted:
            logger.info("User %s deleted sale %s", request.user.pk, pk)
        else:
            logger.info("Sale %s already absent; delete by user %s is a no-op", pk, request.user.pk)
        messages.success(request, DELETE_SUCCESS_MESSAGE)
        return redirect('sales.index')

    # HTML forms cannot issue DELETE, the table's delete button posts here.
    def post(self, request, pk):
        return self.delete(request, pk)


class SalePdfView(RoleRequiredMixin, View):
    capability_required = 'export_sale_pdf'

    def get(self, request, pk):
        sale = get_object_or_404(Sale, pk=pk)
        response = HttpResponse(build_sale_pdf(sale), content_type='application/pdf')
        response['Content-Disposition'] = f'inline; filename="venta_{sale.pk}.pdf"'
        logger.info("User %s generated PDF for sale %s", request.user.pk, sale.pk)
        return response


@role_required('export_sales_excel')
def export_sales_excel(request):
    wb = build_sales_workbook(Sale.objects.all())
    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = 'attachment; filename=ventas.xlsx'
    wb.save(response)
    logger.info("User %s exported the sales workbook", request.user.pk)
    return response

