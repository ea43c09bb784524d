from django.urls import path
from . import views

urlpatterns = [
    path('', views.SalesIndexView.as_view(), name='sales.index'),
    path('export/excel/', views.export_sales_excel, name='sales.exportExcel'),
    path('<int:pk>/', views.SaleDestroyView.as_view(), name='sales.destroy'),
    path('<int:pk>/pdf/', views.SalePdfView.as_view(), name='sales.generatePDF'),
]
