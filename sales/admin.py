from django.contrib import admin
from .models import Sale

@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('id', 'seller', 'customer', 'payment', 'total', 'created_at')
    search_fields = ('seller', 'customer')
    list_filter = ('payment', 'created_at')
    readonly_fields = ('created_at',)
