from django.core.validators import MinValueValidator
from django.db import models


class Sale(models.Model):
    seller = models.CharField(max_length=120)
    customer = models.CharField(max_length=120)
    payment = models.CharField(max_length=60)
    total = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(condition=models.Q(total__gte=0), name='sales_total_non_negative'),
        ]

    def __str__(self):
        return f"Venta #{self.pk} - {self.customer}"
