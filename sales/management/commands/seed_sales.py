import random
from decimal import Decimal

from django.core.management.base import BaseCommand
from sales.models import Sale

SELLERS = ['Ana Torres', 'Luis Ramírez', 'Carmen Ortega', 'Jorge Medina']
CUSTOMERS = [
    'Ferretería El Martillo',
    'Papelería La Estrella',
    'Abarrotes Don Pepe',
    'Farmacia San Rafael',
    'Cafetería Aroma',
    'Taller Mecánico Hernández',
]
PAYMENTS = ['Efectivo', 'Tarjeta', 'Transferencia']


class Command(BaseCommand):
    help = 'Seed demo sales records.'

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=10)

    def handle(self, *args, **options):
        created = 0
        for _ in range(options['count']):
            Sale.objects.create(
                seller=random.choice(SELLERS),
                customer=random.choice(CUSTOMERS),
                payment=random.choice(PAYMENTS),
                total=Decimal(random.randint(500, 500000)) / 100,
            )
            created += 1
        self.stdout.write(self.style.SUCCESS(f"Seeded {created} sales."))
