from getpass import getpass

from django.core.management.base import BaseCommand, CommandError

from core.models import User
from core.roles import ROLE_CONFIG


class Command(BaseCommand):
    help = 'Create a login account with the given role.'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('name')
        parser.add_argument('--role', choices=sorted(ROLE_CONFIG), default=User.MEMBER)
        parser.add_argument('--password', help='Prompted for when omitted.')

    def handle(self, *args, **options):
        email = options['email']
        if User.objects.filter(email__iexact=email).exists():
            raise CommandError(f"A user with the email '{email}' already exists.")

        password = options['password'] or getpass('Password: ')
        if not password:
            raise CommandError('A password is required.')

        user = User.objects.create_user(
            email=email,
            name=options['name'],
            password=password,
            role=options['role'],
        )
        label = ROLE_CONFIG[user.role]['label']
        self.stdout.write(self.style.SUCCESS(f"Created {label} {user.email}"))
