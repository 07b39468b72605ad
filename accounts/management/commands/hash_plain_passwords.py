"""
Hash passwords imported as plain text from the legacy system.
Rows whose password is not a recognised Django hash are re-hashed in place.
Usage: python manage.py hash_plain_passwords [--dry-run]
"""
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import identify_hasher
from django.core.management.base import BaseCommand

User = get_user_model()


def _is_hashed(value):
    try:
        identify_hasher(value)
    except ValueError:
        return False
    return True


class Command(BaseCommand):
    help = 'Re-hash users whose password is stored as plain text'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Report only, change nothing')

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        fixed = 0
        for user in User.objects.all().only('id', 'username', 'password'):
            raw = user.password
            if not raw or raw.startswith('!') or _is_hashed(raw):
                continue
            if not dry_run:
                user.set_password(raw)
                user.save(update_fields=['password'])
            fixed += 1
            self.stdout.write(self.style.SUCCESS(f'{"Would hash" if dry_run else "Hashed"}: {user.username}'))
        self.stdout.write(self.style.SUCCESS(f'Done. {fixed} user(s) {"need hashing" if dry_run else "fixed"}.'))
