"""
Management command to delete item images that no item references
"""
from django.core.management.base import BaseCommand
from utils.file_cleanup import DEFAULT_MIN_AGE_SECONDS, FileCleanupManager


class Command(BaseCommand):
    help = "Deletes uploaded item images left behind by failed item creations"

    def add_arguments(self, parser):
        parser.add_argument(
            '--user',
            dest='principal_id',
            help='Only sweep the images of this user id',
        )
        parser.add_argument(
            '--min-age',
            type=int,
            default=DEFAULT_MIN_AGE_SECONDS,
            help='Skip images uploaded less than this many seconds ago',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List orphaned images without deleting them',
        )

    def handle(self, *args, **options):
        manager = FileCleanupManager()
        names = manager.cleanup_orphaned_images(
            principal_id=options['principal_id'],
            dry_run=options['dry_run'],
            min_age_seconds=options['min_age'],
        )

        for name in names:
            self.stdout.write(name)

        verb = 'Found' if options['dry_run'] else 'Deleted'
        self.stdout.write(self.style.SUCCESS(f"{verb} {len(names)} orphaned images"))
