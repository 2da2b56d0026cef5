"""
Management command to reconcile the filesystem mirror with the database.

The relational row wins: mirrors are written for published records and
removed for everything else.
"""

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import ValidationError
from core.services.reconcile import MirrorReconcileService


class Command(BaseCommand):
    help = (
        "Reconcile published post mirrors with the database (database wins). "
        "Clean mode deletes mirror directories of unpublished and deleted posts."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--mode",
            type=str,
            choices=MirrorReconcileService.VALID_MODES,
            default="audit",
            help=(
                "Reconcile mode: audit (report only), sync (write missing/stale), "
                "clean (remove unexpected + orphaned), full (sync+clean)"
            ),
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Preview changes without applying them",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Required for clean and full modes (prevents accidental deletion)",
        )

    def handle(self, *args, **options):
        mode = options["mode"]
        dry_run = options["dry_run"]
        force = options["force"]
        verbosity = options["verbosity"]

        if mode in MirrorReconcileService.DESTRUCTIVE_MODES and not force:
            raise CommandError(
                f"Mode '{mode}' requires --force flag to prevent accidental data loss"
            )

        if verbosity >= 1:
            self.stdout.write(self.style.SUCCESS("=" * 60))
            self.stdout.write(self.style.SUCCESS("Post Mirror Reconciliation"))
            self.stdout.write(self.style.SUCCESS("=" * 60))
            self.stdout.write("")
            self.stdout.write(f"Mode: {mode}")
            if dry_run:
                self.stdout.write(
                    self.style.WARNING("DRY RUN: No changes will be made")
                )
            self.stdout.write("")

        try:
            stats = MirrorReconcileService().reconcile(
                mode=mode, dry_run=dry_run, force=force
            )
        except ValidationError as e:
            raise CommandError(e.message)

        if verbosity >= 1:
            self._display_stats(stats)

        if stats.errors:
            raise CommandError(f"Reconciliation finished with {len(stats.errors)} error(s)")

    def _display_stats(self, stats):
        """Display reconciliation statistics."""
        self.stdout.write(self.style.SUCCESS("=" * 60))
        self.stdout.write(self.style.SUCCESS("Results"))
        self.stdout.write(self.style.SUCCESS("=" * 60))

        self.stdout.write(f"Records scanned: {stats.records_scanned}")
        self.stdout.write(f"Mirrors on disk: {stats.mirrors_on_disk}")
        self.stdout.write("")

        # Discrepancies
        for label, count in (
            ("Missing mirrors", stats.missing),
            ("Stale mirrors", stats.stale),
            ("Mirrors of unpublished posts", stats.unexpected),
            ("Orphaned mirrors", stats.orphaned),
        ):
            if count > 0:
                self.stdout.write(self.style.WARNING(f"⚠ {label}: {count}"))

        # Actions taken
        if stats.written > 0:
            self.stdout.write(self.style.SUCCESS(f"✓ Mirrors written: {stats.written}"))
        if stats.removed > 0:
            self.stdout.write(self.style.SUCCESS(f"✓ Mirrors removed: {stats.removed}"))

        if stats.errors:
            self.stdout.write("")
            self.stdout.write(self.style.ERROR(f"Errors ({len(stats.errors)}):"))
            for error in stats.errors[:10]:
                self.stdout.write(self.style.ERROR(f"  • {error}"))
            if len(stats.errors) > 10:
                self.stdout.write(
                    self.style.ERROR(f"  ... and {len(stats.errors) - 10} more")
                )

        self.stdout.write("")

        if not any(
            (stats.missing, stats.stale, stats.unexpected, stats.orphaned, stats.errors)
        ):
            self.stdout.write(self.style.SUCCESS("✓ Mirrors are in sync!"))
