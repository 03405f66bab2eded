"""
Load the medicine catalog from a CSV export.

Usage:
    python manage.py import_medicines medicine_data.csv [--limit 5000] [--clear]

Expected columns: product_name, salt_composition, product_price,
product_manufacturer, medicine_desc, side_effects, drug_interactions,
pack_size_label. Rows without a product name are skipped.
"""
import csv
import re
from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.core.cache import get_default_cache
from apps.medicines.models import Medicine

BATCH_SIZE = 1000

_PRICE_JUNK = re.compile(r'[^0-9.]')


def parse_price(raw):
    """'₹1,234.50' -> Decimal('1234.50'); unparseable -> None."""
    cleaned = _PRICE_JUNK.sub('', raw or '')
    if not cleaned:
        return None
    try:
        return Decimal(cleaned).quantize(Decimal('0.01'))
    except InvalidOperation:
        return None


def row_to_medicine(row):
    name = (row.get('product_name') or '').strip()
    if not name:
        return None
    return Medicine(
        name=name[:255],
        composition=(row.get('salt_composition') or '').strip(),
        price=parse_price(row.get('product_price')),
        manufacturer=(row.get('product_manufacturer') or '').strip()[:255],
        description=(row.get('medicine_desc') or '').strip(),
        side_effects=(row.get('side_effects') or '').strip(),
        drug_interactions=(row.get('drug_interactions') or '').strip(),
        packaging=(row.get('pack_size_label') or '').strip()[:255],
    )


class Command(BaseCommand):
    help = 'Import medicines from a CSV file in batches of 1000.'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the CSV file')
        parser.add_argument('--limit', type=int, default=None, help='Stop after this many rows')
        parser.add_argument('--clear', action='store_true', help='Delete the existing catalog first')

    def handle(self, *args, **options):
        path = options['csv_path']
        limit = options['limit']

        try:
            handle = open(path, newline='', encoding='utf-8')
        except OSError as e:
            raise CommandError(f'Cannot open {path}: {e}')

        if options['clear']:
            deleted, _ = Medicine.objects.all().delete()
            self.stdout.write(self.style.WARNING(f'Deleted {deleted} existing medicines'))

        inserted = 0
        skipped = 0
        batch = []
        with handle:
            for row in csv.DictReader(handle):
                if limit is not None and inserted + len(batch) >= limit:
                    break
                medicine = row_to_medicine(row)
                if medicine is None:
                    skipped += 1
                    continue
                batch.append(medicine)
                if len(batch) >= BATCH_SIZE:
                    inserted += self._flush(batch)
                    batch = []
                    self.stdout.write(f'Inserted {inserted} records...')

        if batch:
            inserted += self._flush(batch)

        get_default_cache().delete_pattern('medicines:*')
        self.stdout.write(self.style.SUCCESS(f'Imported {inserted} medicines ({skipped} rows skipped)'))

    def _flush(self, batch):
        with transaction.atomic():
            Medicine.objects.bulk_create(batch, batch_size=BATCH_SIZE)
        return len(batch)
