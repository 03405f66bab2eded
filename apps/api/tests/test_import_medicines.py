"""
Tests for the catalog CSV import command.
"""
from decimal import Decimal

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.medicines.management.commands.import_medicines import parse_price
from apps.medicines.models import Medicine

HEADER = (
    'product_name,salt_composition,product_price,product_manufacturer,'
    'medicine_desc,side_effects,drug_interactions,pack_size_label\n'
)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / 'medicines.csv'
    path.write_text(
        HEADER
        + 'Paracetamol 500mg,Paracetamol (500mg),"₹1,234.50",Acme,Pain relief,Nausea,,strip of 10\n'
        + ',Missing name,10,Acme,,,,\n'
        + 'Ibuprofen 200mg,Ibuprofen (200mg),n/a,Other,,,,\n',
        encoding='utf-8',
    )
    return path


@pytest.mark.parametrize('raw,expected', [
    ('₹1,234.50', Decimal('1234.50')),
    ('42', Decimal('42.00')),
    ('n/a', None),
    ('', None),
    (None, None),
])
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


@pytest.mark.django_db
class TestImportMedicines:

    def test_imports_and_skips_blank_names(self, csv_file):
        call_command('import_medicines', str(csv_file))

        assert Medicine.objects.count() == 2
        paracetamol = Medicine.objects.get(name='Paracetamol 500mg')
        assert paracetamol.price == Decimal('1234.50')
        assert paracetamol.packaging == 'strip of 10'
        assert Medicine.objects.get(name='Ibuprofen 200mg').price is None

    def test_limit(self, csv_file):
        call_command('import_medicines', str(csv_file), limit=1)

        assert Medicine.objects.count() == 1

    def test_clear(self, csv_file, medicine_factory):
        medicine_factory('Stale entry')

        call_command('import_medicines', str(csv_file), clear=True)

        assert not Medicine.objects.filter(name='Stale entry').exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError):
            call_command('import_medicines', str(tmp_path / 'absent.csv'))
