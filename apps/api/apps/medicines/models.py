"""
Medicine catalog.

Read-mostly; rows are loaded in bulk by the ``import_medicines`` command.
The PostgreSQL GIN index backing full-text search is created in a
migration because it only exists on PostgreSQL.
"""
from django.db import models


class MedicineTypeChoices(models.TextChoices):
    ALLOPATHY = 'allopathy', 'Allopathy'
    AYURVEDIC = 'ayurvedic', 'Ayurvedic'
    HOMEOPATHY = 'homeopathy', 'Homeopathy'
    OTHER = 'other', 'Other'


class Medicine(models.Model):
    name = models.CharField(max_length=255)
    composition = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    manufacturer = models.CharField(max_length=255, blank=True, default='')
    type = models.CharField(
        max_length=20,
        choices=MedicineTypeChoices.choices,
        default=MedicineTypeChoices.ALLOPATHY,
    )
    description = models.TextField(blank=True, default='')
    side_effects = models.TextField(blank=True, default='')
    drug_interactions = models.TextField(blank=True, default='')
    packaging = models.CharField(max_length=255, blank=True, default='')
    is_discontinued = models.BooleanField(default=False)

    class Meta:
        db_table = 'medicine'
        verbose_name = 'Medicine'
        verbose_name_plural = 'Medicines'
        indexes = [
            models.Index(fields=['name'], name='idx_medicine_name'),
            models.Index(fields=['manufacturer'], name='idx_medicine_manufacturer'),
        ]

    def __str__(self):
        return self.name
