from django.contrib import admin
from .models import Medicine


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ['name', 'manufacturer', 'type', 'price', 'is_discontinued']
    list_filter = ['type', 'is_discontinued']
    search_fields = ['name', 'composition', 'manufacturer']
