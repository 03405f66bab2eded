from django.contrib import admin
from .models import Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ['id', 'patient_name', 'doctor', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['patient_name', 'diagnosis', 'doctor__email']
    readonly_fields = ['doctor', 'created_at', 'updated_at']

    def has_delete_permission(self, request, obj=None):
        # Prescriptions are cancelled, never removed
        return False
