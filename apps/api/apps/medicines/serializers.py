from rest_framework import serializers
from .models import Medicine


class MedicineSerializer(serializers.ModelSerializer):

    class Meta:
        model = Medicine
        fields = [
            'id',
            'name',
            'composition',
            'price',
            'manufacturer',
            'type',
            'description',
            'side_effects',
            'drug_interactions',
            'packaging',
            'is_discontinued',
        ]
        read_only_fields = fields
