"""
Serializers for branches app
"""
from rest_framework import serializers
from .models import Branch


class BranchSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        max_length=255,
        error_messages={'required': 'Branch name is required', 'blank': 'Branch name is required'},
    )
    code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = Branch
        fields = ['id', 'name', 'code', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Branch name is required')
        return value

    def validate_code(self, value):
        # empty code is stored as NULL
        return (value or '').strip() or None
