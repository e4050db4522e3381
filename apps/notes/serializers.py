from rest_framework import serializers
from .models import Note


class NoteSerializer(serializers.ModelSerializer):
    """Serializer for notes. The owner is always the requesting user."""

    class Meta:
        model = Note
        fields = ['id', 'note_text', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_note_text(self, value):
        if not value.strip():
            raise serializers.ValidationError('Note text cannot be empty')
        return value.strip()
