from django.db import models
import uuid


class Note(models.Model):
    """Free-text reminder kept by a user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='notes'
    )
    note_text = models.TextField()

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notes'
        indexes = [
            models.Index(fields=['user', '-created_at'], name='notes_user_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.note_text[:50]
