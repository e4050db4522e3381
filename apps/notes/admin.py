from django.contrib import admin
from .models import Note


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ['short_text', 'user', 'created_at']
    search_fields = ['note_text', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'

    def short_text(self, obj):
        return str(obj)
    short_text.short_description = 'Note'
