from rest_framework import viewsets
from rest_framework.pagination import PageNumberPagination
import structlog
from .models import Note
from .serializers import NoteSerializer

logger = structlog.get_logger(__name__)


class NotePagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 100


class NoteViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the user's notes.

    list: Notes, newest first
    create: Add a note
    retrieve: Get a note
    update: Replace the note text
    destroy: Delete a note
    """

    serializer_class = NoteSerializer
    pagination_class = NotePagination

    def get_queryset(self):
        return Note.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        note = serializer.save(user=self.request.user)
        logger.info('note_created', note_id=str(note.id), user_id=str(self.request.user.id))

    def perform_destroy(self, instance):
        note_id = instance.id
        instance.delete()
        logger.info('note_deleted', note_id=str(note_id))
