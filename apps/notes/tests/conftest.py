import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.notes.models import Note


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def note_owner(db):
    return User.objects.create_user(
        email='notes@example.com',
        password='TestPass123!',
        display_name='Note Owner',
    )


@pytest.fixture
def note_outsider(db):
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def owner_client(api_client, note_owner):
    """Return API client authenticated as the note owner."""
    refresh = RefreshToken.for_user(note_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def note(note_owner):
    return Note.objects.create(user=note_owner, note_text='Llamar a Ana el viernes')


@pytest.fixture
def foreign_note(note_outsider):
    return Note.objects.create(user=note_outsider, note_text='Private')
