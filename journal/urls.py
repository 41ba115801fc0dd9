"""URL declarations for the journal application.

HTML pages live at the top level; the JSON API used by the journal tabs
lives under ``/api/``.  Entry ids are UUIDs, so malformed ids never reach a
view and simply 404.
"""

from django.urls import path

from . import views
from . import views_api as api

urlpatterns = [
    # Pages
    path('', views.home, name='home'),
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('register/', views.register, name='register'),

    # Auth
    path('api/auth/user', api.auth_user, name='api_auth_user'),

    # Notes
    path('api/notes', api.notes, name='api_notes'),
    path('api/notes/<uuid:note_id>', api.note_detail, name='api_note_detail'),

    # Poems
    path('api/poems', api.poems, name='api_poems'),
    path('api/poems/prompt', api.poem_prompt, name='api_poem_prompt'),
    path('api/poems/<uuid:poem_id>', api.poem_detail, name='api_poem_detail'),

    # Comfort chat
    path('api/chat/messages', api.chat_messages, name='api_chat_messages'),
]
