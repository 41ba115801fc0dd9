"""Django admin configuration for journal models."""

from django.contrib import admin

from .models import ChatMessage, Note, Poem


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'updated_at')
    list_filter = ('user',)
    search_fields = ('title', 'content', 'user__email')


@admin.register(Poem)
class PoemAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'word_count', 'updated_at')
    list_filter = ('user',)
    search_fields = ('title', 'content', 'user__email')


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    """Chat lines are immutable once written, so the admin is read-only."""

    list_display = ('user', 'is_user', 'created_at')
    list_filter = ('is_user', 'user')
    readonly_fields = ('user', 'message', 'is_user', 'created_at')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
