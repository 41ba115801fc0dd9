"""Forms used by the journal application.

The login and registration forms back the HTML account pages.  The entry
forms validate JSON payloads sent to the API: they accept the camelCase keys
used on the wire, fill in derived values (fallback titles, poem word counts)
and expose ``entry_data`` in the snake_case shape the journal store expects.
Passing ``partial=True`` validates only the keys present in the payload, which
is how PATCH requests merge changes into an existing entry.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from django import forms
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password

from journal.services.writing import DEFAULT_POEM_TITLE, count_words, derive_note_title


class RegistrationForm(forms.Form):
    """Collects the information required to create a journal account."""

    email = forms.EmailField(label='Email', widget=forms.EmailInput(attrs={
        'class': 'form-control',
        'placeholder': 'you@example.com',
    }))
    first_name = forms.CharField(label='First Name', max_length=150, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'Jane',
    }))
    last_name = forms.CharField(label='Last Name', max_length=150, required=False, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'Doe',
    }))
    password = forms.CharField(label='Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
        'placeholder': '••••••••',
    }))
    confirm_password = forms.CharField(label='Confirm Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
        'placeholder': '••••••••',
    }))

    def clean_email(self) -> str:
        email = self.cleaned_data['email'].lower()
        if User.objects.filter(username=email).exists():
            raise forms.ValidationError('An account with this email already exists.')
        return email

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        confirm = cleaned_data.get('confirm_password')
        if password and confirm and password != confirm:
            self.add_error('confirm_password', 'Passwords do not match.')
        elif password:
            try:
                validate_password(password)
            except forms.ValidationError as exc:
                self.add_error('password', exc)
        return cleaned_data


class LoginForm(forms.Form):
    """Simple login form requesting email and password."""

    email = forms.EmailField(label='Email', widget=forms.EmailInput(attrs={
        'class': 'form-control',
        'placeholder': 'you@example.com',
    }))
    password = forms.CharField(label='Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
        'placeholder': '••••••••',
    }))


class JournalEntryForm(forms.Form):
    """Base class for the JSON entry forms.

    ``field_aliases`` maps wire (camelCase) keys to form field names.  With
    ``partial=True`` fields missing from the payload are neither required nor
    included in :attr:`entry_data`.
    """

    field_aliases: Dict[str, str] = {}
    #: text fields that also take a JSON integer
    integer_text_fields: frozenset = frozenset()

    def __init__(self, payload: Mapping[str, Any] | None = None, *, partial: bool = False, **kwargs: Any) -> None:
        data = {}
        for key, value in (payload or {}).items():
            data[self.field_aliases.get(key, key)] = value
        super().__init__(data=data, **kwargs)
        self.partial = partial
        self.provided = {name for name in self.fields if name in data}
        if partial:
            for name, form_field in self.fields.items():
                if name not in self.provided:
                    form_field.required = False

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        for name in self.provided:
            raw = self.data.get(name)
            if not isinstance(self.fields[name], forms.CharField) or raw is None or isinstance(raw, str):
                continue
            if name in self.integer_text_fields and isinstance(raw, int) and not isinstance(raw, bool):
                continue
            self.add_error(name, 'Expected a string.')
        return cleaned_data

    @property
    def entry_data(self) -> Dict[str, Any]:
        if not hasattr(self, 'cleaned_data'):
            raise ValueError('Form must be validated before reading entry_data.')
        if not self.partial:
            return dict(self.cleaned_data)
        return {name: value for name, value in self.cleaned_data.items() if name in self.provided}


class NoteForm(JournalEntryForm):
    """Validates note payloads.  A blank title is derived from the content."""

    title = forms.CharField(required=False, strip=True)
    content = forms.CharField(strip=False, error_messages={'required': 'Please write something before saving.'})

    def clean_content(self) -> str:
        content = self.cleaned_data.get('content') or ''
        if 'content' in self.provided and not content.strip():
            raise forms.ValidationError('Please write something before saving.')
        return content

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        if self.partial:
            if 'title' in self.provided and not cleaned_data.get('title'):
                if cleaned_data.get('content'):
                    cleaned_data['title'] = derive_note_title(cleaned_data['content'])
                else:
                    self.add_error('title', 'Title cannot be blank.')
            return cleaned_data
        if not cleaned_data.get('title') and cleaned_data.get('content'):
            cleaned_data['title'] = derive_note_title(cleaned_data['content'])
        return cleaned_data


class PoemForm(JournalEntryForm):
    """Validates poem payloads and keeps ``word_count`` in step with content."""

    field_aliases = {'wordCount': 'word_count'}
    integer_text_fields = frozenset({'word_count'})

    title = forms.CharField(required=False, strip=True)
    content = forms.CharField(strip=False)
    word_count = forms.CharField(max_length=16, required=False)

    def clean_content(self) -> str:
        content = self.cleaned_data.get('content') or ''
        if 'content' in self.provided and not content.strip():
            raise forms.ValidationError('A poem needs some words.')
        return content

    def clean_word_count(self) -> str:
        value = (self.cleaned_data.get('word_count') or '').strip()
        if value and not value.isdigit():
            raise forms.ValidationError('Word count must be a whole number.')
        return value

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        content = cleaned_data.get('content')
        if 'title' in self.provided or not self.partial:
            if not cleaned_data.get('title'):
                cleaned_data['title'] = DEFAULT_POEM_TITLE
        if content and not cleaned_data.get('word_count'):
            cleaned_data['word_count'] = str(count_words(content))
            self.provided.add('word_count')
        return cleaned_data


class ChatMessageForm(JournalEntryForm):
    """Validates chat posts.  ``isUser`` may be a boolean or "true"/"false"."""

    field_aliases = {'isUser': 'is_user'}

    message = forms.CharField(strip=False)
    is_user = forms.NullBooleanField(required=False)

    def clean_message(self) -> str:
        message = self.cleaned_data.get('message') or ''
        if not message.strip():
            raise forms.ValidationError('Message cannot be empty.')
        return message

    def clean_is_user(self) -> bool:
        raw = self.data.get('is_user')
        if raw in (None, ''):
            raise forms.ValidationError('isUser is required.')
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and raw.strip().lower() in ('true', 'false'):
            return raw.strip().lower() == 'true'
        raise forms.ValidationError('isUser must be true or false.')
