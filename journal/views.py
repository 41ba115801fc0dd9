"""HTML views for Talking Notes.

This module implements the account pages (registration, login, logout) and
the single page that hosts the three journal tabs.  Anonymous visitors to the
root URL see the landing page; signed-in users get the tabbed home page, which
is rendered with their current notes, poems and chat history and then kept up
to date by ``static/journal/journal.js`` talking to the JSON API in
:mod:`journal.views_api`.
"""

from __future__ import annotations

import logging

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods

from .forms import LoginForm, RegistrationForm
from .services.writing import COMFORT_PROMPTS

logger = logging.getLogger(__name__)

JOURNAL_TABS = (
    ('notes', 'Notes'),
    ('poems', 'Poems'),
    ('console', 'Console'),
)


def register(request: HttpRequest) -> HttpResponse:
    """Create an account and send the new user to the login page."""
    if request.user.is_authenticated:
        return redirect('home')

    if request.method == 'POST':
        form = RegistrationForm(request.POST)
        if form.is_valid():
            email = form.cleaned_data['email']
            User.objects.create_user(
                username=email,
                email=email,
                password=form.cleaned_data['password'],
                first_name=form.cleaned_data['first_name'],
                last_name=form.cleaned_data.get('last_name', ''),
            )
            logger.info('Registered new account %s', email)
            messages.success(request, 'Registration successful. You can now log in.')
            return redirect('login')
    else:
        form = RegistrationForm()

    return render(request, 'journal/register.html', {'form': form})


def login_view(request: HttpRequest) -> HttpResponse:
    """Authenticate a user via email and password."""
    if request.user.is_authenticated:
        return redirect('home')
    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            email = form.cleaned_data['email'].lower()
            password = form.cleaned_data['password']
            user = authenticate(request, username=email, password=password)
            if user:
                login(request, user)
                next_url = request.GET.get('next')
                if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                    return redirect(next_url)
                return redirect('home')
            messages.error(request, 'Invalid email or password.')
    else:
        form = LoginForm()
    return render(request, 'journal/login.html', {'form': form})


@require_http_methods(["GET", "POST"])
def logout_view(request: HttpRequest) -> HttpResponse:
    """Log the user out and return to the landing page."""
    logout(request)
    return redirect('home')


def home(request: HttpRequest) -> HttpResponse:
    """Landing page for visitors, tabbed journal for signed-in users."""
    if not request.user.is_authenticated:
        return render(request, 'journal/landing.html')

    store = request.journal_store
    user_id = request.user.pk
    active_tab = request.GET.get('tab', 'notes')
    if active_tab not in dict(JOURNAL_TABS):
        active_tab = 'notes'
    context = {
        'tabs': JOURNAL_TABS,
        'active_tab': active_tab,
        'notes': store.list_notes(user_id),
        'poems': store.list_poems(user_id),
        'chat_history': store.list_chat_messages(user_id),
        'comfort_prompts': COMFORT_PROMPTS,
    }
    return render(request, 'journal/home.html', context)
