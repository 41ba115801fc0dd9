"""Tests for the account pages, the home page and the user endpoint."""

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from journal.models import ChatMessage, Note, Poem


class AuthUserEndpointTests(TestCase):
    def test_returns_signed_in_user(self) -> None:
        user = User.objects.create_user(
            'ada@example.com',
            email='ada@example.com',
            password='quiet-harbour-42',
            first_name='Ada',
            last_name='Lovelace',
        )
        self.client.force_login(user)

        response = self.client.get(reverse('api_auth_user'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                'id': user.pk,
                'email': 'ada@example.com',
                'firstName': 'Ada',
                'lastName': 'Lovelace',
                'username': 'ada@example.com',
            },
        )

    def test_anonymous_gets_401(self) -> None:
        self.assertEqual(self.client.get(reverse('api_auth_user')).status_code, 401)


class HomePageTests(TestCase):
    def test_anonymous_visitor_sees_landing_page(self) -> None:
        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'journal/landing.html')
        self.assertContains(response, 'Begin Your Journey')

    def test_signed_in_user_sees_their_entries(self) -> None:
        user = User.objects.create_user('home@example.com', password='quiet-harbour-42', first_name='Robin')
        other = User.objects.create_user('away@example.com', password='quiet-harbour-42')
        Note.objects.create(user=user, title='Grocery thoughts', content='apples')
        Note.objects.create(user=other, title='Not yours', content='hidden')
        Poem.objects.create(user=user, title='Small poem', content='tiny\nverse\nhere', word_count='3')
        ChatMessage.objects.create(user=user, message='hello there', is_user=True)
        self.client.force_login(user)

        response = self.client.get(reverse('home'), {'tab': 'poems'})

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'journal/home.html')
        self.assertEqual(response.context['active_tab'], 'poems')
        self.assertEqual([note.title for note in response.context['notes']], ['Grocery thoughts'])
        self.assertContains(response, 'Welcome back, Robin')
        self.assertContains(response, 'Small poem')
        self.assertContains(response, '3 words')
        self.assertContains(response, 'hello there')
        self.assertContains(response, '1 word ·')
        self.assertNotContains(response, 'Not yours')

    def test_unknown_tab_falls_back_to_notes(self) -> None:
        user = User.objects.create_user('tabs@example.com', password='quiet-harbour-42')
        self.client.force_login(user)
        response = self.client.get(reverse('home'), {'tab': 'settings'})
        self.assertEqual(response.context['active_tab'], 'notes')


class AccountViewTests(TestCase):
    def test_registration_creates_user_and_redirects_to_login(self) -> None:
        response = self.client.post(
            reverse('register'),
            {
                'email': 'New.Writer@example.com',
                'first_name': 'New',
                'last_name': 'Writer',
                'password': 'quiet-harbour-42',
                'confirm_password': 'quiet-harbour-42',
            },
        )

        self.assertRedirects(response, reverse('login'))
        user = User.objects.get(username='new.writer@example.com')
        self.assertEqual(user.first_name, 'New')
        self.assertTrue(user.check_password('quiet-harbour-42'))

    def test_registration_rejects_mismatched_passwords(self) -> None:
        response = self.client.post(
            reverse('register'),
            {
                'email': 'typo@example.com',
                'first_name': 'Typo',
                'password': 'quiet-harbour-42',
                'confirm_password': 'quiet-harbour-43',
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(username='typo@example.com').exists())
        self.assertIn('confirm_password', response.context['form'].errors)

    def test_registration_rejects_duplicate_email(self) -> None:
        User.objects.create_user('taken@example.com', password='quiet-harbour-42')
        response = self.client.post(
            reverse('register'),
            {
                'email': 'taken@example.com',
                'first_name': 'Again',
                'password': 'quiet-harbour-42',
                'confirm_password': 'quiet-harbour-42',
            },
        )
        self.assertIn('email', response.context['form'].errors)

    def test_login_with_valid_credentials_redirects_home(self) -> None:
        User.objects.create_user('login@example.com', password='quiet-harbour-42')

        response = self.client.post(reverse('login'), {'email': 'login@example.com', 'password': 'quiet-harbour-42'})

        self.assertRedirects(response, reverse('home'))
        self.assertEqual(self.client.get(reverse('api_auth_user')).status_code, 200)

    def test_login_with_wrong_password_shows_error(self) -> None:
        User.objects.create_user('login@example.com', password='quiet-harbour-42')

        response = self.client.post(reverse('login'), {'email': 'login@example.com', 'password': 'nope'})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid email or password.')

    def test_login_ignores_offsite_next_url(self) -> None:
        User.objects.create_user('login@example.com', password='quiet-harbour-42')
        response = self.client.post(
            reverse('login') + '?next=https://evil.example.com/',
            {'email': 'login@example.com', 'password': 'quiet-harbour-42'},
        )
        self.assertRedirects(response, reverse('home'))

    def test_logout_ends_session(self) -> None:
        user = User.objects.create_user('bye@example.com', password='quiet-harbour-42')
        self.client.force_login(user)

        response = self.client.post(reverse('logout'))

        self.assertRedirects(response, reverse('home'))
        self.assertEqual(self.client.get(reverse('api_notes')).status_code, 401)
