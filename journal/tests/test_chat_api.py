"""Tests for the comfort chat endpoints."""

import json

from django.contrib.auth.models import User
from django.test import TestCase, override_settings
from django.urls import reverse

from journal.models import ChatMessage
from journal.services.responder import GENERIC_RESPONSES, LONELINESS_RESPONSE


class ChatMessagesAPITests(TestCase):
    """Posting, listing and clearing the conversation through the ORM store."""

    def setUp(self) -> None:
        self.user = User.objects.create_user('talker@example.com', password='quiet-harbour-42')
        self.client.force_login(self.user)
        self.url = reverse('api_chat_messages')

    def _post(self, payload):
        return self.client.post(self.url, data=json.dumps(payload), content_type='application/json')

    def test_user_message_gets_loneliness_reply(self) -> None:
        response = self._post({'message': 'I feel so alone today', 'isUser': 'true'})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['userMessage']['message'], 'I feel so alone today')
        self.assertTrue(body['userMessage']['isUser'])
        self.assertEqual(body['botMessage']['message'], LONELINESS_RESPONSE)
        self.assertFalse(body['botMessage']['isUser'])

    def test_boolean_flag_is_accepted(self) -> None:
        body = self._post({'message': 'Just checking in', 'isUser': True}).json()
        self.assertIn(body['botMessage']['message'], GENERIC_RESPONSES)

    def test_bot_authored_post_returns_only_user_message(self) -> None:
        response = self._post({'message': 'Welcome to your console', 'isUser': 'false'})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(set(body), {'userMessage'})
        self.assertFalse(body['userMessage']['isUser'])
        self.assertEqual(ChatMessage.objects.count(), 1)

    def test_invalid_payloads_are_rejected(self) -> None:
        payloads = [
            {'message': '   ', 'isUser': 'true'},
            {'message': 'hi', 'isUser': 'maybe'},
            {'message': 12345, 'isUser': True},
            {'message': 'no author flag'},
            {},
        ]
        for payload in payloads:
            with self.subTest(payload=payload):
                response = self._post(payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()['message'], 'Invalid message data')
        self.assertFalse(ChatMessage.objects.exists())

    def test_history_is_in_conversation_order(self) -> None:
        self._post({'message': 'I am so tired', 'isUser': 'true'})
        self._post({'message': 'thank you', 'isUser': 'true'})

        history = self.client.get(self.url).json()

        self.assertEqual(len(history), 4)
        self.assertEqual([line['isUser'] for line in history], [True, False, True, False])
        self.assertEqual(history[0]['message'], 'I am so tired')
        self.assertEqual(history[2]['message'], 'thank you')

    def test_clear_then_list_is_empty(self) -> None:
        self._post({'message': 'I feel so alone today', 'isUser': 'true'})

        response = self.client.delete(self.url)
        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.client.get(self.url).json(), [])

    def test_clear_leaves_other_users_history(self) -> None:
        other = User.objects.create_user('listener@example.com', password='quiet-harbour-42')
        ChatMessage.objects.create(user=other, message='their words', is_user=True)
        self._post({'message': 'mine', 'isUser': 'true'})

        self.client.delete(self.url)

        self.assertEqual(list(ChatMessage.objects.values_list('message', flat=True)), ['their words'])

    def test_clearing_empty_history_still_succeeds(self) -> None:
        self.assertEqual(self.client.delete(self.url).status_code, 204)

    def test_anonymous_access_is_rejected(self) -> None:
        self.client.logout()
        self.assertEqual(self.client.get(self.url).status_code, 401)
        self.assertEqual(self.client.delete(self.url).status_code, 401)


@override_settings(JOURNAL_STORE_BACKEND='journal.services.journal_store.InMemoryJournalStore')
class InMemoryBackedChatTests(TestCase):
    """The API works unchanged when the in-memory store is configured."""

    def setUp(self) -> None:
        self.user = User.objects.create_user('memory@example.com', password='quiet-harbour-42')
        self.client.force_login(self.user)
        self.url = reverse('api_chat_messages')

    def test_conversation_round_trip_without_touching_the_database(self) -> None:
        response = self.client.post(
            self.url,
            data=json.dumps({'message': 'I feel so alone today', 'isUser': 'true'}),
            content_type='application/json',
        )
        self.assertEqual(response.json()['botMessage']['message'], LONELINESS_RESPONSE)
        self.assertEqual(len(self.client.get(self.url).json()), 2)
        self.assertFalse(ChatMessage.objects.exists())

        self.client.delete(self.url)
        self.assertEqual(self.client.get(self.url).json(), [])
