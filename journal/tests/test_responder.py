"""Tests for the comfort chat reply selection."""

import random

from django.test import SimpleTestCase

from journal.services.responder import (
    ANGER_RESPONSE,
    ANXIETY_RESPONSE,
    EXHAUSTION_RESPONSE,
    FEAR_RESPONSE,
    GENERIC_RESPONSES,
    HELP_RESPONSE,
    LONELINESS_RESPONSE,
    RESPONSE_RULES,
    SADNESS_RESPONSE,
    ComfortResponder,
    match_rule,
    select_response,
)


class SelectResponseTests(SimpleTestCase):
    def test_lonely_and_alone_return_loneliness_response(self) -> None:
        for message in ['I feel so alone today', 'so LONELY tonight', 'Alone again', 'lonelyness']:
            with self.subTest(message=message):
                self.assertEqual(select_response(message), LONELINESS_RESPONSE)

    def test_each_keyword_group_selects_its_reply(self) -> None:
        cases = {
            'Feeling really down today': SADNESS_RESPONSE,
            'I am so depressed': SADNESS_RESPONSE,
            "I'm stressed about exams": ANXIETY_RESPONSE,
            'Everything is overwhelming me, I am overwhelmed': ANXIETY_RESPONSE,
            "I'm exhausted after work": EXHAUSTION_RESPONSE,
            'Totally burnt out this week': EXHAUSTION_RESPONSE,
            "I'm frustrated with my boss": ANGER_RESPONSE,
            "I'm scared of the dark": FEAR_RESPONSE,
            'Can you help me?': HELP_RESPONSE,
            'I could use some support': HELP_RESPONSE,
        }
        for message, expected in cases.items():
            with self.subTest(message=message):
                self.assertEqual(select_response(message), expected)

    def test_earlier_group_wins_when_several_match(self) -> None:
        """Loneliness outranks sadness, which outranks help-seeking."""

        self.assertEqual(select_response('I need help, I am sad and alone'), LONELINESS_RESPONSE)
        self.assertEqual(select_response('I need help because I am sad'), SADNESS_RESPONSE)

    def test_unmatched_message_falls_back_to_generic_pool(self) -> None:
        for message in ['The weather was pleasant this morning', 'I baked bread', '']:
            with self.subTest(message=message):
                self.assertIn(select_response(message), GENERIC_RESPONSES)

    def test_fallback_uses_supplied_random_source(self) -> None:
        first = select_response('Went for a walk', rng=random.Random(7))
        second = select_response('Went for a walk', rng=random.Random(7))
        self.assertEqual(first, second)

    def test_rule_order_and_pool_size(self) -> None:
        self.assertEqual(
            [rule.name for rule in RESPONSE_RULES],
            ['loneliness', 'sadness', 'anxiety', 'exhaustion', 'anger', 'fear', 'help'],
        )
        self.assertEqual(len(GENERIC_RESPONSES), 10)

    def test_match_rule_returns_none_without_keywords(self) -> None:
        self.assertIsNone(match_rule('Reading a good book'))
        self.assertEqual(match_rule('AFRAID of heights').name, 'fear')


class ComfortResponderTests(SimpleTestCase):
    def test_seeded_responder_is_repeatable(self) -> None:
        responder_a = ComfortResponder(random.Random(42))
        responder_b = ComfortResponder(random.Random(42))
        replies_a = [responder_a('Just a regular day') for _ in range(5)]
        replies_b = [responder_b('Just a regular day') for _ in range(5)]
        self.assertEqual(replies_a, replies_b)

    def test_keyword_reply_ignores_randomness(self) -> None:
        self.assertEqual(ComfortResponder()('nobody around, all alone'), LONELINESS_RESPONSE)
