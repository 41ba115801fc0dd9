"""Tests for the note and poem text helpers."""

import random

from django.test import SimpleTestCase

from journal.services.writing import (
    POEM_PROMPTS,
    count_words,
    derive_note_title,
    random_poem_prompt,
)


class WritingHelperTests(SimpleTestCase):
    def test_count_words_splits_on_any_whitespace(self) -> None:
        self.assertEqual(count_words('roses are\nred,\tviolets   blue'), 5)
        self.assertEqual(count_words('   '), 0)
        self.assertEqual(count_words(None), 0)

    def test_short_content_becomes_title_verbatim(self) -> None:
        self.assertEqual(derive_note_title('  Quiet morning  '), 'Quiet morning')

    def test_long_content_is_cut_with_ellipsis(self) -> None:
        content = 'x' * 80
        title = derive_note_title(content)
        self.assertEqual(title, 'x' * 50 + '...')

    def test_random_prompt_comes_from_fixed_list(self) -> None:
        self.assertIn(random_poem_prompt(random.Random(3)), POEM_PROMPTS)
        self.assertEqual(len(POEM_PROMPTS), 8)
