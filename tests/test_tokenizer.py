from wordscraper.tokenizer import WordPattern, normalize_stopwords, tokenize


def test_tokenize_lowercases_and_keeps_order_and_duplicates() -> None:
    assert tokenize("The Cat saw the cat.") == ["the", "cat", "saw", "the", "cat"]


def test_tokenize_empty_text() -> None:
    assert tokenize("") == []
    assert tokenize("  ... !! ") == []


def test_stopwords_are_case_insensitive_and_trimmed() -> None:
    tokens = tokenize("The cat and THE dog", stopwords=["  the ", "AND"])
    assert tokens == ["cat", "dog"]


def test_normalize_stopwords_drops_blanks() -> None:
    assert normalize_stopwords(["", " A ", "b\t", "   "]) == frozenset({"a", "b"})


def test_word_pattern_splits_on_apostrophes_and_hyphens() -> None:
    assert tokenize("don't well-known", pattern=WordPattern.WORD) == ["don", "t", "well", "known"]


def test_contractions_pattern_keeps_internal_apostrophes_and_hyphens() -> None:
    tokens = tokenize("Don't stop: well-known 'quoted' words-", pattern="contractions")
    assert tokens == ["don't", "stop", "well-known", "quoted", "words"]


def test_alpha_pattern_skips_pure_numbers() -> None:
    assert tokenize("2024 was year2024 of 42 cats", pattern="alpha") == ["was", "year2024", "of", "cats"]
    assert tokenize("2024 was year2024", pattern="word") == ["2024", "was", "year2024"]


def test_underscores_are_word_characters() -> None:
    assert tokenize("snake_case name") == ["snake_case", "name"]


def test_frozenset_stopwords_are_still_normalized() -> None:
    assert tokenize("The cat", frozenset({"The"})) == ["cat"]
    assert tokenize("The cat", frozenset({" the "})) == ["cat"]
