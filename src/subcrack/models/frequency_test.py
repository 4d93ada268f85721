import pytest

from subcrack.errors import UnknownLanguageError
from subcrack.models.alphabet import LATIN, Alphabet
from subcrack.models.frequency import (
    ENGLISH,
    LANGUAGES,
    FrequencyModel,
    get_language,
    guess_table,
    observed_order,
)


def letters(indices) -> str:
    return LATIN.decode(indices)


class TestFrequencyModel:
    """Test suite for FrequencyModel"""

    def test_english_order(self):
        """Test the English model ranks e, t, a first"""
        assert letters(ENGLISH.ranked[:3]) == "eta"
        assert ENGLISH.ranked.index(LATIN.index("z")) == 25

    def test_shipped_models_are_permutations(self):
        """Test that every shipped model ranks the whole alphabet once"""
        for model in LANGUAGES.values():
            assert sorted(letters(model.ranked)) == sorted(LATIN.symbols)

    def test_invalid_order(self):
        """Test that an order missing a letter is rejected"""
        with pytest.raises(ValueError, match="must be a permutation"):
            FrequencyModel("broken", "etaoin")

    def test_custom_alphabet(self):
        """Test a model over a smaller alphabet"""
        model = FrequencyModel("tiny", "cab", Alphabet("abc"))
        assert model.ranked == (2, 0, 1)

    @pytest.mark.parametrize(
        "start, expected",
        [
            ("a", "atoen"),
            ("o", "oantiehsrd"),
            ("b", "bpkyvgjfxcqmzwuldrshinoate"),
            ("e", "etaoni"),
            ("z", "zqxjvk"),
        ],
    )
    def test_aligned_order_fans_out(self, start, expected):
        """Test the zig-zag order around a starting rank"""
        order = ENGLISH.aligned_order(ENGLISH.order.index(start))
        assert letters(order).startswith(expected)

    def test_aligned_order_covers_alphabet(self):
        """Test that every start rank yields every letter exactly once"""
        for rank in range(26):
            order = ENGLISH.aligned_order(rank)
            assert sorted(order) == list(range(26))
            assert order[0] == ENGLISH.ranked[rank]


class TestLanguages:
    """Test suite for the language registry"""

    def test_get_language(self):
        """Test lookup by name, ignoring case"""
        assert get_language("English") is ENGLISH
        assert get_language("german").language == "german"

    def test_unknown_language(self):
        """Test that an unknown name raises a KeyError subclass"""
        with pytest.raises(UnknownLanguageError):
            get_language("klingon")
        with pytest.raises(KeyError):
            get_language("klingon")


class TestGuessOrder:
    """Test suite for observed frequencies and guess tables"""

    def test_observed_order(self):
        """Test ranking cipher letters by count, ties in alphabet order"""
        order = observed_order("aaaaa bbvvvbb oo e")
        assert letters(order[:5]) == "abvoe"
        assert letters(order[5:8]) == "cdf"

    def test_observed_order_is_case_insensitive(self):
        """Test that upper and lower case count together"""
        assert letters(observed_order("bB a")[:2]) == "ba"

    def test_frequency_strategy(self):
        """Test that every cipher letter gets the plain model order"""
        table = guess_table(ENGLISH, "whatever", "frequency")
        assert len(table) == 26
        assert all(row == ENGLISH.ranked for row in table)

    def test_aligned_strategy(self):
        """Test that the most common cipher letter starts at the most common plain letter"""
        table = guess_table(ENGLISH, "xxxx qqq z", "aligned")
        assert letters(table[LATIN.index("x")][:3]) == "eta"
        assert letters(table[LATIN.index("q")][:3]) == "tea"
        assert letters(table[LATIN.index("z")][:3]) == "ato"
        assert all(sorted(row) == list(range(26)) for row in table)

    def test_invalid_strategy(self):
        """Test that an unknown strategy is rejected"""
        with pytest.raises(ValueError, match="Invalid guess order"):
            guess_table(ENGLISH, "abc", "random")

    def test_observed_order_counts_translatable_letters_only(self):
        """Test that characters folding onto a symbol are not counted"""
        assert letters(observed_order("\u212a\u212a\u212a b")[:2]) == "ba"
