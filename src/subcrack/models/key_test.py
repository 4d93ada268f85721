import random
from collections import Counter

import pytest

from subcrack.errors import InvalidSymbolError, KeyConflictError
from subcrack.models.alphabet import LATIN
from subcrack.models.key import Key

ROT13 = "nopqrstuvwxyzabcdefghijklm"


def idx(symbol: str) -> int:
    return LATIN.index(symbol)


class TestKeyAssignment:
    """Test suite for Key assign/unassign"""

    def test_new_key_is_empty(self):
        """Test that a fresh key has no assignments"""
        key = Key()
        assert len(key) == 0
        assert key.plain_for(idx("a")) is None
        assert key.cipher_for(idx("a")) is None
        assert key.cipher_alphabet() == "." * 26

    def test_assign_updates_both_views(self):
        """Test that the forward and inverse views move together"""
        key = Key()
        key.assign(idx("q"), idx("e"))
        assert key.plain_for(idx("q")) == idx("e")
        assert key.cipher_for(idx("e")) == idx("q")
        assert len(key) == 1
        assert key.is_consistent()

    def test_unassign_clears_both_views(self):
        """Test that unassign removes the pair from both views"""
        key = Key()
        key.assign(idx("q"), idx("e"))
        key.unassign(idx("q"))
        assert key.plain_for(idx("q")) is None
        assert key.cipher_for(idx("e")) is None
        assert len(key) == 0
        assert key.is_consistent()

    def test_unassign_unset_is_noop(self):
        """Test that unassigning an unset symbol changes nothing"""
        key = Key()
        key.unassign(idx("z"))
        assert key == Key()

    def test_cipher_conflict(self):
        """Test that a cipher symbol cannot decode to two plain symbols"""
        key = Key()
        key.assign(idx("q"), idx("e"))
        with pytest.raises(KeyConflictError):
            key.assign(idx("q"), idx("t"))
        assert key.plain_for(idx("q")) == idx("e")

    def test_plain_conflict(self):
        """Test that two cipher symbols cannot decode to the same plain symbol"""
        key = Key()
        key.assign(idx("q"), idx("e"))
        with pytest.raises(KeyConflictError):
            key.assign(idx("x"), idx("e"))
        assert key.plain_for(idx("x")) is None
        assert key.is_consistent()

    def test_assign_symbol(self):
        """Test assigning by character, case insensitively"""
        key = Key()
        key.assign_symbol("Q", "e")
        key.assign_symbol("q", "e")
        assert list(key.items()) == [("q", "e")]
        with pytest.raises(InvalidSymbolError):
            key.assign_symbol("1", "e")

    def test_covers(self):
        """Test that covers checks every symbol"""
        key = Key.from_pairs([("a", "x"), ("b", "y")])
        assert key.covers((idx("a"), idx("b"), idx("a")))
        assert not key.covers((idx("a"), idx("c")))
        assert key.covers(())

    def test_decode(self):
        """Test decoding with unknown symbols rendered as a marker"""
        key = Key.from_pairs([("a", "x"), ("b", "y")])
        assert key.decode((idx("a"), idx("c"), idx("b"))) == "x.y"
        assert key.decode((idx("c"),), unknown="?") == "?"

    def test_random_assignment_sequence_stays_consistent(self):
        """Test the bijection invariant over a random sequence of operations"""
        rng = random.Random(7)
        key = Key()
        for _ in range(2000):
            cipher, plain = rng.randrange(26), rng.randrange(26)
            if rng.random() < 0.6:
                if key.plain_for(cipher) is None and key.cipher_for(plain) is None:
                    key.assign(cipher, plain)
            else:
                key.unassign(cipher)
            assert key.is_consistent()
            plains = [key.plain_for(c) for c in range(26) if key.plain_for(c) is not None]
            assert len(plains) == len(set(plains))


class TestKeyConstruction:
    """Test suite for the Key constructors"""

    def test_from_cipher_alphabet(self):
        """Test that position i holds the cipher letter of plain letter i"""
        key = Key.from_cipher_alphabet(ROT13)
        assert key.is_complete()
        assert key.plain_for(idx("n")) == idx("a")
        assert key.cipher_for(idx("a")) == idx("n")
        assert key.cipher_alphabet() == ROT13

    def test_from_cipher_alphabet_partial(self):
        """Test that '.' leaves a letter unassigned"""
        key = Key.from_cipher_alphabet("b" + "." * 25)
        assert len(key) == 1
        assert key.plain_for(idx("b")) == idx("a")

    def test_from_cipher_alphabet_wrong_length(self):
        """Test that a short alphabet is rejected"""
        with pytest.raises(ValueError, match="must have 26 symbols"):
            Key.from_cipher_alphabet("abc")

    def test_from_cipher_alphabet_repeated_letter(self):
        """Test that a repeated cipher letter is rejected"""
        with pytest.raises(KeyConflictError):
            Key.from_cipher_alphabet("a" * 26)

    def test_random_key_is_complete_permutation(self):
        """Test that random keys are complete bijections"""
        key = Key.random(rng=random.Random(1))
        assert key.is_complete()
        assert key.is_consistent()
        assert sorted(key.cipher_alphabet()) == sorted(LATIN.symbols)

    def test_random_key_uses_system_random_by_default(self):
        """Test random keys without a seeded generator"""
        keys = {Key.random().cipher_alphabet() for _ in range(5)}
        assert all(sorted(k) == sorted(LATIN.symbols) for k in keys)

    def test_copy_is_independent(self):
        """Test that a copy does not share state with the original"""
        key = Key.from_pairs([("a", "b")])
        clone = key.copy()
        clone.assign(idx("c"), idx("d"))
        assert len(key) == 1
        assert len(clone) == 2
        assert clone != key
        clone.unassign(idx("c"))
        assert clone == key


class TestKeyTables:
    """Test suite for the str.translate tables"""

    def test_decipher_table_keeps_case(self):
        """Test that both letter cases are mapped"""
        key = Key.from_pairs([("q", "e")])
        assert "Qq".translate(key.decipher_table()) == "Ee"

    def test_decipher_table_leaves_unknown(self):
        """Test that unassigned letters pass through by default"""
        key = Key.from_pairs([("q", "e")])
        assert "qz, Z!".translate(key.decipher_table()) == "ez, Z!"

    def test_decipher_table_unknown_marker(self):
        """Test that unassigned letters become the marker when one is given"""
        key = Key.from_pairs([("q", "e")])
        assert "qz, Z!".translate(key.decipher_table("_")) == "e_, _!"

    def test_encipher_table_inverts_decipher_table(self):
        """Test that enciphering then deciphering returns the text"""
        key = Key.random(rng=random.Random(3))
        text = "Attack at Dawn, 05:00!"
        ciphertext = text.translate(key.encipher_table())
        assert ciphertext != text
        assert ciphertext.translate(key.decipher_table()) == text

    def test_encipher_keeps_frequency_profile(self):
        """Test that substitution only renames letters"""
        key = Key.random(rng=random.Random(5))
        text = "returns a reference to the value corresponding to the key"
        ciphertext = text.translate(key.encipher_table())
        assert sorted(Counter(text).values()) == sorted(Counter(ciphertext).values())

    def test_encipher_table_partial_key(self):
        """Test that letters left as they are must not collide with cipher letters"""
        key = Key.from_pairs([("a", "b"), ("b", "a")])
        assert "abc".translate(key.encipher_table()) == "bac"

    def test_encipher_table_rejects_colliding_partial_key(self):
        """Test that a key enciphering two plain letters to the same letter is rejected"""
        key = Key.from_cipher_alphabet("b" + "." * 25)
        with pytest.raises(KeyConflictError, match="already enciphers"):
            key.encipher_table()
        # Deciphering with the same partial key stays possible.
        assert "b".translate(key.decipher_table()) == "a"
