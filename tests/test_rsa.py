"""
Schoolbook RSA Tests

1. The classroom example (p=223, q=197, e=17) round-trips every plaintext
2. Generated keys have the requested modulus size
3. Text encryption and digest signatures round-trip; tampering is detected
"""

import random

import pytest

from schoolbook import rsa
from schoolbook.errors import InvalidParameterError
from schoolbook.modular import modular_inverse, power_mod


@pytest.fixture(scope="module")
def signing_keys():
    return rsa.generate_keypair(512, rng=random.Random(512))


class TestClassroomExample:
    """p = 223, q = 197, e = 17."""

    def test_round_trip(self):
        p, q, e = 223, 197, 17
        n = p * q
        t = (p - 1) * (q - 1)
        assert n == 43931
        assert t == 43512

        d = modular_inverse(e, t)
        for m in range(0, n, 97):
            assert power_mod(power_mod(m, e, n), d, n) == m

    def test_key_objects(self):
        d = modular_inverse(17, 43512)
        public = rsa.RSAPublicKey(e=17, n=43931)
        private = rsa.RSAPrivateKey(d=d, n=43931)
        assert rsa.decrypt_int(rsa.encrypt_int(1234, public), private) == 1234


class TestKeyGeneration:
    """Tests for generate_keypair."""

    @pytest.mark.parametrize("bits", [16, 24, 64, 128, 256])
    def test_modulus_size(self, bits, rng):
        public, private = rsa.generate_keypair(bits, rng=rng)
        assert public.n.bit_length() == bits
        assert public.n == private.n
        assert public.e == rsa.DEFAULT_E

    def test_exponents_are_inverse(self, rng):
        public, private = rsa.generate_keypair(64, rng=rng)
        for m in (2, 3, 65537, public.n - 1):
            assert power_mod(power_mod(m, public.e, public.n), private.d, private.n) == m

    def test_custom_exponent(self, rng):
        public, _ = rsa.generate_keypair(64, e=65537, rng=rng)
        assert public.e == 65537

    @pytest.mark.parametrize("bits", [8, 15, 20, 4104, 0])
    def test_invalid_sizes(self, bits):
        with pytest.raises(InvalidParameterError):
            rsa.generate_keypair(bits)

    def test_validate_modulus_bits(self):
        assert rsa.validate_modulus_bits(1024)
        assert not rsa.validate_modulus_bits(1000)
        assert not rsa.validate_modulus_bits(8)

    def test_key_serialization(self, rng):
        public, private = rsa.generate_keypair(64, rng=rng)
        assert rsa.RSAPublicKey.from_dict(public.to_dict()) == public
        assert rsa.RSAPrivateKey.from_dict(private.to_dict()) == private


class TestEncryption:
    """Tests for integer and text encryption."""

    def test_text_round_trip(self, rng):
        public, private = rsa.generate_keypair(256, rng=rng)
        ciphertext = rsa.encrypt_text("Hello RSA!", public)
        assert isinstance(ciphertext, str)
        int(ciphertext, 16)
        assert rsa.decrypt_text(ciphertext, private) == "Hello RSA!"

    def test_unicode_text(self, rng):
        public, private = rsa.generate_keypair(256, rng=rng)
        assert rsa.decrypt_text(rsa.encrypt_text("schlüssel", public), private) == "schlüssel"

    def test_plaintext_too_large(self, rng):
        public, _ = rsa.generate_keypair(32, rng=rng)
        with pytest.raises(InvalidParameterError):
            rsa.encrypt_int(public.n, public)
        with pytest.raises(InvalidParameterError):
            rsa.encrypt_text("this text is far too long for 32 bits", public)

    def test_ciphertext_out_of_range(self, rng):
        _, private = rsa.generate_keypair(32, rng=rng)
        with pytest.raises(InvalidParameterError):
            rsa.decrypt_int(-1, private)


class TestSignatures:
    """Tests for hash-then-sign."""

    def test_sign_verify(self, signing_keys):
        public, private = signing_keys
        signature = rsa.sign("attack at dawn", private)
        assert rsa.verify("attack at dawn", signature, public)

    def test_tampered_message(self, signing_keys):
        public, private = signing_keys
        signature = rsa.sign("attack at dawn", private)
        assert not rsa.verify("attack at dusk", signature, public)

    def test_tampered_signature(self, signing_keys):
        public, private = signing_keys
        signature = rsa.sign(b"attack at dawn", private)
        assert not rsa.verify(b"attack at dawn", signature ^ 1, public)

    def test_out_of_range_signature(self, signing_keys):
        public, _ = signing_keys
        assert not rsa.verify("m", 0, public)
        assert not rsa.verify("m", public.n, public)

    def test_small_modulus_cannot_sign(self, rng):
        _, private = rsa.generate_keypair(256, rng=rng)
        with pytest.raises(InvalidParameterError):
            rsa.sign("too small", private)
