import base64
import unittest

from Crypto.Cipher import AES as ReferenceAES
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad as reference_pad

from aesbreak.aes import decrypt_block, encrypt_block
from aesbreak.exceptions import BlockSizeError, PaddingError
from aesbreak.modes import (AESModes, cbc_decrypt, cbc_encrypt, counter_block, ctr, ctr_edit,
                            ctr_keystream, ecb, split_blocks)

KAT_KEY = b"YELLOW SUBMARINE"
KAT_CT = base64.b64decode("L77na/nrFsKvynd6HzOoG7GHTLXsTVu9qvY/2syLXzhPweyyMTJULu/6/kXX0KSvoOLSFQ==")
KAT_PT = b"Yo, VIP Let's kick it Ice, Ice, baby Ice, Ice, baby "


class TestSplitBlocks(unittest.TestCase):
    def test_split(self):
        self.assertEqual(split_blocks(b"a" * 16 + b"b" * 16), [b"a" * 16, b"b" * 16])
        self.assertEqual(split_blocks(b""), [])

    def test_unaligned(self):
        with self.assertRaises(BlockSizeError):
            split_blocks(b"a" * 17)


class TestECB(unittest.TestCase):
    def test_matches_pycryptodome(self):
        key, data = get_random_bytes(16), get_random_bytes(64)
        expected = ReferenceAES.new(key, ReferenceAES.MODE_ECB).encrypt(data)
        self.assertEqual(ecb(data, key), expected)
        self.assertEqual(ecb(expected, key, decrypt_block), data)

    def test_equal_blocks_leak(self):
        out = ecb(b"Z" * 32, KAT_KEY)
        self.assertEqual(out[:16], out[16:])

    def test_unaligned_is_rejected(self):
        with self.assertRaises(BlockSizeError):
            ecb(b"abc", KAT_KEY)

    def test_custom_transform(self):
        def xor_transform(block, key):
            return bytes(a ^ b for a, b in zip(block, key))
        self.assertEqual(ecb(bytes(32), KAT_KEY, xor_transform), KAT_KEY * 2)


class TestCBC(unittest.TestCase):
    def test_matches_pycryptodome(self):
        key, iv, data = get_random_bytes(16), get_random_bytes(16), get_random_bytes(48)
        expected = ReferenceAES.new(key, ReferenceAES.MODE_CBC, iv).encrypt(data)
        self.assertEqual(cbc_encrypt(data, key, iv), expected)
        self.assertEqual(cbc_decrypt(expected, key, iv), data)

    def test_first_block_is_ecb_of_iv_xor(self):
        iv = bytes(range(16))
        block = b"0123456789abcdef"
        chained = bytes(a ^ b for a, b in zip(block, iv))
        self.assertEqual(cbc_encrypt(block, KAT_KEY, iv), encrypt_block(chained, KAT_KEY))

    def test_bad_iv(self):
        with self.assertRaises(BlockSizeError):
            cbc_encrypt(bytes(16), KAT_KEY, bytes(8))
        with self.assertRaises(BlockSizeError):
            cbc_decrypt(bytes(16), KAT_KEY, bytes(17))

    def test_unaligned(self):
        with self.assertRaises(BlockSizeError):
            cbc_encrypt(bytes(20), KAT_KEY, bytes(16))


class TestCTR(unittest.TestCase):
    def test_known_answer(self):
        self.assertEqual(ctr(KAT_CT, KAT_KEY, 0), KAT_PT)
        self.assertEqual(ctr(KAT_PT, KAT_KEY, 0), KAT_CT)

    def test_counter_block_layout(self):
        self.assertEqual(counter_block(0, 1), bytes(8) + b"\x01" + bytes(7))
        self.assertEqual(counter_block(1, 0), b"\x01" + bytes(15))
        self.assertEqual(counter_block(0, 1, "big"), bytes(15) + b"\x01")

    def test_counter_range(self):
        with self.assertRaises(BlockSizeError):
            counter_block(1 << 64, 0)
        with self.assertRaises(BlockSizeError):
            counter_block(0, -1)

    def test_big_endian_matches_pycryptodome(self):
        key, nonce = get_random_bytes(16), 0x0102030405060708
        data = get_random_bytes(50)
        reference = ReferenceAES.new(key, ReferenceAES.MODE_CTR,
                                     nonce=nonce.to_bytes(8, "little"), initial_value=0)
        self.assertEqual(ctr(data, key, nonce, byteorder="big"), reference.encrypt(data))

    def test_any_length(self):
        key = get_random_bytes(16)
        for n in (0, 1, 15, 16, 17, 33):
            data = get_random_bytes(n)
            out = ctr(data, key, 7)
            self.assertEqual(len(out), n)
            self.assertEqual(ctr(out, key, 7), data)

    def test_keystream_prefix(self):
        stream = ctr_keystream(KAT_KEY, 3, 40)
        self.assertEqual(len(stream), 40)
        self.assertEqual(ctr_keystream(KAT_KEY, 3, 20), stream[:20])
        self.assertEqual(stream[:16], encrypt_block(counter_block(3, 0), KAT_KEY))

    def test_edit_replaces_one_block(self):
        buffer = bytearray(ctr(KAT_PT, KAT_KEY, 0))
        ctr_edit(buffer, b"A" * 16, 1, KAT_KEY, 0)
        self.assertEqual(ctr(bytes(buffer), KAT_KEY, 0), KAT_PT[:16] + b"A" * 16 + KAT_PT[32:])

    def test_edit_past_end_is_truncated(self):
        buffer = bytearray(ctr(KAT_PT, KAT_KEY, 0))
        ctr_edit(buffer, b"B" * 16, 3, KAT_KEY, 0)
        self.assertEqual(len(buffer), len(KAT_PT))
        self.assertEqual(ctr(bytes(buffer), KAT_KEY, 0), KAT_PT[:48] + b"B" * 4)
        ctr_edit(buffer, b"C" * 16, 10, KAT_KEY, 0)
        self.assertEqual(len(buffer), len(KAT_PT))

    def test_edit_block_size(self):
        with self.assertRaises(BlockSizeError):
            ctr_edit(bytearray(32), b"short", 0, KAT_KEY, 0)


class TestAESModes(unittest.TestCase):
    def setUp(self):
        self.key = get_random_bytes(16)
        self.modes = AESModes(self.key)

    def test_ecb(self):
        ct = self.modes.ecb_encrypt(b"hello")
        self.assertEqual(ct, ReferenceAES.new(self.key, ReferenceAES.MODE_ECB).encrypt(reference_pad(b"hello", 16)))
        self.assertEqual(self.modes.ecb_decrypt(ct), b"hello")

    def test_cbc_framing(self):
        ct = self.modes.cbc_encrypt(b"attack at dawn")
        self.assertEqual(len(ct), 32)
        self.assertEqual(self.modes.cbc_decrypt(ct), b"attack at dawn")
        iv = bytes(16)
        self.assertEqual(self.modes.cbc_encrypt(b"x", iv)[:16], iv)

    def test_cbc_fresh_iv(self):
        self.assertNotEqual(self.modes.cbc_encrypt(b"same"), self.modes.cbc_encrypt(b"same"))

    def test_cbc_too_short(self):
        with self.assertRaises(BlockSizeError):
            self.modes.cbc_decrypt(bytes(16))

    def test_cbc_wrong_key_fails_padding(self):
        ct = AESModes(KAT_KEY).cbc_encrypt(b"secret", bytes(16))
        fails = 0
        for _ in range(5):
            try:
                AESModes(get_random_bytes(16)).cbc_decrypt(ct)
            except PaddingError:
                fails += 1
        self.assertGreater(fails, 0)

    def test_ctr_framing(self):
        ct = self.modes.ctr_encrypt(b"counter mode", nonce=5)
        self.assertEqual(ct[:8], (5).to_bytes(8, "little"))
        self.assertEqual(len(ct), 8 + 12)
        self.assertEqual(self.modes.ctr_decrypt(ct), b"counter mode")
        self.assertEqual(self.modes.ctr_decrypt(self.modes.ctr_encrypt(b"random nonce")), b"random nonce")

    def test_ctr_missing_nonce(self):
        with self.assertRaises(BlockSizeError):
            self.modes.ctr_decrypt(b"1234")

    def test_key_length(self):
        for size in (0, 15, 24, 32):
            with self.assertRaises(BlockSizeError):
                AESModes(bytes(size))


if __name__ == "__main__":
    unittest.main()
