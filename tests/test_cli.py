import base64
import contextlib
import io
import os
import tempfile
import unittest

from Crypto.Cipher import AES as ReferenceAES
from Crypto.Util.Padding import pad

from aesbreak.cli import build_parser, hex_to_bytes, main, parse_required_hex
from aesbreak.modes import ecb

KEY_HEX = b"YELLOW SUBMARINE".hex()
KAT_CT = base64.b64decode("L77na/nrFsKvynd6HzOoG7GHTLXsTVu9qvY/2syLXzhPweyyMTJULu/6/kXX0KSvoOLSFQ==")


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestHelpers(unittest.TestCase):
    def test_hex(self):
        self.assertEqual(hex_to_bytes("00ff"), b"\x00\xff")
        with self.assertRaises(ValueError):
            hex_to_bytes("zz")

    def test_required_length(self):
        with self.assertRaises(ValueError):
            parse_required_hex("key", "0011", 16)

    def test_parser_requires_input(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args(["encrypt", "--mode", "ecb", "--key", KEY_HEX])


class TestCipherCommands(unittest.TestCase):
    def test_ctr_known_answer(self):
        code, out, _ = run(["decrypt", "--mode", "ctr", "--key", KEY_HEX, "--hex", KAT_CT.hex()])
        self.assertEqual(code, 0)
        self.assertEqual(bytes.fromhex(out.strip()), b"Yo, VIP Let's kick it Ice, Ice, baby Ice, Ice, baby ")

    def test_ecb_matches_reference(self):
        code, out, _ = run(["encrypt", "--mode", "ecb", "--key", KEY_HEX, "--text", "hello"])
        self.assertEqual(code, 0)
        expected = ReferenceAES.new(b"YELLOW SUBMARINE", ReferenceAES.MODE_ECB).encrypt(pad(b"hello", 16))
        self.assertEqual(out.strip(), expected.hex())

    def test_cbc_with_iv_round_trip(self):
        iv = "00" * 16
        _, out, _ = run(["encrypt", "--mode", "cbc", "--key", KEY_HEX, "--iv", iv, "--text", "cbc text"])
        code, plain, _ = run(["decrypt", "--mode", "cbc", "--key", KEY_HEX, "--iv", iv, "--hex", out.strip()])
        self.assertEqual(code, 0)
        self.assertEqual(bytes.fromhex(plain.strip()), b"cbc text")

    def test_cbc_framed_round_trip(self):
        _, out, _ = run(["encrypt", "--mode", "cbc", "--key", KEY_HEX, "--text", "framed"])
        self.assertEqual(len(bytes.fromhex(out.strip())), 32)
        _, plain, _ = run(["decrypt", "--mode", "cbc", "--key", KEY_HEX, "--hex", out.strip()])
        self.assertEqual(bytes.fromhex(plain.strip()), b"framed")

    def test_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            src, enc, dec = (os.path.join(tmp, name) for name in ("in.bin", "enc.bin", "dec.bin"))
            with open(src, "wb") as f:
                f.write(b"\x00\x01binary\xff" * 5)
            self.assertEqual(run(["encrypt", "--mode", "ctr", "--nonce", "9", "--key", KEY_HEX,
                                  "--in", src, "--out", enc])[0], 0)
            self.assertEqual(run(["decrypt", "--mode", "ctr", "--nonce", "9", "--key", KEY_HEX,
                                  "--in", enc, "--out", dec])[0], 0)
            with open(dec, "rb") as f:
                self.assertEqual(f.read(), b"\x00\x01binary\xff" * 5)

    def test_errors_are_reported(self):
        code, _, err = run(["encrypt", "--mode", "ecb", "--key", "0011", "--text", "x"])
        self.assertEqual(code, 1)
        self.assertIn("[!]", err)

    def test_bad_padding_is_reported(self):
        # decrypts to sixteen zero bytes, whose last byte is not a pad length
        ct = ecb(bytes(16), b"YELLOW SUBMARINE")
        code, _, err = run(["decrypt", "--mode", "ecb", "--key", KEY_HEX, "--hex", ct.hex()])
        self.assertEqual(code, 1)
        self.assertIn("padding", err)

    def test_missing_file(self):
        code, _, _ = run(["encrypt", "--mode", "ctr", "--key", KEY_HEX, "--in", "/nonexistent/file"])
        self.assertEqual(code, 1)


class TestAttackCommands(unittest.TestCase):
    def test_ecb(self):
        code, out, _ = run(["attack", "ecb", "--secret", "short secret"])
        self.assertEqual(code, 0)
        self.assertIn("short secret", out)

    def test_cbc(self):
        code, out, _ = run(["attack", "cbc", "--secret", "padding oracle"])
        self.assertEqual(code, 0)
        self.assertIn("padding oracle", out)

    def test_ctr_edit(self):
        code, out, _ = run(["attack", "ctr-edit"])
        self.assertEqual(code, 0)
        self.assertIn("A Galois field", out)

    def test_ctr_fixed_nonce(self):
        code, out, _ = run(["attack", "ctr-fixed-nonce"])
        self.assertEqual(code, 0)
        self.assertGreaterEqual(len(out.splitlines()), 17)


if __name__ == "__main__":
    unittest.main()
