import unittest

from aesbreak.gf256 import INV, MUL2, MUL3, MUL9, MUL11, MUL13, MUL14, gf_inv, gf_mul, gf_pow, xtime


class TestFieldArithmetic(unittest.TestCase):
    def test_mul_known_values(self):
        self.assertEqual(gf_mul(3, 2), 6)
        self.assertEqual(gf_mul(0x53, 0xCA), 0x01)
        self.assertEqual(gf_mul(0x57, 0x83), 0xC1)
        self.assertEqual(gf_mul(0x57, 0x13), 0xFE)

    def test_xtime_reduces(self):
        self.assertEqual(xtime(0x57), 0xAE)
        self.assertEqual(xtime(0xAE), 0x47)
        self.assertEqual(xtime(0x80), 0x1B)

    def test_pow(self):
        x = 37
        self.assertEqual(gf_pow(x, 0), 1)
        self.assertEqual(gf_pow(x, 1), x)
        self.assertEqual(gf_pow(x, 3), gf_mul(gf_mul(x, x), x))
        self.assertEqual(gf_pow(x, 255), 1)
        self.assertEqual(gf_pow(42, 255), 1)

    def test_inverse(self):
        self.assertEqual(gf_inv(0x53), 0xCA)
        self.assertEqual(gf_inv(0), 0)
        for a in range(1, 256):
            self.assertEqual(gf_mul(a, gf_inv(a)), 1)

    def test_tables_match_loop(self):
        for table, y in ((MUL2, 2), (MUL3, 3), (MUL9, 9), (MUL11, 11), (MUL13, 13), (MUL14, 14)):
            self.assertEqual(list(table), [gf_mul(x, y) for x in range(256)])
        self.assertEqual(list(INV), [gf_inv(x) for x in range(256)])


if __name__ == "__main__":
    unittest.main()
