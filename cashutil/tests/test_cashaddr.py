# cashutil - CashAddr and legacy address codecs
# Copyright (C) 2018 The cashutil developers
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.


import random
import unittest

from .. import cashaddr, networks
from ..cashaddr import HASH_SIZES

NETS = networks.all_nets


class TestPolymod(unittest.TestCase):

    def test_empty_checksum_vector(self):
        # "prefix:x64nx6hz" carries no data, only the checksum
        data = [cashaddr.CHARSET.index(c) for c in "x64nx6hz"]
        self.assertEqual(cashaddr.create_checksum("prefix", []), data)
        self.assertTrue(cashaddr.verify_checksum("prefix", data))
        self.assertFalse(cashaddr.verify_checksum("prefiy", data))

    def test_prefix_case_does_not_matter(self):
        self.assertEqual(cashaddr.prefix_expand("bitcoincash"),
                         cashaddr.prefix_expand("BITCOINCASH"))
        self.assertEqual(cashaddr.prefix_expand("p"), [16, 0])

    def test_result_fits_40_bits(self):
        rng = random.Random(1)
        for _ in range(50):
            values = [rng.randrange(32) for _ in range(rng.randrange(1, 100))]
            self.assertLess(cashaddr.polymod(values), 1 << 40)


class TestConvertBits(unittest.TestCase):

    def test_to_5bit_pads_with_zeros(self):
        self.assertEqual(cashaddr.convertbits(b'\xff', 8, 5), [31, 28])
        self.assertEqual(cashaddr.convertbits(b'', 8, 5), [])
        for n in range(1, 70):
            self.assertEqual(len(cashaddr.convertbits(bytes(n), 8, 5)), (8 * n + 4) // 5)

    def test_to_8bit_requires_canonical_padding(self):
        self.assertEqual(cashaddr.convertbits([31, 28], 5, 8, False), [255])
        # non-zero padding bit
        self.assertIsNone(cashaddr.convertbits([31, 29], 5, 8, False))
        # a whole spare group
        self.assertIsNone(cashaddr.convertbits([0, 0, 0], 5, 8, False))

    def test_out_of_range_values(self):
        self.assertIsNone(cashaddr.convertbits([32], 5, 8))
        self.assertIsNone(cashaddr.convertbits([256], 8, 5))
        self.assertIsNone(cashaddr.convertbits([-1], 5, 8))


class TestCodec(unittest.TestCase):

    def test_fixture(self):
        text = cashaddr.encode("prefix", [0x1f, 0x0d])
        self.assertEqual(cashaddr.decode(text), ("prefix", b'\x1f\x0d'))
        self.assertEqual(cashaddr.decode("prefix:x64nx6hz"), ("prefix", b''))
        self.assertEqual(cashaddr.decode("prEfix:x64nx6hz"), (None, None))
        self.assertEqual(cashaddr.decode("pre:fix:x32nx6hz"), (None, None))

    def test_round_trip(self):
        rng = random.Random(42)
        letters = 'abcdefghijklmnopqrstuvwxyz'
        for _ in range(200):
            prefix = ''.join(rng.choice(letters) for _ in range(rng.randrange(1, 12)))
            payload = bytes(rng.randrange(256) for _ in range(rng.randrange(0, 70)))
            text = cashaddr.encode(prefix, payload)
            self.assertEqual(text, text.lower())
            self.assertEqual(cashaddr.decode(text, ""), (prefix, payload))

    def test_encode_normalizes_prefix(self):
        self.assertEqual(cashaddr.encode("PREFIX", b'\x01'), cashaddr.encode("prefix", b'\x01'))
        self.assertTrue(cashaddr.encode("PREFIX", b'\x01').startswith("prefix:"))

    def test_encode_rejects(self):
        self.assertIsNone(cashaddr.encode("", b'\x01'))
        self.assertIsNone(cashaddr.encode("prefix", [256]))
        self.assertIsNone(cashaddr.cashaddr_encode("prefix", [32]))

    def test_encode_rejects_undecodable_prefixes(self):
        for prefix in ("pref1x", "a:b", "préfix", "pre fix", ":", None):
            self.assertIsNone(cashaddr.encode(prefix, b'\x01'), repr(prefix))
            self.assertIsNone(cashaddr.cashaddr_encode(prefix, [1]), repr(prefix))
        # whatever encode emits decodes back
        for prefix in ("p", "Prefix", "bchtest"):
            text = cashaddr.encode(prefix, b'\x01\x02')
            self.assertEqual(cashaddr.decode(text), (prefix.lower(), b'\x01\x02'))

    def test_default_prefix(self):
        text = cashaddr.encode("bchtest", b'\x00' * 21)
        payload = text.split(':')[1]
        self.assertEqual(cashaddr.decode(payload, "bchtest"), ("bchtest", b'\x00' * 21))
        self.assertEqual(cashaddr.decode(payload, "BCHTEST"), ("bchtest", b'\x00' * 21))
        # an explicit prefix wins over the default one
        self.assertEqual(cashaddr.decode(text, "bitcoincash"), ("bchtest", b'\x00' * 21))
        # wrong default prefix fails the checksum
        self.assertEqual(cashaddr.decode(payload, "bitcoincash"), (None, None))
        self.assertEqual(cashaddr.decode(payload), (None, None))

    def test_case_insensitive(self):
        rng = random.Random(7)
        for _ in range(50):
            payload = bytes(rng.randrange(256) for _ in range(21))
            text = cashaddr.encode("bitcoincash", payload)
            self.assertEqual(cashaddr.decode(text.upper()), cashaddr.decode(text))
            # flip the case of a single letter in the payload
            prefix, rest = text.split(':')
            positions = [i for i, c in enumerate(rest) if c.isalpha()]
            i = rng.choice(positions)
            mixed = prefix + ':' + rest[:i] + rest[i].upper() + rest[i + 1:]
            self.assertEqual(cashaddr.decode(mixed), (None, None))

    def test_single_substitution_detected(self):
        text = cashaddr.encode("bitcoincash", bytes(range(21)))
        prefix, rest = text.split(':')
        for i, orig in enumerate(rest):
            for c in cashaddr.CHARSET:
                if c == orig:
                    continue
                bad = prefix + ':' + rest[:i] + c + rest[i + 1:]
                self.assertEqual(cashaddr.decode(bad), (None, None), bad)

    def test_too_short(self):
        self.assertEqual(cashaddr.cashaddr_decode("prefix:x64nx6h"), (None, None))

    def test_non_string(self):
        self.assertEqual(cashaddr.decode(b"prefix:x64nx6hz"), (None, None))
        self.assertEqual(cashaddr.decode(None), (None, None))

    def test_check_padding(self):
        # 34 five bit groups are 170 bits: 21 bytes plus 2 padding bits
        data = [0] + [1] * 33
        for i in range(32):
            data[-1] = i
            fake = cashaddr.cashaddr_encode("bitcoincash", data)
            prefix, payload = cashaddr.decode(fake)
            if i & 0x03:
                self.assertIsNone(prefix)
                self.assertIsNone(payload)
            else:
                self.assertEqual(prefix, "bitcoincash")
                self.assertEqual(len(payload), 21)
                # the symbol level decode doesn't care about padding
                self.assertEqual(cashaddr.cashaddr_decode(fake)[1], data)


class TestContent(unittest.TestCase):

    def test_encode_decode_all_sizes(self):
        rng = random.Random(3)
        for size_class, size in HASH_SIZES.items():
            addr_hash = bytes(rng.randrange(256) for _ in range(size))
            packed = cashaddr.pack_addr_data(addr_hash, cashaddr.PUBKEY_TYPE)
            self.assertEqual(packed[0], size_class)
            self.assertEqual(packed[1:], addr_hash)
            # in 5 bit groups the size sits in the second group, shifted by 2
            self.assertEqual(cashaddr.convertbits(packed, 8, 5)[1] >> 2, size_class)
            addr = cashaddr.encode(networks.MainNet.CASHADDR_PREFIX, packed)
            content = cashaddr.decode_content(addr, networks.MainNet)
            self.assertEqual(content, cashaddr.AddrContent(cashaddr.PUBKEY_TYPE, addr_hash))

    def test_pack_bad_size_is_fatal(self):
        for size in list(HASH_SIZES.values()) + [0]:
            for bad in (size - 1, size + 1):
                if bad in HASH_SIZES.values() or bad < 0:
                    continue
                with self.assertRaises(AssertionError):
                    cashaddr.pack_addr_data(bytes(bad), cashaddr.PUBKEY_TYPE)

    def test_pack_bad_type_is_fatal(self):
        with self.assertRaises(AssertionError):
            cashaddr.pack_addr_data(bytes(20), 16)

    def test_check_type(self):
        prefix = networks.MainNet.CASHADDR_PREFIX
        data = [0] * 34
        for i in range(16):
            data[0] = i
            content = cashaddr.decode_content(cashaddr.cashaddr_encode(prefix, data),
                                              networks.MainNet)
            self.assertEqual(content.type, i)
            self.assertEqual(len(content.hash), 20)

            # Check that using the reserved bit result in a failure.
            data[0] |= 0x10
            self.assertIsNone(cashaddr.decode_content(cashaddr.cashaddr_encode(prefix, data),
                                                      networks.MainNet))

    def test_check_type_and_size_bytes(self):
        prefix = networks.MainNet.CASHADDR_PREFIX
        for kind in range(16):
            for size_class, size in HASH_SIZES.items():
                version = (kind << 3) | size_class
                payload = bytes([version]) + bytes(size)
                content = cashaddr.decode_content(cashaddr.encode(prefix, payload),
                                                  networks.MainNet)
                self.assertEqual(content, (kind, bytes(size)))
                payload = bytes([version | cashaddr.VERSION_RESERVED_BIT]) + bytes(size)
                self.assertIsNone(cashaddr.decode_content(cashaddr.encode(prefix, payload),
                                                          networks.MainNet))

    def test_check_size(self):
        prefix = networks.MainNet.CASHADDR_PREFIX
        for size_class, size in HASH_SIZES.items():
            # Number of 5 bit groups needed for version byte plus hash
            expected_size = (8 * (1 + size) + 4) // 5
            data = [0] * expected_size
            data[1] = size_class << 2
            content = cashaddr.decode_content(cashaddr.cashaddr_encode(prefix, data),
                                              networks.MainNet)
            self.assertEqual(content.type, 0)
            self.assertEqual(len(content.hash), size)

            data = [0] * (expected_size + 1)
            data[1] = size_class << 2
            self.assertIsNone(cashaddr.decode_content(cashaddr.cashaddr_encode(prefix, data),
                                                      networks.MainNet))
            data = data[:-2]
            self.assertIsNone(cashaddr.decode_content(cashaddr.cashaddr_encode(prefix, data),
                                                      networks.MainNet))

    def test_length_boundary_bytes(self):
        prefix = networks.MainNet.CASHADDR_PREFIX
        for size_class, size in HASH_SIZES.items():
            for length in (size + 1, size - 2):
                payload = bytes([size_class]) + bytes(length)
                self.assertIsNone(cashaddr.decode_content(cashaddr.encode(prefix, payload),
                                                          networks.MainNet))

    def test_empty_payload(self):
        self.assertIsNone(cashaddr.decode_content(
            cashaddr.encode(networks.MainNet.CASHADDR_PREFIX, b''), networks.MainNet))

    def test_invalid_on_wrong_network(self):
        addr_hash = bytes.fromhex("c0ffee") + bytes(17)
        for net in NETS:
            for other in NETS:
                if net is other:
                    continue
                addr = cashaddr.encode_full(net.CASHADDR_PREFIX, cashaddr.PUBKEY_TYPE, addr_hash)
                self.assertIsNotNone(cashaddr.decode_content(addr, net))
                self.assertIsNone(cashaddr.decode_content(addr, other))
                # without the prefix the other network's prefix breaks the checksum
                self.assertIsNone(cashaddr.decode_content(addr.split(':')[1], other))

if __name__ == '__main__':
    unittest.main()
