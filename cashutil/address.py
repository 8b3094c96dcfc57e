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

from collections import namedtuple

from . import cashaddr, networks
from .base58 import Base58, Base58Error
from .bitcoin import hash160, hex_to_bytes, to_bytes
from .util import print_error


class AddressError(Exception):
    """Exception used for Address errors."""


class PublicKey(namedtuple("PublicKeyTuple", "pubkey")):
    ''' A pay-to-pubkey destination. Its address form is the P2PKH address of
    the key's hash160. '''

    @classmethod
    def from_pubkey(cls, pubkey):
        """Create from a public key expressed as binary bytes or hex."""
        if isinstance(pubkey, str):
            try:
                pubkey = hex_to_bytes(pubkey)
            except ValueError:
                raise AddressError('invalid pubkey hex {}'.format(pubkey))
        cls.validate(pubkey)
        return cls(to_bytes(pubkey))

    @classmethod
    def from_string(cls, string):
        """Create from a hex string."""
        return cls.from_pubkey(string)

    @classmethod
    def validate(cls, pubkey):
        if not isinstance(pubkey, (bytes, bytearray)):
            raise TypeError('pubkey must be of bytes type, not {}'
                            .format(type(pubkey)))
        if len(pubkey) == 33 and pubkey[0] in (2, 3):
            return  # Compressed
        if len(pubkey) == 65 and pubkey[0] == 4:
            return  # Uncompressed
        raise AddressError('invalid pubkey {}'.format(pubkey.hex()))

    @property
    def address(self):
        """Convert to an Address object."""
        return Address(hash160(self.pubkey), Address.ADDR_P2PKH)

    def is_compressed(self):
        """Returns True if the pubkey is compressed."""
        return len(self.pubkey) == 33

    def to_ui_string(self):
        """Convert to a hexadecimal string."""
        return self.pubkey.hex()

    def __str__(self):
        return self.to_ui_string()

    def __repr__(self):
        return '<PubKey {}>'.format(self.__str__())


class Address(namedtuple("AddressTuple", "hash kind")):
    """A namedtuple for easy comparison and unique hashing.
    Member .hash is 20 bytes, or 32 bytes for a P2SH32 address."""

    # Address kinds
    ADDR_P2PKH = cashaddr.PUBKEY_TYPE
    ADDR_P2SH = cashaddr.SCRIPT_TYPE

    # Address formats
    FMT_CASHADDR = 0
    FMT_LEGACY = 1

    # Default to CashAddr
    FMT_UI = FMT_CASHADDR

    def __new__(cls, addr_hash, kind):
        addr_hash = to_bytes(addr_hash)
        ret = super().__new__(cls, addr_hash, kind)
        ret._check_sanity()
        return ret

    def _check_sanity(self):
        if self.kind not in (self.ADDR_P2PKH, self.ADDR_P2SH):
            raise AssertionError(f"Unknown kind: {self.kind}")
        hlen = len(self.hash)
        if hlen not in (20, 32):
            raise AssertionError(f"Only 20-byte or 32-byte hashes are accepted, got hash of length: {hlen}")
        if self.kind == self.ADDR_P2PKH and hlen != 20:
            raise AssertionError("P2PKH may only have hash length 20")

    @property
    def hash160(self):
        return self.hash

    @classmethod
    def from_cashaddr_string(cls, string, *, net=None):
        """Construct from a cashaddress string. The "prefix:" part may be
        omitted, if present it must match the network."""
        if net is None: net = networks.net
        if not isinstance(string, str):
            raise AddressError('address must be a string')
        content = cashaddr.decode_content(string, net)
        if content is None:
            raise AddressError('invalid cashaddr for {}: {}'.format(net.NAME, string))
        if content.type not in (cls.ADDR_P2PKH, cls.ADDR_P2SH):
            raise AddressError('address has unexpected cashaddr type {}'.format(content.type))
        try:
            return cls(content.hash, content.type)
        except AssertionError as e:
            raise AddressError(str(e))

    @classmethod
    def from_legacy_string(cls, string, *, net=None):
        """Construct from a Base58Check (legacy) address string."""
        if net is None: net = networks.net
        try:
            raw = Base58.decode_check(string)
        except (Base58Error, TypeError) as e:
            raise AddressError(str(e))

        # Require version byte plus hash
        if len(raw) not in (21, 33):
            raise AddressError('invalid address: {}'.format(string))

        verbyte, addr_hash = raw[0], raw[1:]
        if verbyte == net.ADDRTYPE_P2PKH:
            kind = cls.ADDR_P2PKH
        elif verbyte == net.ADDRTYPE_P2SH:
            kind = cls.ADDR_P2SH
        else:
            raise AddressError(f'invalid address: {string} (unknown version byte: {verbyte})')

        try:
            return cls(addr_hash, kind)
        except AssertionError as e:
            raise AddressError(f'invalid address: {string} (' + str(e) + ')')

    @classmethod
    def from_string(cls, string, *, net=None):
        """Construct from an address string, cashaddr or legacy."""
        if net is None: net = networks.net

        # First, try cashaddr decode
        try:
            return cls.from_cashaddr_string(string, net=net)
        except AddressError as e:
            cashaddr_exc = e

        print_error("[Address] not a cashaddr, trying legacy:", string)
        try:
            return cls.from_legacy_string(string, net=net)
        except AddressError as e:
            raise AddressError(f'invalid address: {string} ({cashaddr_exc}; {e})')

    @classmethod
    def is_valid(cls, string, *, net=None):
        if net is None: net = networks.net
        try:
            cls.from_string(string, net=net)
            return True
        except AddressError:
            return False

    @staticmethod
    def is_legacy(address, *, net=None):
        """Find if the string of the address is in legacy format"""
        if net is None: net = networks.net
        try:
            Address.from_legacy_string(address, net=net)
        except AddressError:
            return False
        return True

    @classmethod
    def from_strings(cls, strings, *, net=None):
        """Construct a list from an iterable of strings."""
        if net is None: net = networks.net
        return [cls.from_string(string, net=net) for string in strings]

    @classmethod
    def from_pubkey(cls, pubkey):
        """Returns a P2PKH address from a public key. The public key can be
        bytes or a hex string."""
        return PublicKey.from_pubkey(pubkey).address

    @classmethod
    def from_P2PKH_hash(cls, hash160):
        """Construct from a P2PKH hash160."""
        return cls(hash160, cls.ADDR_P2PKH)

    @classmethod
    def from_P2SH_hash(cls, hash160_or_hash256):
        """Construct from a P2SH hash160 or hash256 (for P2SH32)."""
        return cls(hash160_or_hash256, cls.ADDR_P2SH)

    def to_cashaddr(self, *, net=None):
        """The cashaddr string, without the "prefix:" part."""
        return self.to_full_cashaddr(net=net).split(':', 1)[1]

    def to_full_cashaddr(self, *, net=None):
        if net is None: net = networks.net
        return cashaddr.encode_full(net.CASHADDR_PREFIX, self.kind, self.hash)

    def to_legacy(self, *, net=None):
        if net is None: net = networks.net
        if self.kind == self.ADDR_P2PKH:
            verbyte = net.ADDRTYPE_P2PKH
        else:
            verbyte = net.ADDRTYPE_P2SH
        return Base58.encode_check(bytes([verbyte]) + self.hash)

    def to_string(self, fmt, *, net=None):
        """Converts to a string of the given format."""
        if fmt == self.FMT_CASHADDR:
            return self.to_cashaddr(net=net)
        if fmt == self.FMT_LEGACY:
            return self.to_legacy(net=net)
        raise AddressError('unrecognized format')

    def to_full_string(self, fmt, *, net=None):
        """Convert to text, with a URI prefix for cashaddr format."""
        if fmt == self.FMT_CASHADDR:
            return self.to_full_cashaddr(net=net)
        return self.to_string(fmt, net=net)

    def to_ui_string(self, *, net=None):
        """Convert to text in the current UI format choice."""
        return self.to_string(self.FMT_UI, net=net)

    def to_full_ui_string(self, *, net=None):
        """Convert to text, with a URI prefix if cashaddr."""
        return self.to_full_string(self.FMT_UI, net=net)

    def __str__(self):
        return self.to_ui_string()

    def __repr__(self):
        return '<Address {}>'.format(self.__str__())
