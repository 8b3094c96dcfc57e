# Copyright (c) 2017 Pieter Wuille
# Copyright (c) 2018 The cashutil developers
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.

'''
CashAddr encoding and decoding.

There are two levels here. cashaddr_encode / cashaddr_decode work on lists of
5-bit values (the raw format). encode / decode work on byte payloads and take
care of the 8 <-> 5 bit repacking. On top of that sits the payload content
model (pack_addr_data / decode_content) which knows about the version byte.

Malformed input never raises: the decoders return (None, None) or None.
'''

from collections import namedtuple

from .util import inv_dict

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: n for n, c in enumerate(CHARSET)}

# 40 bits in chunks of 5 bits
CHECKSUM_LEN = 8

GENERATORS = (0x98f2bc8e61, 0x79b76d99e2, 0xf33e5fb3c4, 0xae2eabe2a8,
              0x1e4f43e470)

# Address types (the 4 bit type field of the version byte)
PUBKEY_TYPE = 0
SCRIPT_TYPE = 1

# size class -> hash length in bytes
HASH_SIZES = {0: 20, 1: 24, 2: 28, 3: 32, 4: 40, 5: 48, 6: 56, 7: 64}
_SIZE_CLASSES = inv_dict(HASH_SIZES)

VERSION_RESERVED_BIT = 0x80


class AddrContent(namedtuple("AddrContent", "type hash")):
    ''' The (type, hash) pair carried by a cashaddr payload. '''


def polymod(values):
    """Internal function that computes the cashaddr checksum."""
    c = 1
    for d in values:
        c0 = c >> 35
        c = ((c & 0x07ffffffff) << 5) ^ d
        for i, g in enumerate(GENERATORS):
            if (c0 >> i) & 1:
                c ^= g
    return c ^ 1


def prefix_expand(prefix):
    """Expand the prefix into values for checksum computation."""
    retval = [ord(x) & 0x1f for x in prefix]
    # Append null separator
    retval.append(0)
    return retval


def verify_checksum(prefix, data):
    """Verify a checksum given prefix and converted data characters."""
    return polymod(prefix_expand(prefix) + list(data)) == 0


def create_checksum(prefix, data):
    """Compute the checksum values given prefix and data."""
    values = prefix_expand(prefix) + list(data)
    mod = polymod(values + [0] * CHECKSUM_LEN)
    # Return the polymod expanded into eight 5-bit elements
    return [(mod >> 5 * (CHECKSUM_LEN - 1 - i)) & 0x1f
            for i in range(CHECKSUM_LEN)]


def convertbits(data, frombits, tobits, pad=True):
    """General power-of-2 base conversion.

    With pad=False the leftover bits must be fewer than `frombits` and all
    zero, otherwise the input was not canonically produced and None is
    returned. None is also returned for out of range input values."""
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1
    for value in data:
        if value < 0 or (value >> frombits):
            return None
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        return None

    return ret


def _valid_prefix(prefix):
    ''' A prefix is one or more ASCII letters. '''
    return isinstance(prefix, str) and prefix.isascii() and prefix.isalpha()


def _split(text, default_prefix):
    ''' Split text into (prefix, payload) or return None. Both come back
    lowercased. '''
    seen_lower = seen_upper = False
    for c in text:
        if 'a' <= c <= 'z':
            seen_lower = True
        elif 'A' <= c <= 'Z':
            seen_upper = True
        elif not ('0' <= c <= '9' or c == ':'):
            return None
    # A single case throughout, so all-caps transcriptions survive.
    if seen_lower and seen_upper:
        return None
    parts = text.lower().split(':')
    if len(parts) == 1:
        prefix, payload = default_prefix.lower(), parts[0]
    elif len(parts) == 2:
        prefix, payload = parts
    else:
        return None
    if not payload or not _valid_prefix(prefix):
        return None
    return prefix, payload


def cashaddr_encode(prefix, data):
    """Compute a cashaddr string given prefix and 5-bit data values.

    Returns None if the prefix is not all ASCII letters or a value does not
    fit in 5 bits."""
    if not _valid_prefix(prefix) or any(not 0 <= d <= 0x1f for d in data):
        return None
    prefix = prefix.lower()
    combined = list(data) + create_checksum(prefix, data)
    return prefix + ':' + ''.join([CHARSET[d] for d in combined])


def cashaddr_decode(text, default_prefix=''):
    """Validate a cashaddr string, and determine prefix and 5-bit data.

    `default_prefix` is used when `text` has no "prefix:" part. Returns
    (prefix, data) with the checksum stripped, or (None, None)."""
    if not isinstance(text, str):
        return (None, None)
    parts = _split(text, default_prefix or '')
    if parts is None:
        return (None, None)
    prefix, payload = parts
    data = [CHARSET_REV.get(x) for x in payload]
    if None in data or len(data) < CHECKSUM_LEN:
        return (None, None)
    if not verify_checksum(prefix, data):
        return (None, None)
    return (prefix, data[:-CHECKSUM_LEN])


def encode(prefix, payload):
    """Encode a byte payload as a cashaddr string, or None on bad input."""
    data = convertbits(payload, 8, 5, True)
    if data is None:
        return None
    return cashaddr_encode(prefix, data)


def decode(text, default_prefix=''):
    """Decode a cashaddr string into (prefix, payload bytes).

    Returns (None, None) if the text is invalid, including the case where the
    checksum is fine but the padding bits of the last group are not zero."""
    prefix, data = cashaddr_decode(text, default_prefix)
    if prefix is None:
        return (None, None)
    decoded = convertbits(data, 5, 8, False)
    if decoded is None:
        return (None, None)
    return (prefix, bytes(decoded))


def pack_addr_data(addr_hash, kind):
    """Pack addr data with version byte.

    Only ever called with hashes we produced ourselves, so a bad size is a
    programming error and raises AssertionError."""
    size_class = _SIZE_CLASSES.get(len(addr_hash))
    if size_class is None:
        raise AssertionError('invalid address hash size {}'
                             .format(len(addr_hash)))
    if not 0 <= kind <= 0x0f:
        raise AssertionError('invalid address type {}'.format(kind))
    return bytes([(kind << 3) | size_class]) + bytes(addr_hash)


def decode_content(text, net):
    """Decode a cashaddr string for network `net` into an AddrContent.

    The prefix may be omitted from `text`; if present it must be the
    network's. Returns None for anything invalid."""
    expected = net.CASHADDR_PREFIX
    prefix, payload = decode(text, expected)
    if prefix is None or prefix != expected.lower():
        return None
    if not payload:
        return None
    version = payload[0]
    # Checked on the raw byte, the type field sits right below it.
    if version & VERSION_RESERVED_BIT:
        return None
    kind = (version >> 3) & 0x0f
    addr_hash = payload[1:]
    if len(addr_hash) != HASH_SIZES[version & 0x07]:
        return None
    return AddrContent(kind, addr_hash)


def encode_full(prefix, kind, addr_hash):
    """Encode a full cashaddr address, with prefix and separator."""
    return encode(prefix, pack_addr_data(addr_hash, kind))
