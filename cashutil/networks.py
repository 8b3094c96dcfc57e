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

'''
Network parameters. These classes are never instantiated; code passes the
class itself around (usually as the `net` keyword argument) and reads its
attributes.
'''

from .util import print_error


class AbstractNet:
    NAME = None
    TESTNET = False
    CASHADDR_PREFIX = None
    ADDRTYPE_P2PKH = None
    ADDRTYPE_P2SH = None
    WIF_PREFIX = None


class MainNet(AbstractNet):
    NAME = 'mainnet'
    TESTNET = False
    CASHADDR_PREFIX = "bitcoincash"
    ADDRTYPE_P2PKH = 0
    ADDRTYPE_P2SH = 5
    WIF_PREFIX = 0x80


class TestNet(AbstractNet):
    NAME = 'testnet'
    TESTNET = True
    CASHADDR_PREFIX = "bchtest"
    ADDRTYPE_P2PKH = 111
    ADDRTYPE_P2SH = 196
    WIF_PREFIX = 0xef


class RegtestNet(TestNet):
    NAME = 'regtest'
    CASHADDR_PREFIX = "bchreg"


all_nets = (MainNet, TestNet, RegtestNet)

# The default network, used wherever the caller does not pass net=
net = MainNet


def _set_net(n):
    global net
    if net is not n:
        print_error("[networks] switching default network:", net.NAME, "->", n.NAME)
    net = n


def set_mainnet():
    _set_net(MainNet)


def set_testnet():
    _set_net(TestNet)


def set_regtest():
    _set_net(RegtestNet)


def net_for_prefix(prefix):
    ''' Returns the network class whose cashaddr prefix is `prefix`
    (case-insensitive), or None. '''
    prefix = (prefix or '').lower()
    for n in all_nets:
        if n.CASHADDR_PREFIX == prefix:
            return n
    return None
