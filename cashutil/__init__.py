from .version import PACKAGE_VERSION
from . import cashaddr, networks
from .address import Address, AddressError, PublicKey
from .base58 import Base58, Base58Error
from .util import set_verbosity, print_error
