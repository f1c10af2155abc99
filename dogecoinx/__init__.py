from .consts import *
from .errors import *
from .handshake import *
from .hashes import *
from .misc import *
from .net import *
from .net_protocol import *
from .networks import *
from .packing import *

_version_str = '0.1'
_version = tuple(int(part) for part in _version_str.split('.'))

__all__ = sum((
    consts.__all__,
    errors.__all__,
    handshake.__all__,
    hashes.__all__,
    misc.__all__,
    net.__all__,
    net_protocol.__all__,
    networks.__all__,
    packing.__all__,
), ())
