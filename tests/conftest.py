# Pytest looks here for fixtures

import pytest

from dogecoinx import DogecoinTestnet, Handshake, all_networks

from .utils import FakeStream, VERSION_IP, VERSION_NONCE, VERSION_PORT, VERSION_TIMESTAMP


@pytest.fixture(params=all_networks, ids=lambda network: network.name)
def network(request):
    yield request.param


@pytest.fixture
def make_handshake():
    '''Return a function creating a testnet handshake to the reference peer over a
    FakeStream, with a fixed clock and nonce.'''
    def make(incoming=b'', *, stream=None, **kwargs):
        stream = stream or FakeStream(incoming)
        kwargs.setdefault('clock', lambda: VERSION_TIMESTAMP)
        kwargs.setdefault('nonce_source', lambda: VERSION_NONCE)
        return Handshake(stream, DogecoinTestnet, VERSION_IP, VERSION_PORT, **kwargs)

    return make
