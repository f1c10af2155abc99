# Copyright (c) 2018-2024 Neil Booth
#
# All rights reserved.
#
# See the file "LICENCE" for information about the copyright
# and warranty status of this software.


__all__ = (
    'Dogecoin', 'DogecoinTestnet', 'DogecoinRegtest',
    'Network', 'all_networks', 'networks_by_name',
)

from .errors import UnknownMagic


class Network:

    def __init__(self, *, name, full_name, magic_hex, default_port):
        self.name = name
        self.full_name = full_name
        self.magic = bytes.fromhex(magic_hex)
        assert len(self.magic) == 4
        self.default_port = default_port

    @classmethod
    def from_magic(cls, magic):
        '''Return the network using the given 4 magic bytes.  The match is exact.'''
        for network in all_networks:
            if magic == network.magic:
                return network
        raise UnknownMagic(f'unknown network magic 0x{bytes(magic).hex()}')

    def __str__(self):
        return self.name

    def __repr__(self):
        return f'Network({self.name!r})'


Dogecoin = Network(
    name='mainnet',
    full_name='Dogecoin mainnet',
    magic_hex='c0c0c0c0',
    default_port=22556,
)


DogecoinTestnet = Network(
    name='testnet',
    full_name='Dogecoin testnet',
    magic_hex='fcc1b7dc',
    default_port=44556,
)


DogecoinRegtest = Network(
    name='regtest',
    full_name='Dogecoin regression testnet',
    magic_hex='fabfb5da',
    default_port=18444,
)


all_networks = (Dogecoin, DogecoinTestnet, DogecoinRegtest)
networks_by_name = {network.name: network for network in all_networks}
