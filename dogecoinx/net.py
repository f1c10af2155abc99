# Copyright (c) 2024, Neil Booth
#
# All rights reserved.
#

from enum import IntFlag
from ipaddress import ip_address, IPv4Address
from struct import Struct, error as struct_error

import attr

from .errors import BufferTooShort, IntegerParsingFailure, ParameterError
from .packing import pack_le_uint64, pack_port, unpack_be_uint16_from


__all__ = (
    'ServiceFlags', 'Endpoint', 'ipv4_mapped_address', 'validate_port',
)


IPV4_MAPPED_PREFIX = bytes(10) + b'\xff\xff'


class ServiceFlags(IntFlag):
    NODE_NONE = 0
    NODE_NETWORK = 1 << 0
    NODE_BLOOM = 1 << 2


def ipv4_mapped_address(text):
    '''Convert a dotted-quad IPv4 literal, e.g. '52.77.231.41', to the 16-byte
    IPv4-mapped IPv6 form ::ffff:a.b.c.d used on the wire.'''
    if not isinstance(text, str):
        raise IntegerParsingFailure(f'IP address must be a string: {text!r}')
    try:
        address = IPv4Address(text)
    except ValueError as e:
        raise IntegerParsingFailure(f'invalid IPv4 address: {text!r}') from e
    return IPV4_MAPPED_PREFIX + address.packed


def validate_port(port):
    '''Validate port and return it as an integer.

    A string, or its representation as an integer, is accepted.'''
    if not isinstance(port, (str, int)):
        raise TypeError(f'port must be an integer or string: {port}')
    if isinstance(port, str) and port.isdigit():
        port = int(port)
    if isinstance(port, int) and 0 < port <= 65535:
        return port
    raise ValueError(f'invalid port: {port}')


@attr.s(slots=True, frozen=True)
class Endpoint:
    '''A peer's reachability as described in a version message: service flags, a 16-byte
    IPv6 (or IPv4-mapped) address and a port.

    On the wire services are little-endian and the port is big-endian.'''

    struct = Struct('<Q16s2s')
    SIZE = struct.size

    services = attr.ib(converter=ServiceFlags)
    address = attr.ib()
    port = attr.ib()

    @address.validator
    def _check_address(self, _attribute, value):
        if not isinstance(value, bytes) or len(value) != 16:
            raise ParameterError(f'address must be 16 bytes: {value!r}')

    @classmethod
    def unspecified(cls, services):
        '''The all-zeroes address and port 0, for when reachability is unknown.'''
        return cls(services, bytes(16), 0)

    def host(self):
        '''Return the address as an ipaddress object; IPv4-mapped addresses are returned as
        IPv4Address.'''
        address = ip_address(self.address)
        return address.ipv4_mapped or address

    def pack(self):
        return pack_le_uint64(self.services) + self.address + pack_port(self.port)

    @classmethod
    def unpack_from(cls, buf, offset=0):
        '''Decode the 26 bytes of an endpoint starting at offset in buf.'''
        try:
            services, address, _ = cls.struct.unpack_from(buf, offset)
        except struct_error:
            raise BufferTooShort(f'endpoint requires {cls.SIZE} bytes at offset '
                                 f'{offset:,d}') from None
        port, = unpack_be_uint16_from(buf, offset + 24)
        return cls(services, address, port)

    def __str__(self):
        return f'{self.host()}:{self.port} services={self.services!r}'
