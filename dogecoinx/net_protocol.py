# Copyright (c) 2024, Neil Booth
#
# All rights reserved.
#

'''Implementation of the dogecoin network protocol messages needed for a handshake.'''

import os
from dataclasses import dataclass, field
from struct import Struct

from .consts import DEFAULT_USER_AGENT, PROTOCOL_VERSION, UINT32_MAX
from .errors import (
    BadChecksum, BufferTooShort, CommandIsEmpty, CommandTooLong, MessageSizeParseFailure,
    MessageTooLong, TooShort, UnknownBytes, UnknownMagic, UnknownNetworkType,
)
from .hashes import double_sha256, payload_checksum
from .misc import le_bytes_to_int
from .net import Endpoint, ServiceFlags, ipv4_mapped_address
from .networks import Network
from .packing import (
    pack_byte, pack_le_uint32, pack_le_uint64, pack_varbytes, varbytes_len,
    unpack_byte_from, unpack_le_uint32_from, unpack_le_uint64_from, unpack_varbytes_from,
)


__all__ = (
    'MessageHeader', 'VersionPayload', 'Version', 'Verack', 'build_header', 'parse_header',
    'random_nonce',
)

#
# Constants and classes implementing the dogecoin network protocol
#

ZERO_NONCE = bytes(8)

std_header_struct = Struct('<4s12sI4s')
std_pack = std_header_struct.pack
std_unpack_from = std_header_struct.unpack_from


def _command(text):
    if not text:
        raise CommandIsEmpty('command is empty')
    if not text.isascii():
        raise UnknownBytes(f'command {text!r} is not ASCII')
    command = text.encode()
    if len(command) > MessageHeader.COMMAND_LEN:
        raise CommandTooLong(f'command {text!r} exceeds {MessageHeader.COMMAND_LEN} bytes')
    return command.ljust(MessageHeader.COMMAND_LEN, b'\0')


@dataclass
class MessageHeader:
    '''The header of a network protocol message.

    The checksum is recorded as received; it is only compared with a payload by verify().
    '''

    COMMAND_LEN = 12
    SIZE = std_header_struct.size

    network: Network
    command: str
    payload_len: int
    checksum: bytes

    @classmethod
    def for_payload(cls, network, command, payload, *, hash_func=double_sha256):
        '''Return the header framing payload.'''
        _command(command)
        if len(payload) > UINT32_MAX:
            raise MessageTooLong(len(payload))
        return cls(network, command, len(payload), payload_checksum(payload, hash_func))

    def to_bytes(self):
        return std_pack(self.network.magic, _command(self.command), self.payload_len,
                        self.checksum)

    @classmethod
    def from_bytes(cls, raw):
        '''Parse the first 24 bytes of raw.  Any further bytes are ignored.'''
        if len(raw) < cls.SIZE:
            raise TooShort(f'passed header is too short ({cls.SIZE} bytes are required)')
        magic, command_bytes, _, checksum = std_unpack_from(raw)

        try:
            network = Network.from_magic(magic)
        except UnknownMagic as e:
            raise UnknownNetworkType(str(e)) from e

        command_bytes = command_bytes.rstrip(b'\0')
        if not command_bytes:
            raise CommandIsEmpty('command is empty')
        command = command_bytes.decode() if command_bytes.isascii() else '0x' + command_bytes.hex()

        try:
            payload_len, = unpack_le_uint32_from(raw, 16)
        except BufferTooShort as e:
            raise MessageSizeParseFailure('message size parse failure') from e

        return cls(network, command, payload_len, bytes(checksum))

    def verify(self, payload, hash_func=double_sha256):
        '''Raise an exception unless payload is the one this header frames.'''
        if len(payload) != self.payload_len:
            raise BufferTooShort(f'{self} header has payload length {self.payload_len:,d} '
                                 f'but payload has {len(payload):,d} bytes')
        if payload_checksum(payload, hash_func) != self.checksum:
            raise BadChecksum(f'bad checksum for {self} command')

    def __str__(self):
        return self.command


def build_header(network, command, payload, *, hash_func=double_sha256):
    '''Return the 24-byte header framing payload as a command message on network.'''
    return MessageHeader.for_payload(network, command, payload, hash_func=hash_func).to_bytes()


def parse_header(raw):
    '''Parse a 24-byte message header.  The checksum is not checked.'''
    return MessageHeader.from_bytes(raw)


def random_nonce():
    '''A nonce suitable for a VERSION message.'''
    # dogecoind doesn't like zero nonces
    while True:
        nonce = os.urandom(8)
        if nonce != ZERO_NONCE:
            return le_bytes_to_int(nonce)


@dataclass
class VersionPayload:
    '''The payload of a version message.

    recipient describes the peer the message is sent to, sender the peer sending it.
    '''

    FIXED_SIZE = 80
    LOCAL_SERVICES = ServiceFlags.NODE_NETWORK | ServiceFlags.NODE_BLOOM

    protocol_version: int
    services: ServiceFlags
    timestamp: int
    recipient: Endpoint
    sender: Endpoint
    nonce: int
    user_agent: str
    start_height: int
    relay: bool

    def to_payload(self):
        return b''.join((
            pack_le_uint32(self.protocol_version),
            pack_le_uint64(self.services),
            pack_le_uint64(self.timestamp),
            self.recipient.pack(),
            self.sender.pack(),
            pack_le_uint64(self.nonce),
            pack_varbytes(self.user_agent.encode()),
            pack_le_uint32(self.start_height),
            pack_byte(self.relay),
        ))

    def size(self):
        '''The size of the serialized payload in bytes.'''
        return self.FIXED_SIZE + varbytes_len(len(self.user_agent.encode())) + 5

    @classmethod
    def from_payload(cls, payload):
        if len(payload) < cls.FIXED_SIZE + 1:
            raise BufferTooShort(f'version payload of {len(payload):,d} bytes is too short')

        protocol_version, = unpack_le_uint32_from(payload, 0)
        services, = unpack_le_uint64_from(payload, 4)
        timestamp, = unpack_le_uint64_from(payload, 12)
        recipient = Endpoint.unpack_from(payload, 20)
        sender = Endpoint.unpack_from(payload, 20 + Endpoint.SIZE)
        nonce, = unpack_le_uint64_from(payload, 72)

        user_agent, consumed = unpack_varbytes_from(payload, cls.FIXED_SIZE)
        try:
            user_agent = user_agent.decode()
        except UnicodeDecodeError:
            user_agent = '0x' + user_agent.hex()

        offset = cls.FIXED_SIZE + consumed
        start_height, = unpack_le_uint32_from(payload, offset)
        relay, = unpack_byte_from(payload, offset + 4)

        return cls(protocol_version, ServiceFlags(services), timestamp, recipient, sender,
                   nonce, user_agent, start_height, relay != 0)


@dataclass
class Version:
    '''A version message.  header is only present on decoded messages.'''

    COMMAND = 'version'

    network: Network
    payload: VersionPayload
    header: MessageHeader = field(default=None, compare=False)

    @classmethod
    def new(cls, network, timestamp, ip, port, nonce, user_agent=DEFAULT_USER_AGENT):
        '''Return the version message we send to the peer at the dotted-quad IPv4 address ip
        and the given port.

        Our own address is not known to the peer so it is sent as unspecified.
        '''
        recipient = Endpoint(ServiceFlags.NODE_NETWORK, ipv4_mapped_address(ip), port)
        payload = VersionPayload(
            protocol_version=PROTOCOL_VERSION,
            services=VersionPayload.LOCAL_SERVICES,
            timestamp=timestamp,
            recipient=recipient,
            sender=Endpoint.unspecified(VersionPayload.LOCAL_SERVICES),
            nonce=nonce,
            user_agent=user_agent,
            start_height=0,
            relay=True,
        )
        return cls(network, payload)

    def to_bytes(self, hash_func=double_sha256):
        payload = self.payload.to_payload()
        return build_header(self.network, self.COMMAND, payload, hash_func=hash_func) + payload

    @classmethod
    def from_bytes(cls, raw):
        header = parse_header(raw)
        if header.command != cls.COMMAND:
            raise UnknownBytes(f'expected a {cls.COMMAND} message, got {header}')
        payload = raw[MessageHeader.SIZE: MessageHeader.SIZE + header.payload_len]
        if len(payload) != header.payload_len:
            raise BufferTooShort(f'{header} payload has {len(payload):,d} of '
                                 f'{header.payload_len:,d} bytes')
        return cls(header.network, VersionPayload.from_payload(payload), header)


@dataclass
class Verack:
    '''A verack message; it has an empty payload.'''

    COMMAND = 'verack'

    network: Network

    def to_bytes(self, hash_func=double_sha256):
        return build_header(self.network, self.COMMAND, b'', hash_func=hash_func)

    @classmethod
    def from_bytes(cls, raw):
        header = parse_header(raw)
        if header.command != cls.COMMAND or header.payload_len:
            raise UnknownBytes(f'not a verack message: {header} with payload length '
                               f'{header.payload_len:,d}')
        return cls(header.network)
