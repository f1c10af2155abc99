# Copyright (c) 2024, Neil Booth
#
# All rights reserved.
#

'''A blocking driver for the version / verack handshake with a single peer.

The handshake is four steps performed strictly in order:

    send version -> receive version -> send verack -> receive verack

Handshake.start() returns the Init state.  Each state offers only the step it permits;
taking that step consumes the state and returns the next one, so steps cannot be
repeated or taken out of order.  Any failure is terminal: nothing is retried.
'''

import logging
import socket
import time

from .consts import DEFAULT_USER_AGENT
from .errors import (
    HandshakeStateError, IncorrectResponse, OversizedPayload, ShortRead, ShortWrite,
    TransportError, UnexpectedCommand, WrongNetwork,
)
from .hashes import double_sha256
from .misc import prefixed_logger
from .net import ipv4_mapped_address
from .net_protocol import MessageHeader, Verack, Version, parse_header, random_nonce


__all__ = (
    'Connection', 'SocketStream', 'Handshake',
    'Init', 'VersionSent', 'VersionReceived', 'AckSent', 'Done',
)


class SocketStream:
    '''Presents a connected socket as a blocking byte stream.'''

    def __init__(self, sock):
        self.sock = sock

    def read(self, size):
        return self.sock.recv(size)

    def write(self, data):
        self.sock.sendall(data)
        return len(data)

    def close(self):
        self.sock.close()


class Connection:
    '''A blocking connection to a peer over a byte stream.

    The stream must provide read(size) returning up to size bytes (empty at end-of-stream)
    and write(data) returning the number of bytes written, as binary file objects do.
    '''

    # The most requested from the stream by a single read
    CHUNK_SIZE = 65_536

    def __init__(self, stream):
        self.stream = stream

    def close(self):
        try:
            self.stream.close()
        except (BrokenPipeError, ConnectionResetError, ConnectionAbortedError):
            pass

    def send(self, data):
        try:
            written = self.stream.write(data)
        except OSError as e:
            raise TransportError(f'error writing to stream: {e}') from e
        if written != len(data):
            raise ShortWrite(len(data), written)

    def recv_exactly(self, size):
        '''Read until size bytes are received or the stream ends.'''
        read = self.stream.read
        parts = []
        remaining = size
        while remaining:
            try:
                part = read(min(remaining, self.CHUNK_SIZE))
            except OSError as e:
                raise TransportError(f'error reading from stream: {e}') from e
            if not part:
                break
            parts.append(part)
            remaining -= len(part)
        result = b''.join(parts)
        if remaining:
            raise ShortRead(size, len(result))
        return result


class HandshakeState:
    '''Base class of handshake states.'''

    def __init__(self, handshake, remote_version=None):
        self.handshake = handshake
        self.remote_version = remote_version
        self._consumed = False

    def _consume(self):
        if self._consumed:
            raise HandshakeStateError(f'handshake has already left the {self} state')
        self._consumed = True
        return self.handshake

    def __str__(self):
        return self.__class__.__name__


# pylint: disable=protected-access

class Init(HandshakeState):

    def send_version(self):
        handshake = self._consume()
        handshake._send_version()
        return VersionSent(handshake)


class VersionSent(HandshakeState):

    def receive_version(self):
        handshake = self._consume()
        remote_version = handshake._receive_version()
        return VersionReceived(handshake, remote_version)


class VersionReceived(HandshakeState):

    def send_version_ack(self):
        handshake = self._consume()
        handshake._send_version_ack()
        return AckSent(handshake, self.remote_version)


class AckSent(HandshakeState):

    def read_version_ack(self):
        handshake = self._consume()
        handshake._read_version_ack()
        return Done(handshake, self.remote_version)


class Done(HandshakeState):
    '''The handshake completed.  remote_version is the peer's version message.'''


class Handshake:
    '''Performs the handshake with the peer at a dotted-quad IPv4 address and port.

    The clock, nonce source and hash function are injected so tests can be deterministic:
    clock() returns the current Unix time in seconds, nonce_source() an unsigned 64-bit
    integer, and hash_func(data) a digest whose first 4 bytes are a checksum.
    '''

    # Give up if the peer does not respond within this many seconds
    CONNECTION_TIMEOUT = 10
    # Larger version payloads are refused before being read
    MAX_PAYLOAD_LENGTH = 2 * 1024 * 1024

    def __init__(self, stream, network, ip, port, *,
                 clock=time.time,
                 nonce_source=random_nonce,
                 hash_func=double_sha256,
                 user_agent=DEFAULT_USER_AGENT):
        self.connection = Connection(stream)
        self.network = network
        self.ip = ip
        self.port = port
        self.clock = clock
        self.nonce_source = nonce_source
        self.hash_func = hash_func
        self.user_agent = user_agent
        # The nonce of the version message we sent
        self.nonce = None
        self._started = False

        # Logging
        self.logger = prefixed_logger(str(network), f'{ip}:{port}')
        self.debug = self.logger.isEnabledFor(logging.DEBUG)

    @classmethod
    def connect(cls, network, ip, port, *, timeout=None, **kwargs):
        '''Open a TCP connection to ip and port and return a Handshake over it.

        If timeout is not None, connecting and every later read and write fail with
        TransportError if they take longer than timeout seconds.
        '''
        ipv4_mapped_address(ip)
        try:
            sock = socket.create_connection((ip, port), timeout=timeout)
        except OSError as e:
            raise TransportError(f'cannot connect to {ip}:{port}: {e}') from e
        return cls(SocketStream(sock), network, ip, port, **kwargs)

    def __enter__(self):
        return self

    def __exit__(self, _et, _exc, _tb):
        self.close()

    def close(self):
        self.connection.close()

    def start(self):
        '''Return the Init state.  A handshake can only be started once.'''
        if self._started:
            raise HandshakeStateError('handshake already started')
        self._started = True
        return Init(self)

    def perform(self):
        '''Perform all four steps of the handshake and return the Done state.'''
        state = self.start()
        state = state.send_version()
        state = state.receive_version()
        state = state.send_version_ack()
        state = state.read_version_ack()
        self.logger.info('handshake complete')
        return state

    def log_version_details(self, payload, headline):
        self.logger.info(headline)
        self.logger.info(f'    user_agent={payload.user_agent} services={payload.services!r}')
        self.logger.info(f'    protocol={payload.protocol_version} '
                         f'height={payload.start_height:,d} relay={payload.relay} '
                         f'timestamp={payload.timestamp}')

    def _send(self, command, raw):
        if self.debug:
            self.logger.debug(f'-> {command} payload {len(raw) - MessageHeader.SIZE:,d} bytes')
        self.connection.send(raw)

    def _send_version(self):
        nonce = self.nonce_source()
        version = Version.new(self.network, int(self.clock()), self.ip, self.port, nonce,
                              self.user_agent)
        self.log_version_details(version.payload, 'sending version message:')
        self._send(Version.COMMAND, version.to_bytes(self.hash_func))
        self.nonce = nonce

    def _receive_version(self):
        raw_header = self.connection.recv_exactly(MessageHeader.SIZE)
        header = parse_header(raw_header)
        if self.debug:
            self.logger.debug(f'<- {header} payload {header.payload_len:,d} bytes')
        if header.network is not self.network:
            raise WrongNetwork(f'{header} message is for {header.network.full_name}, '
                               f'expected {self.network.full_name}')
        if header.command != Version.COMMAND:
            raise UnexpectedCommand(Version.COMMAND, header.command)
        if header.payload_len > self.MAX_PAYLOAD_LENGTH:
            raise OversizedPayload(f'{header} payload of {header.payload_len:,d} bytes '
                                   f'exceeds {self.MAX_PAYLOAD_LENGTH:,d}')

        payload = self.connection.recv_exactly(header.payload_len)
        version = Version.from_bytes(raw_header + payload)
        self.log_version_details(version.payload, 'received version message:')
        return version

    def _send_version_ack(self):
        self.logger.info('sending verack message')
        self._send(Verack.COMMAND, Verack(self.network).to_bytes(self.hash_func))

    def _read_version_ack(self):
        raw = self.connection.recv_exactly(MessageHeader.SIZE)
        if self.debug:
            self.logger.debug(f'<- {raw.hex()}')
        if raw != Verack(self.network).to_bytes(self.hash_func):
            raise IncorrectResponse(f'incorrect verack received: 0x{raw.hex()}')
        self.logger.info('received verack message')
