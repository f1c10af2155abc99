# Copyright (c) 2024, Neil Booth
#
# All rights reserved.
#
# Licensed under the the Open BSV License version 3; see LICENCE for details.
#

'''Exception hierarchy.'''

__all__ = (
    'FormatError', 'UnknownMagic', 'StringTooLong', 'BufferTooShort', 'UnknownBytes',
    'BadChecksum', 'HeaderError', 'CommandTooLong', 'MessageTooLong', 'TooShort',
    'UnknownNetworkType', 'CommandIsEmpty', 'MessageSizeParseFailure',
    'TransportError', 'ShortRead', 'ShortWrite',
    'ProtocolError', 'UnexpectedCommand', 'IncorrectResponse', 'HandshakeStateError',
    'WrongNetwork', 'OversizedPayload',
    'ParameterError', 'IntegerParsingFailure', 'ValueTooLarge',
)


#
# Exception Hierarchy
#


class FormatError(ValueError):
    '''Base class for malformed, truncated or unencodable wire data.'''


class UnknownMagic(FormatError):
    '''Raised when 4 bytes are not the magic of any known network.'''


class StringTooLong(FormatError):
    '''Raised when a byte string is too long to be given a CompactSize length prefix.'''

    def __init__(self, length):
        super().__init__(length)
        self.length = length

    def __str__(self):
        return f'string of length {self.length:,d} is too long to be serialized'


class BufferTooShort(FormatError):
    '''Raised when decoding runs off the end of the supplied bytes.'''


class UnknownBytes(FormatError):
    '''Raised when bytes are present but cannot be interpreted.'''


class BadChecksum(FormatError):
    '''Raised by MessageHeader.verify() when a payload does not match its checksum.'''


class HeaderError(FormatError):
    '''Base class of errors building or parsing a message header.'''


class CommandTooLong(HeaderError):
    '''Raised when a command does not fit in the 12-byte command field.'''


class MessageTooLong(HeaderError):
    '''Raised when a payload length does not fit in an unsigned 32-bit integer.'''

    def __init__(self, length):
        super().__init__(length)
        self.length = length

    def __str__(self):
        return f'value too big for u32: {self.length:,d}'


class TooShort(HeaderError):
    '''Raised when fewer than 24 bytes are passed as a header.'''


class UnknownNetworkType(HeaderError):
    '''Raised when a header's magic does not belong to a known network.'''


class CommandIsEmpty(HeaderError):
    '''Raised when a header's command field is all NUL bytes.'''


class MessageSizeParseFailure(HeaderError):
    '''Raised when a header's payload length field cannot be decoded.'''


class TransportError(Exception):
    '''Raised when the byte stream fails or transfers fewer bytes than requested.'''


class ShortRead(TransportError):
    '''Raised when the stream ends before the requested number of bytes was read.'''

    def __init__(self, expected, actual):
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self):
        return f'incorrect number of bytes received: expected {self.expected:,d}, ' \
            f'got {self.actual:,d}'


class ShortWrite(TransportError):
    '''Raised when the stream accepts fewer bytes than were written.'''

    def __init__(self, expected, actual):
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self):
        return f'incorrect number of bytes sent: expected {self.expected:,d}, ' \
            f'sent {self.actual}'


class ProtocolError(Exception):
    '''Base class of peer behaviour that violates the handshake protocol.'''


class UnexpectedCommand(ProtocolError):
    '''Raised when a message other than the one expected is received.'''

    def __init__(self, expected, actual):
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self):
        return f'incorrect command received, expected: {self.expected!r}, ' \
            f'actual: {self.actual!r}'


class IncorrectResponse(ProtocolError):
    '''Raised when the peer's verack is not byte-for-byte what we expect.'''


class HandshakeStateError(ProtocolError):
    '''Raised when a handshake step is attempted from a state that does not permit it.'''


class WrongNetwork(ProtocolError):
    '''Raised when a peer's message carries the magic of a different network.'''


class OversizedPayload(ProtocolError):
    '''Raised when a peer announces a payload larger than we are willing to read.'''


class ParameterError(ValueError):
    '''Base class of invalid caller-supplied values.'''


class IntegerParsingFailure(ParameterError):
    '''Raised when an IP address literal is not a dotted-quad of octets.'''


class ValueTooLarge(ParameterError):
    '''Raised when a value does not fit the integer width of its wire field.'''
