# Copyright (c) 2018-2021, Neil Booth
#
# All rights reserved.
#
# Licensed under the the Open BSV License version 3; see LICENCE for details.
#

__all__ = (
    'pack_le_uint16', 'pack_le_uint32', 'pack_le_uint64', 'pack_be_uint16',
    'pack_byte', 'pack_port', 'pack_varint', 'pack_varbytes', 'varint_len', 'varbytes_len',
    'unpack_le_uint16_from', 'unpack_le_uint32_from', 'unpack_le_uint64_from',
    'unpack_be_uint16_from', 'unpack_byte_from', 'unpack_port_from',
    'unpack_varint_from', 'unpack_varbytes_from',
)


from struct import Struct, error as struct_error

from .consts import UINT64_MAX
from .errors import BufferTooShort, StringTooLong, ValueTooLarge


struct_le_H = Struct('<H')
struct_le_I = Struct('<I')
struct_le_Q = Struct('<Q')
struct_be_H = Struct('>H')
structB = Struct('B')


def _packer(struct):
    pack = struct.pack

    def pack_checked(*values):
        try:
            return pack(*values)
        except struct_error as e:
            raise ValueTooLarge(f'cannot pack {values} as {struct.format!r}: {e}') from None

    return pack_checked


def _unpacker_from(struct):
    unpack_from = struct.unpack_from
    size = struct.size

    def unpack_from_checked(buf, offset=0):
        try:
            return unpack_from(buf, offset)
        except struct_error:
            raise BufferTooShort(f'{size} bytes required at offset {offset:,d}, '
                                 f'buffer has {len(buf):,d}') from None

    return unpack_from_checked


pack_le_uint16 = _packer(struct_le_H)
pack_le_uint32 = _packer(struct_le_I)
pack_le_uint64 = _packer(struct_le_Q)
pack_be_uint16 = _packer(struct_be_H)
pack_byte = _packer(structB)

unpack_le_uint16_from = _unpacker_from(struct_le_H)
unpack_le_uint32_from = _unpacker_from(struct_le_I)
unpack_le_uint64_from = _unpacker_from(struct_le_Q)
unpack_be_uint16_from = _unpacker_from(struct_be_H)
unpack_byte_from = _unpacker_from(structB)

pack_port = pack_be_uint16
unpack_port_from = unpack_be_uint16_from


def varint_len(n):
    '''Return the length of the varint (CompactSize) encoding of an unsigned integer.'''
    if n >= 0:
        if n < 253:
            return 1
        if n < 65536:
            return 3
        if n < 4294967296:
            return 5
        if n <= UINT64_MAX:
            return 9
    raise ValueTooLarge(f'value {n} out of range for varint')


def varbytes_len(length):
    '''Return the serialized size of a byte string of the given length, including its
    CompactSize length prefix.'''
    if length >= UINT64_MAX:
        raise StringTooLong(length)
    return varint_len(length) + length


def pack_varint(n):
    '''Convert an unsigned integer into a binary varint (CompactSize).

    Return a bytes object.'''
    if n < 253:
        return pack_byte(n)
    if n < 65536:
        return b'\xfd' + pack_le_uint16(n)
    if n < 4294967296:
        return b'\xfe' + pack_le_uint32(n)
    return b'\xff' + pack_le_uint64(n)


def pack_varbytes(data):
    '''Serialize binary data by prepending a size varint.'''
    length = len(data)
    if length >= UINT64_MAX:
        raise StringTooLong(length)
    return pack_varint(length) + data


def unpack_varint_from(buf, offset=0):
    '''Decode a varint starting at offset in buf.

    Return a (value, size) pair where size is the number of bytes the varint occupies.'''
    n, = unpack_byte_from(buf, offset)
    if n < 253:
        return n, 1
    if n == 253:
        return unpack_le_uint16_from(buf, offset + 1)[0], 3
    if n == 254:
        return unpack_le_uint32_from(buf, offset + 1)[0], 5
    return unpack_le_uint64_from(buf, offset + 1)[0], 9


def unpack_varbytes_from(buf, offset=0):
    '''Decode a length-prefixed byte string starting at offset in buf.

    Return a (data, consumed) pair; consumed counts the prefix and the content so callers
    can locate whatever follows.  No bytes of the content are filtered.
    '''
    n, size = unpack_varint_from(buf, offset)
    start = offset + size
    result = bytes(buf[start: start + n])
    if len(result) != n:
        raise BufferTooShort(f'varbytes requires a buffer of {n:,d} bytes')
    return result, size + n
