# Copyright (c) 2016-2021, Neil Booth
#
# All rights reserved.
#
# Licensed under the the Open BSV License version 3; see LICENCE for details.
#

'''Cryptographic hash functions and message checksums.'''

__all__ = (
    'sha256', 'double_sha256', 'payload_checksum',
)

import hashlib


_sha256 = hashlib.sha256


def sha256(x):
    '''Simple wrapper of hashlib sha256.'''
    return _sha256(x).digest()


def double_sha256(x):
    '''SHA-256 of SHA-256, as used extensively in dogecoin.'''
    return sha256(sha256(x))


def payload_checksum(payload, hash_func=double_sha256):
    '''Return the 4-byte checksum of a message payload.

    hash_func is any function mapping bytes to a digest of at least 4 bytes; only the first
    4 bytes are used.
    '''
    return hash_func(payload)[:4]
