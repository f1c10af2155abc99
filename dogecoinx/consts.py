# Copyright (c) 2024, Neil Booth
#
# All rights reserved.
#
# Licensed under the the Open BSV License version 3; see LICENCE for details.
#


__all__ = (
    'UINT16_MAX', 'UINT32_MAX', 'UINT64_MAX', 'PROTOCOL_VERSION', 'DEFAULT_USER_AGENT',
)


UINT16_MAX = 0xffff
UINT32_MAX = 0xffffffff
UINT64_MAX = 0xffffffffffffffff

# The only protocol version we speak
PROTOCOL_VERSION = 70_015
DEFAULT_USER_AGENT = '/Shibetoshi:1.14.6/'
