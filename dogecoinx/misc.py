# Copyright (c) 2019-2024, Neil Booth
#
# All rights reserved.
#
# Licensed under the the Open BSV License version 3; see LICENCE for details.
#

'''Miscellaneous functions.'''

__all__ = (
    'le_bytes_to_int', 'prefixed_logger',
)

import logging
from functools import partial


le_bytes_to_int = partial(int.from_bytes, byteorder='little')


#
# Internal utilities
#


class PrefixedLogger(logging.LoggerAdapter):
    '''Prepends a connection identifier to a logging message.'''

    def process(self, msg, kwargs):
        return f'[{self.extra}] {msg}', kwargs


def prefixed_logger(name, text):
    extra = text
    return PrefixedLogger(logging.getLogger(name), extra)
