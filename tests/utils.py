from io import BytesIO


# A testnet version message captured from the reference client
VERSION_TIMESTAMP = 1681155665
VERSION_IP = '52.77.231.41'
VERSION_PORT = 44556
VERSION_NONCE = 17898312933758525253
VERSION_USER_AGENT = '/Shibetoshi:1.14.6/'

VERSION_PAYLOAD = bytes.fromhex(
    '7f110100'
    '0500000000000000'
    '5166346400000000'
    '0100000000000000' '00000000000000000000ffff344de729' 'ae0c'
    '0500000000000000' '00000000000000000000000000000000' '0000'
    '45df74afc89463f8'
) + b'\x13/Shibetoshi:1.14.6/' + bytes.fromhex('00000000' '01')

VERSION_HEADER = bytes.fromhex('fcc1b7dc' '76657273696f6e0000000000' '69000000' 'a2bb581c')
FULL_VERSION_MESSAGE = VERSION_HEADER + VERSION_PAYLOAD

TESTNET_VERACK = bytes.fromhex('fcc1b7dc' '76657261636b000000000000' '00000000' '5df6e0e2')


class FakeStream:
    '''An in-memory stand-in for a connection to a peer.

    Reads are served from incoming, at most chunk_size bytes at a time if given, and the
    requested sizes are recorded in read_sizes.  Written bytes accumulate in outgoing.'''

    def __init__(self, incoming=b'', *, chunk_size=None, short_write=False,
                 read_error=None, write_error=None):
        self.incoming = BytesIO(incoming)
        self.outgoing = bytearray()
        self.chunk_size = chunk_size
        self.short_write = short_write
        self.read_error = read_error
        self.write_error = write_error
        self.closed = False
        self.read_sizes = []

    def read(self, size):
        self.read_sizes.append(size)
        if self.read_error:
            raise self.read_error
        if self.chunk_size:
            size = min(size, self.chunk_size)
        return self.incoming.read(size)

    def write(self, data):
        if self.write_error:
            raise self.write_error
        count = len(data) - 1 if self.short_write else len(data)
        self.outgoing += data[:count]
        return count

    def close(self):
        self.closed = True


def in_caplog(caplog, message, count=1):
    cap_count = sum(message in record.message for record in caplog.records)
    if count is None:
        return bool(cap_count)
    return count == cap_count
