import base64
import pytest
from ledgervault.lib import envelope
from ledgervault.lib.errors import InvalidInputError, MalformedEnvelopeError

SALT = bytes(range(16))
IV = bytes(range(100, 112))

def test_layout_is_salt_iv_sealed():
    text = envelope.encode(SALT, IV, b'sealed-bytes')
    assert base64.b64decode(text) == SALT + IV + b'sealed-bytes'
    assert envelope.decode(text) == (SALT, IV, b'sealed-bytes')

def test_header_only_envelope_decodes():
    assert envelope.decode(envelope.encode(SALT, IV, b'')) == (SALT, IV, b'')

def test_too_short():
    with pytest.raises(MalformedEnvelopeError):
        envelope.decode(base64.b64encode(b'x' * 27).decode())

@pytest.mark.parametrize('text', ['not base64!!', 'abc', 'ééé', ''])
def test_invalid_text(text):
    with pytest.raises(MalformedEnvelopeError):
        envelope.decode(text)

def test_non_text():
    with pytest.raises(MalformedEnvelopeError):
        envelope.decode(b'AAAA')

def test_encode_checks_widths():
    with pytest.raises(InvalidInputError):
        envelope.encode(SALT[:8], IV, b'')
    with pytest.raises(InvalidInputError):
        envelope.encode(SALT, IV + b'x', b'')

def test_surrounding_whitespace_ignored():
    text = envelope.encode(SALT, IV, b'sealed-bytes')
    assert envelope.decode(f'  {text}\n') == (SALT, IV, b'sealed-bytes')
