import pytest

from ktables.structs.credentials import ConnectionInfo, Identity, LoginError


def test_identity_with_token():
    identity = Identity(name='alice', token='secret')
    assert identity.token == 'secret'


def test_identity_with_certificate():
    identity = Identity(name='bob', certificate_data=b'cert', private_key_data=b'key')
    assert identity.certificate_data == b'cert'


@pytest.mark.parametrize('kwargs', [
    dict(),
    dict(token='t', certificate_data=b'c', private_key_data=b'k'),
    dict(certificate_data=b'c'),
    dict(private_key_data=b'k'),
])
def test_identity_misconfigured(kwargs):
    with pytest.raises(LoginError):
        Identity(name='x', **kwargs)


def test_identity_repr_has_no_secrets():
    identity = Identity(name='alice', token='secret')
    assert 'secret' not in repr(identity)
    assert 'alice' in repr(identity)


def test_identity_replaces_the_principal():
    base = ConnectionInfo(
        server='https://host',
        ca_data=b'ca',
        insecure=True,
        username='admin',
        password='pass',
        token='admin-token',
        certificate_path='/cert',
        private_key_path='/key',
        default_namespace='ns',
    )
    info = Identity(name='alice', token='user-token').as_connection_info(base)
    assert info == ConnectionInfo(
        server='https://host',
        ca_data=b'ca',
        insecure=True,
        token='user-token',
        default_namespace='ns',
    )
