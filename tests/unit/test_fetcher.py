"""Unit tests for downloading from CertWarden."""

import os
import stat

import pytest

from certwarden_client.common.errors import FetchError
from certwarden_client.utils.fetcher import (
    CERTIFICATES,
    PRIVATE_KEYS,
    build_download_url,
    fetch_to_file,
)
from conftest import CERT_PEM, CERT_URL, KEY_URL, SERVER, FakeSession


class TestBuildDownloadUrl:

    def test_certificate_url(self):
        assert build_download_url(SERVER, CERTIFICATES, 'example.com') == CERT_URL

    def test_private_key_url(self):
        assert build_download_url(SERVER + '/', PRIVATE_KEYS, 'example.com') == KEY_URL

    def test_name_is_quoted(self):
        url = build_download_url(SERVER, CERTIFICATES, 'a b/c')
        assert url.endswith('/download/certificates/a%20b%2Fc')

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            build_download_url(SERVER, 'csrs', 'example.com')


class TestFetchToFile:

    def test_writes_body_on_200(self, session, tmp_path):
        target = tmp_path / 'cert.pem'
        assert fetch_to_file(CERT_URL, 'cert-key-123', str(target), session=session) == str(target)
        assert target.read_bytes() == CERT_PEM
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600

    def test_sends_api_key_header(self, session, tmp_path):
        fetch_to_file(CERT_URL, 'cert-key-123', str(tmp_path / 'cert.pem'), session=session)
        assert session.calls[0].headers == {'X-API-Key': 'cert-key-123'}

    @pytest.mark.parametrize('status', [401, 403, 404, 500])
    def test_non_200_raises(self, tmp_path, status):
        session = FakeSession({CERT_URL: (status, b'denied')})
        target = tmp_path / 'cert.pem'
        with pytest.raises(FetchError) as excinfo:
            fetch_to_file(CERT_URL, 'bad', str(target), session=session)
        assert excinfo.value.status == status
        assert excinfo.value.url == CERT_URL
        assert not target.exists()

    def test_other_2xx_is_a_failure(self, tmp_path):
        session = FakeSession({CERT_URL: (204, b'')})
        with pytest.raises(FetchError):
            fetch_to_file(CERT_URL, 'ck', str(tmp_path / 'cert.pem'), session=session)

    def test_transport_error_has_status_zero(self, tmp_path, transport_error):
        session = FakeSession({CERT_URL: transport_error})
        with pytest.raises(FetchError) as excinfo:
            fetch_to_file(CERT_URL, 'ck', str(tmp_path / 'cert.pem'), session=session)
        assert excinfo.value.status == 0
        assert 'HTTP status: 000' in str(excinfo.value)
