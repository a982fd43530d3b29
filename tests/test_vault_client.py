"""Unit tests for VaultClient."""

import hashlib
import json

import httpx
import pytest

from cli.utils import digest_file
from cli.vault_client import VaultClient
from common.merkle import compute_merkle_root, verify_merkle_proof
from common.types import ProofStep


def make_client(config, handler):
    client = VaultClient(config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    return client


def file_json(**overrides):
    data = {
        'file_hash': 'ab' * 32,
        'filename': 'test.txt',
        'size': 26,
        'merkle_root': 'cd' * 32,
        'owner': 'alice',
        'authorized': ['alice', 'bob'],
        'upload_count': 1,
        'download_count': 0,
        'verified_proof_count': 0,
        'verified': False,
        'created_at': '2024-01-01T00:00:00+00:00',
        'first_verified_at': None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def logged_in(temp_config):
    temp_config.set_api_key('pv_test', 'alice')
    return temp_config


class TestAuth:
    def test_signup_saves_key_and_identity(self, temp_config):
        def handler(request):
            assert request.url.path == '/auth/signup'
            return httpx.Response(201, json={'identity': 'alice', 'api_key': 'pv_new'})

        result = make_client(temp_config, handler).signup('alice', 'password123')

        assert 'Signup successful' in result
        assert temp_config.get_api_key() == 'pv_new'
        assert temp_config.get_identity() == 'alice'

    def test_signup_conflict(self, temp_config):
        def handler(request):
            return httpx.Response(409, json={'detail': 'exists', 'code': 'ACCOUNT_ALREADY_EXISTS'})

        result = make_client(temp_config, handler).signup('alice', 'password123')

        assert 'already has an account' in result
        assert temp_config.get_api_key() is None

    def test_login_invalid_credentials(self, temp_config):
        def handler(request):
            return httpx.Response(401, json={'detail': 'bad', 'code': 'INVALID_CREDENTIALS'})

        result = make_client(temp_config, handler).login('alice', 'wrong')

        assert 'Invalid identity or password' in result

    def test_requests_carry_bearer_key(self, logged_in):
        seen = {}

        def handler(request):
            seen['auth'] = request.headers.get('Authorization')
            return httpx.Response(200, json={'total_users': 1})

        make_client(logged_in, handler).stats()

        assert seen['auth'] == 'Bearer pv_test'

    def test_not_logged_in(self, temp_config):
        def handler(request):
            raise AssertionError("no request expected")

        assert 'Not logged in' in make_client(temp_config, handler).stats()


class TestUpload:
    def test_upload_sends_hashes_and_default_fee(self, logged_in, sample_file):
        sent = {}

        def handler(request):
            if request.url.path == '/system/settings':
                return httpx.Response(200, json={'storage_fee': 750})
            sent.update(json.loads(request.content))
            return httpx.Response(201, json={'file': file_json(), 'fee_charged': 750, 'refund': 0})

        result = make_client(logged_in, handler).upload(str(sample_file))

        content = sample_file.read_bytes()
        assert sent['file_hash'] == hashlib.sha256(content).hexdigest()
        assert sent['merkle_root'] == compute_merkle_root([hashlib.sha256(content).hexdigest()])
        assert sent['size'] == len(content)
        assert sent['fee_paid'] == 750
        assert 'Uploaded: test.txt' in result

    def test_upload_explicit_fee_skips_settings(self, logged_in, sample_file):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(201, json={'file': file_json(), 'fee_charged': 1000, 'refund': 200})

        result = make_client(logged_in, handler).upload(str(sample_file), 1200)

        assert paths == ['/files']
        assert 'Refund: 200' in result

    def test_upload_missing_file(self, logged_in, tmp_path):
        def handler(request):
            raise AssertionError("no request expected")

        result = make_client(logged_in, handler).upload(str(tmp_path / 'nope.bin'), 1000)

        assert 'Error reading' in result

    def test_upload_quota_error(self, logged_in, sample_file):
        logged_in.data['max_retries'] = 0

        def handler(request):
            return httpx.Response(507, json={'detail': 'Upload exceeds quota', 'code': 'QUOTA_EXCEEDED'})

        result = make_client(logged_in, handler).upload(str(sample_file), 1000)

        assert 'Upload exceeds quota' in result
        assert 'QUOTA_EXCEEDED' in result


class TestProve:
    def test_prove_submits_valid_proof(self, logged_in, multi_chunk_file):
        logged_in.data['chunk_size'] = 16
        sent = {}

        def handler(request):
            sent['path'] = request.url.path
            sent.update(json.loads(request.content))
            return httpx.Response(200, json={
                'file_hash': 'ab' * 32,
                'verified_proof_count': 3,
                'threshold': 3,
                'verified': True,
                'newly_verified': True,
            })

        result = make_client(logged_in, handler).prove(str(multi_chunk_file), 2)

        digest = digest_file(str(multi_chunk_file), 16)
        steps = [ProofStep(sibling=s, direction=d) for s, d in zip(sent['proof_path'], sent['directions'])]
        assert sent['path'] == f'/files/{digest.file_hash}/proofs'
        assert sent['leaf_hash'] == digest.leaf_hashes[2]
        assert verify_merkle_proof(sent['leaf_hash'], steps, sent['claimed_root'])
        assert 'newly verified' in result

    def test_prove_index_out_of_range(self, logged_in, sample_file):
        def handler(request):
            raise AssertionError("no request expected")

        result = make_client(logged_in, handler).prove(str(sample_file), 5)

        assert 'out of range' in result


class TestReadsAndAdmin:
    def test_file_info(self, logged_in):
        def handler(request):
            return httpx.Response(200, json=file_json(verified=True))

        result = make_client(logged_in, handler).file_info('ab' * 32)

        assert 'alice, bob' in result
        assert 'verified' in result

    def test_list_files_defaults_to_stored_identity(self, logged_in):
        seen = {}

        def handler(request):
            seen['path'] = request.url.path
            return httpx.Response(200, json={'files': [file_json()]})

        result = make_client(logged_in, handler).list_files()

        assert seen['path'] == '/users/alice/files'
        assert 'test.txt' in result

    def test_admin_maps_action_to_endpoint(self, logged_in):
        seen = {}

        def handler(request):
            seen['method'] = request.method
            seen['path'] = request.url.path
            seen['body'] = json.loads(request.content) if request.content else None
            return httpx.Response(200, json={'status': 'updated'})

        result = make_client(logged_in, handler).admin('set-quota', 'bob', 4096)

        assert seen == {'method': 'PUT', 'path': '/admin/users/bob/quota', 'body': {'value': 4096}}
        assert result.startswith('OK')

    def test_admin_rejected(self, logged_in):
        def handler(request):
            return httpx.Response(403, json={'detail': 'no', 'code': 'NOT_ADMIN'})

        assert 'Only the administrator' in make_client(logged_in, handler).admin('pause')

    def test_paused_message(self, logged_in):
        def handler(request):
            return httpx.Response(503, json={'detail': 'paused', 'code': 'SYSTEM_PAUSED'})

        logged_in.data['max_retries'] = 0

        assert 'paused' in make_client(logged_in, handler).download('ab' * 32)


class TestRetry:
    def test_retries_server_errors(self, logged_in, monkeypatch):
        monkeypatch.setattr('cli.vault_client.time.sleep', lambda seconds: None)
        calls = []

        def handler(request):
            calls.append(1)
            if len(calls) < 3:
                return httpx.Response(503, json={'detail': 'busy', 'code': 'STORAGE_UNAVAILABLE'})
            return httpx.Response(200, json={'total_users': 4})

        result = make_client(logged_in, handler).stats()

        assert len(calls) == 3
        assert 'total_users: 4' in result

    def test_connection_failure(self, logged_in, monkeypatch):
        monkeypatch.setattr('cli.vault_client.time.sleep', lambda seconds: None)

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = make_client(logged_in, handler).stats()

        assert 'Cannot connect' in result
