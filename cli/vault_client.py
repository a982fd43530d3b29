"""HTTP client for communicating with the ProofVault server."""

import time
import uuid
from typing import Optional

import httpx

from common.logging_config import get_logger
from common.merkle import compute_merkle_proof
from cli.config import Config
from cli.constants import GREEN, RESET
from cli.utils import digest_file, format_file_size, short_hash

logger = get_logger(__name__)

_ADMIN_ENDPOINTS = {
    'pause': ('POST', '/admin/pause'),
    'unpause': ('POST', '/admin/unpause'),
    'set-fee': ('PUT', '/admin/storage-fee'),
    'set-threshold': ('PUT', '/admin/verification-threshold'),
    'set-default-quota': ('PUT', '/admin/default-quota'),
    'set-max-quota': ('PUT', '/admin/max-quota'),
    'set-quota': ('PUT', '/admin/users/{identity}/quota'),
    'suspend': ('POST', '/admin/users/{identity}/suspend'),
    'unsuspend': ('POST', '/admin/users/{identity}/unsuspend'),
}


class VaultClient:
    """HTTP client for the ProofVault API with retry logic and error handling."""

    def __init__(self, config: Config):
        """
        Initialize vault client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized VaultClient [base_url={config.get_base_url()}]")

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, PUT)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})
        kwargs['headers']['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                    )
                    return response

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Network error (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        raise ConnectionError("Cannot connect to ProofVault server. Is it running?")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        error_messages = {
            'INVALID_API_KEY': 'Not authenticated. Please run: login <identity> <password>',
            'ACCOUNT_ALREADY_EXISTS': 'Identity already has an account. Try logging in instead.',
            'INVALID_CREDENTIALS': 'Invalid identity or password.',
            'RESERVED_IDENTITY': 'That identity is reserved for the administrator.',
            'SYSTEM_PAUSED': 'The system is paused. Only reads are available right now.',
            'NOT_ADMIN': 'Only the administrator can do that.',
            'NOT_ELIGIBLE': 'You must register a profile (and not be suspended) before uploading.',
            'NOT_REGISTERED': 'You must register a profile first: register <name>',
            'SUSPENDED': 'Your account is suspended.',
            'FILE_NOT_FOUND': 'File not found on server.',
            'NOT_AUTHORIZED': 'You are not authorized to download this file.',
            'NOT_OWNER_OR_ADMIN': 'Only the file owner or the administrator can change access.',
            'ROOT_MISMATCH': 'Proof rejected: it does not lead to the registered Merkle root.',
            'STORAGE_UNAVAILABLE': 'Server storage is currently unavailable. Please try again later.',
        }

        if code in error_messages:
            return error_messages[code]

        return f"{detail} (Code: {code})" if code != 'UNKNOWN' else detail

    def _get_auth_header(self) -> dict:
        """
        Raises:
            ValueError: If no API key is configured
        """
        api_key = self.config.get_api_key()
        if not api_key:
            raise ValueError("Not logged in. Please run: login <identity> <password>")
        return {'Authorization': f'Bearer {api_key}'}

    def _authed(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        kwargs['headers'] = self._get_auth_header()
        return self._request_with_retry(method, endpoint, **kwargs)

    def signup(self, identity: str, password: str) -> str:
        """
        Create account credentials and store the issued API key.
        """
        logger.info(f"Attempting signup: {identity}")
        try:
            response = self._request_with_retry(
                'POST',
                '/auth/signup',
                json={'identity': identity, 'password': password}
            )
        except ConnectionError as e:
            logger.error(f"Connection error during signup: {e}")
            return f"Error: {e}"

        if response.status_code != 201:
            logger.warning(f"Signup failed for {identity} status={response.status_code}")
            return f"Signup failed: {self._format_error(response)}"

        self.config.set_api_key(response.json()['api_key'], identity)
        logger.info(f"Signup successful: {identity}")
        return f"Signup successful!\nIdentity: {identity}\nAPI key saved to config."

    def login(self, identity: str, password: str) -> str:
        logger.info(f"Attempting login: {identity}")
        try:
            response = self._request_with_retry(
                'POST',
                '/auth/login',
                json={'identity': identity, 'password': password}
            )
        except ConnectionError as e:
            logger.error(f"Connection error during login: {e}")
            return f"Error: {e}"

        if response.status_code != 200:
            logger.warning(f"Login failed for {identity} status={response.status_code}")
            return f"Login failed: {self._format_error(response)}"

        self.config.set_api_key(response.json()['api_key'], identity)
        logger.info(f"Login successful: {identity}")
        return f"Login successful!\nNew API key saved to config."

    def register(self, name: str) -> str:
        """Register a profile name for the logged-in identity."""
        try:
            response = self._authed('POST', '/users', json={'name': name})
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 201:
            return f"Registration failed: {self._format_error(response)}"

        return "Registered!\n" + self._format_profile(response.json())

    def upload(self, path: str, fee: Optional[int] = None) -> str:
        """
        Hash a local file, build its Merkle root and register it.

        When fee is None the current storage fee is paid exactly.
        """
        try:
            digest = digest_file(path, self.config.get_chunk_size())
        except OSError as e:
            return f"Error reading {path}: {e}"

        if digest.size == 0:
            return f"Error: {path} is empty; only non-empty files can be registered"

        logger.info(
            f"Uploading {digest.filename} [file_hash={digest.file_hash}] "
            f"size={digest.size} leaves={len(digest.leaf_hashes)}"
        )

        try:
            if fee is None:
                settings_response = self._authed('GET', '/system/settings')
                if settings_response.status_code != 200:
                    return f"Upload failed: {self._format_error(settings_response)}"
                fee = settings_response.json()['storage_fee']

            response = self._authed(
                'POST',
                '/files',
                json={
                    'file_hash': digest.file_hash,
                    'filename': digest.filename,
                    'size': digest.size,
                    'merkle_root': digest.merkle_root,
                    'fee_paid': fee,
                }
            )
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 201:
            return f"Upload failed: {self._format_error(response)}"

        data = response.json()
        return (
            f"Uploaded: {digest.filename} ({format_file_size(digest.size)})\n"
            f"  Hash:        {digest.file_hash}\n"
            f"  Merkle root: {digest.merkle_root}\n"
            f"  Fee charged: {data['fee_charged']}  Refund: {data['refund']}"
        )

    def download(self, file_hash: str) -> str:
        try:
            response = self._authed('POST', f'/files/{file_hash}/download')
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Download failed: {self._format_error(response)}"

        data = response.json()
        return f"Download recorded: {data['filename']} (downloads: {data['download_count']})"

    def authorize(self, file_hash: str, grantee: str) -> str:
        return self._change_access('authorize', file_hash, grantee)

    def revoke(self, file_hash: str, grantee: str) -> str:
        return self._change_access('revoke', file_hash, grantee)

    def _change_access(self, action: str, file_hash: str, grantee: str) -> str:
        try:
            response = self._authed('POST', f'/files/{file_hash}/{action}', json={'grantee': grantee})
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        authorized = ', '.join(response.json()['authorized'])
        return f"{action.capitalize()}d {grantee} on {short_hash(file_hash)}\nAuthorized: {authorized}"

    def prove(self, path: str, chunk_index: int = 0) -> str:
        """
        Build and submit the inclusion proof for one chunk of a local file.
        """
        try:
            digest = digest_file(path, self.config.get_chunk_size())
        except OSError as e:
            return f"Error reading {path}: {e}"

        try:
            steps = compute_merkle_proof(list(digest.leaf_hashes), chunk_index)
        except IndexError:
            return f"Error: chunk index {chunk_index} out of range ({len(digest.leaf_hashes)} chunks)"

        try:
            response = self._authed(
                'POST',
                f'/files/{digest.file_hash}/proofs',
                json={
                    'claimed_root': digest.merkle_root,
                    'leaf_hash': digest.leaf_hashes[chunk_index],
                    'proof_path': [step.sibling for step in steps],
                    'directions': [step.direction.value for step in steps],
                }
            )
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Proof failed: {self._format_error(response)}"

        data = response.json()
        status_line = f"{GREEN}VERIFIED{RESET}" if data['verified'] else "not yet verified"
        suffix = " (newly verified)" if data['newly_verified'] else ""
        return (
            f"Proof accepted for {digest.filename}: "
            f"{data['verified_proof_count']}/{data['threshold']} proofs, {status_line}{suffix}"
        )

    def file_info(self, file_hash: str) -> str:
        try:
            response = self._authed('GET', f'/files/{file_hash}')
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        return self._format_file(response.json())

    def profile(self, identity: Optional[str] = None) -> str:
        endpoint = f'/users/{identity}' if identity else '/users/me'
        try:
            response = self._authed('GET', endpoint)
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        return self._format_profile(response.json())

    def list_files(self, identity: Optional[str] = None) -> str:
        identity = identity or self.config.get_identity()
        if not identity:
            return "Error: No identity given and none stored. Please run: login <identity> <password>"

        try:
            response = self._authed('GET', f'/users/{identity}/files')
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        files = response.json()['files']
        if not files:
            return f"No files owned by {identity}."

        lines = [f"Files owned by {identity} ({len(files)}):"]
        for f in files:
            mark = "verified" if f['verified'] else f"{f['verified_proof_count']} proofs"
            lines.append(
                f"  {short_hash(f['file_hash'])}  {f['filename']:<30} "
                f"{format_file_size(f['size']):>10}  {mark}"
            )
        return "\n".join(lines)

    def stats(self) -> str:
        try:
            response = self._authed('GET', '/system/stats')
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        return "\n".join(f"  {key}: {value}" for key, value in response.json().items())

    def settings(self) -> str:
        try:
            response = self._authed('GET', '/system/settings')
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        data = response.json()
        return (
            f"  paused: {data['paused']}\n"
            f"  storage_fee: {data['storage_fee']}\n"
            f"  verification_threshold: {data['verification_threshold']}\n"
            f"  default_quota: {format_file_size(data['default_quota'])}\n"
            f"  max_quota: {format_file_size(data['max_quota'])}\n"
            f"  fees_collected: {data['fees_collected']}"
        )

    def admin(self, action: str, identity: Optional[str] = None, value: Optional[int] = None) -> str:
        """
        Run an administrator action.

        Args:
            action: One of the keys of _ADMIN_ENDPOINTS
            identity: Target identity for per-user actions
            value: Integer payload for setting actions
        """
        if action not in _ADMIN_ENDPOINTS:
            return f"Error: Unknown admin action: {action}"

        method, endpoint = _ADMIN_ENDPOINTS[action]
        kwargs = {}
        if value is not None:
            kwargs['json'] = {'value': value}

        try:
            response = self._authed(method, endpoint.format(identity=identity), **kwargs)
        except (ValueError, ConnectionError) as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        logger.info(f"Admin action {action} succeeded")
        return f"OK: {action}" + (f" {identity}" if identity else "") + (f" = {value}" if value is not None else "")

    def _format_profile(self, data: dict) -> str:
        state = "suspended" if data['suspended'] else "active"
        return (
            f"  {data['name']} [{data['identity']}] ({state})\n"
            f"  Storage: {format_file_size(data['storage_used'])} / {format_file_size(data['storage_quota'])}\n"
            f"  Registered: {data['registered_at']}  Last activity: {data['last_activity_at']}"
        )

    def _format_file(self, data: dict) -> str:
        return (
            f"  {data['filename']} ({format_file_size(data['size'])})\n"
            f"  Hash:        {data['file_hash']}\n"
            f"  Merkle root: {data['merkle_root']}\n"
            f"  Owner:       {data['owner']}\n"
            f"  Authorized:  {', '.join(data['authorized'])}\n"
            f"  Downloads:   {data['download_count']}\n"
            f"  Proofs:      {data['verified_proof_count']} ({'verified' if data['verified'] else 'unverified'})"
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
