"""Unit tests for WriteAPIClient and the copy/folder operations."""

import json

import httpx
import pytest

from common.exceptions import TransportError, ValidationError
from common.types import ThumbnailRecord
from transfer.file_operations import copy_paste, create_folder
from transfer.write_api_client import WriteAPIClient


def make_client(temp_config, handler, requests=None):
    """WriteAPIClient backed by httpx.MockTransport, recording requests if a list is given."""
    def recording_handler(request):
        if requests is not None:
            requests.append(request)
        return handler(request)

    return WriteAPIClient(temp_config, transport=httpx.MockTransport(recording_handler))


def ok_handler(request):
    return httpx.Response(200)


def test_item_path_percent_encodes_key():
    assert WriteAPIClient.item_path('a/b c.txt') == '/api/write/items/a/b%20c.txt'
    assert WriteAPIClient.item_path('q?.txt') == '/api/write/items/q%3F.txt'
    assert WriteAPIClient.item_path('_$flaredrive$/thumbnails/x.png') == '/api/write/items/_$flaredrive$/thumbnails/x.png'


def test_thumbnail_key_is_digest_named_png():
    assert WriteAPIClient.thumbnail_key('ab' * 20) == f"_$flaredrive$/thumbnails/{'ab' * 20}.png"


def test_client_has_no_network_timeout_by_default(temp_config):
    client = WriteAPIClient(temp_config)

    assert client.session.timeout.connect is None
    assert client.session.timeout.read is None
    assert client.session.base_url.host == 'localhost'
    assert client.session.base_url.port == 8787


@pytest.mark.asyncio
async def test_copy_sends_one_put_with_encoded_source(temp_config):
    """Scenario: copy a/x.txt to b/x.txt without downloading the source."""
    requests = []
    client = make_client(temp_config, ok_handler, requests)

    assert await copy_paste(client, 'a/x.txt', 'b/x.txt') is True

    assert len(requests) == 1
    request = requests[0]
    assert request.method == 'PUT'
    assert request.url.path == '/api/write/items/b/x.txt'
    assert request.headers['x-amz-copy-source'] == 'a%2Fx.txt'
    assert request.content == b''


@pytest.mark.asyncio
async def test_copy_source_encoding_matches_uri_component_rules(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)

    await client.copy_object("dir/it's (1) [v2].txt", 'copy.txt')

    assert requests[0].headers['x-amz-copy-source'] == "dir%2Fit's%20(1)%20%5Bv2%5D.txt"


@pytest.mark.asyncio
async def test_create_folder_with_slash_sends_nothing(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)

    with pytest.raises(ValidationError):
        await create_folder(client, 'docs/', 'a/b')

    assert requests == []


@pytest.mark.asyncio
async def test_create_folder_with_empty_name_sends_nothing(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)

    with pytest.raises(ValidationError):
        await client.create_folder('', '')

    assert requests == []


@pytest.mark.asyncio
async def test_create_folder_puts_directory_marker(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)

    assert await create_folder(client, 'docs/', 'reports') is True

    assert len(requests) == 1
    assert requests[0].method == 'PUT'
    assert requests[0].url.path == '/api/write/items/docs/reports'
    assert requests[0].headers['content-type'] == 'application/x-directory'


@pytest.mark.asyncio
async def test_failed_copy_is_absorbed_after_probe(temp_config):
    requests = []

    def handler(request):
        if request.method == 'PUT':
            return httpx.Response(403)
        return httpx.Response(200)

    client = make_client(temp_config, handler, requests)

    assert await copy_paste(client, 'a.txt', 'b.txt') is False
    assert [(r.method, r.url.path) for r in requests] == [
        ('PUT', '/api/write/items/b.txt'),
        ('GET', '/api/write/'),
    ]


@pytest.mark.asyncio
async def test_failed_create_folder_is_absorbed(temp_config):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(temp_config, handler)

    assert await create_folder(client, '', 'new') is False


@pytest.mark.asyncio
async def test_non_2xx_status_raises_transport_error(temp_config):
    client = make_client(temp_config, lambda request: httpx.Response(502, text='bad gateway'))

    with pytest.raises(TransportError) as exc_info:
        await client.put_object('x.txt', b'data')

    assert exc_info.value.status_code == 502
    assert exc_info.value.method == 'PUT'


@pytest.mark.asyncio
async def test_connection_error_raises_transport_error(temp_config):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(temp_config, handler)

    with pytest.raises(TransportError) as exc_info:
        await client.put_object('x.txt', b'data')

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_every_request_carries_a_request_id(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)

    await client.put_object('one.txt', b'1')
    await client.put_object('two.txt', b'2')

    ids = [r.headers['x-request-id'] for r in requests]
    assert len(set(ids)) == 2


@pytest.mark.asyncio
async def test_initiate_multipart_returns_upload_id(temp_config):
    requests = []
    client = make_client(temp_config, lambda request: httpx.Response(200, json={'uploadId': 'u-42'}), requests)

    upload_id = await client.initiate_multipart('big.bin', headers={'content-type': 'video/mp4'})

    assert upload_id == 'u-42'
    assert requests[0].method == 'POST'
    assert requests[0].url.path == '/api/write/items/big.bin'
    assert requests[0].url.query == b'uploads'


@pytest.mark.asyncio
async def test_initiate_multipart_without_upload_id_fails(temp_config):
    client = make_client(temp_config, lambda request: httpx.Response(200, json={}))

    with pytest.raises(TransportError):
        await client.initiate_multipart('big.bin')


@pytest.mark.asyncio
async def test_upload_part_without_etag_fails(temp_config):
    client = make_client(temp_config, ok_handler)

    with pytest.raises(TransportError, match='no etag'):
        await client.upload_part('big.bin', 'u-1', 1, b'abc', content_length=3)


@pytest.mark.asyncio
async def test_complete_multipart_posts_part_list(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)
    payload = {'parts': [{'partNumber': 1, 'etag': 'e1'}]}

    await client.complete_multipart('big.bin', 'u-1', payload)

    request = requests[0]
    assert request.method == 'POST'
    assert dict(request.url.params) == {'uploadId': 'u-1'}
    assert json.loads(request.content) == payload


@pytest.mark.asyncio
async def test_put_thumbnail_uses_digest_path(temp_config):
    requests = []
    client = make_client(temp_config, ok_handler, requests)
    record = ThumbnailRecord(digest='0f' * 20, data=b'png-bytes')

    key = await client.put_thumbnail(record)

    assert key == f"_$flaredrive$/thumbnails/{'0f' * 20}.png"
    assert requests[0].url.raw_path == f"/api/write/items/_$flaredrive$/thumbnails/{'0f' * 20}.png".encode()
    assert requests[0].content == b'png-bytes'
    assert requests[0].headers['content-type'] == 'image/png'


class TestRecoverSession:
    """Recovery probe after a failed request."""

    @pytest.mark.asyncio
    async def test_redirect_is_handed_to_host(self, temp_config):
        def handler(request):
            if request.url.path == '/api/write/':
                return httpx.Response(302, headers={'location': 'http://test/cdn-cgi/access/login'})
            return httpx.Response(200, text='login page')

        targets = []
        client = make_client(temp_config, handler)
        client.on_redirect = targets.append

        result = await client.recover_session()

        assert result == 'http://test/cdn-cgi/access/login'
        assert targets == [result]

    @pytest.mark.asyncio
    async def test_no_redirect_does_nothing(self, temp_config):
        targets = []
        client = make_client(temp_config, ok_handler)
        client.on_redirect = targets.append

        assert await client.recover_session() is None
        assert targets == []

    @pytest.mark.asyncio
    async def test_probe_failure_is_swallowed(self, temp_config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(temp_config, handler)

        assert await client.recover_session() is None
