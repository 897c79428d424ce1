"""Vale API client: request shapes, envelopes and error mapping."""

import json

import httpx
import pytest

from modules.vale_sync.exceptions import DecodingError, ServerError, TransportError, Unauthorized
from modules.vale_sync.kinds import EntityKind
from modules.vale_sync.models import Lead, LeadStatus, Property


def _ok(data):
    return httpx.Response(200, json={'success': True, 'data': data})


def test_fetch_all_keeps_server_order_and_sends_bearer(make_client):
    seen = {}

    def handler(request):
        seen['auth'] = request.headers.get('Authorization')
        seen['path'] = request.url.path
        return _ok([{'id': 'b'}, {'id': 'a'}, {'id': 'c'}])

    leads = make_client(handler).fetch_all(EntityKind.LEAD)

    assert [lead.id for lead in leads] == ['b', 'a', 'c']
    assert seen['auth'] == 'Bearer test-token'
    assert seen['path'] == '/api/crm/leads'


def test_no_authorization_header_without_token(make_client):
    seen = {}

    def handler(request):
        seen['auth'] = request.headers.get('Authorization')
        return _ok([])

    make_client(handler, token=None).fetch_all(EntityKind.CLIENT)
    assert seen['auth'] is None


def test_401_raises_unauthorized(make_client):
    client = make_client(lambda request: httpx.Response(401))
    with pytest.raises(Unauthorized) as exc:
        client.fetch_all(EntityKind.LEAD)
    assert str(exc.value) == "Authentication failed or token expired."


def test_401_is_not_retried(make_client):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401)

    with pytest.raises(Unauthorized):
        make_client(handler).fetch_all(EntityKind.LEAD)
    assert len(calls) == 1


def test_500_raises_server_error_with_code(make_client):
    client = make_client(lambda request: httpx.Response(500))
    with pytest.raises(ServerError) as exc:
        client.fetch_all(EntityKind.TASK)
    assert exc.value.status_code == 500
    assert str(exc.value) == "Server error (500): Internal Server Error"


@pytest.mark.parametrize('reason, message', [
    ('', "Server error (599)"),
    ("I'm a teapot:", "Server error (599): I'm a teapot:"),
    ('Bad Gateway ', "Server error (599): Bad Gateway "),
])
def test_server_error_message_keeps_reason_verbatim(reason, message):
    assert str(ServerError(599, reason)) == message


def test_invalid_json_raises_decoding_error(make_client):
    client = make_client(lambda request: httpx.Response(200, content=b'not json'))
    with pytest.raises(DecodingError) as exc:
        client.fetch_all(EntityKind.LEAD)
    assert str(exc.value) == "Failed to decode server response."


def test_empty_body_raises_decoding_error(make_client):
    client = make_client(lambda request: httpx.Response(200, content=b''))
    with pytest.raises(DecodingError) as exc:
        client.fetch_all(EntityKind.LEAD)
    assert str(exc.value) == "No data returned from server."


def test_missing_id_raises_decoding_error(make_client):
    client = make_client(lambda request: _ok([{'first_name': 'no id'}]))
    with pytest.raises(DecodingError):
        client.fetch_all(EntityKind.LEAD)


def test_connection_failure_raises_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        make_client(handler).fetch_all(EntityKind.LEAD)


def test_fetch_by_id_uses_query_parameter(make_client):
    seen = {}

    def handler(request):
        seen['params'] = dict(request.url.params)
        return _ok({'id': 'lead-9', 'first_name': 'Ann'})

    lead = make_client(handler).fetch_by_id(EntityKind.LEAD, 'lead-9')
    assert seen['params'] == {'id': 'lead-9'}
    assert lead.first_name == 'Ann'


def test_create_lead_posts_full_object_and_unwraps(make_client):
    seen = {}

    def handler(request):
        seen['method'] = request.method
        seen['body'] = json.loads(request.content)
        return _ok({'id': 'server-1', 'first_name': 'Ann'})

    created = make_client(handler).create(EntityKind.LEAD, Lead(id='draft', first_name='Ann'))

    assert seen['method'] == 'POST'
    assert seen['body'] == {'id': 'draft', 'first_name': 'Ann'}
    assert created.id == 'server-1'


def test_update_lead_sends_partial_camel_case_payload(make_client):
    seen = {}

    def handler(request):
        seen['method'] = request.method
        seen['body'] = json.loads(request.content)
        return _ok({'id': '1', 'first_name': 'Ann', 'status': 'contacted'})

    lead = Lead(id='1', first_name='Ann', status=LeadStatus.CONTACTED)
    make_client(handler).update(EntityKind.LEAD, lead)

    assert seen['method'] == 'PUT'
    assert seen['body'] == {'id': '1', 'firstName': 'Ann', 'status': 'contacted'}


def test_property_writes_use_full_object_and_bare_response(make_client, sample_property):
    seen = {}

    def handler(request):
        seen['body'] = json.loads(request.content)
        return httpx.Response(200, json=dict(sample_property, market_value=360000))

    prop = Property.from_api(sample_property)
    updated = make_client(handler).update(EntityKind.PROPERTY, prop)

    assert seen['body']['purchase_price'] == 300000
    assert 'purchasePrice' not in seen['body']
    assert updated.market_value == 360000


def test_delete_uses_query_parameter_and_ignores_body(make_client):
    seen = {}

    def handler(request):
        seen['method'] = request.method
        seen['params'] = dict(request.url.params)
        return httpx.Response(204)

    assert make_client(handler).delete(EntityKind.TASK, 't-1') is None
    assert seen == {'method': 'DELETE', 'params': {'id': 't-1'}}


def test_fetch_portfolio(make_client):
    def handler(request):
        assert request.url.path == '/api/portfolio'
        return _ok({
            'dashboard': {'occupancy_rate': 80},
            'properties': [{'id': 'p1'}],
            'payments': [{'id': 'pay1', 'status': 'paid'}],
        })

    snapshot = make_client(handler).fetch_portfolio()
    assert snapshot.aggregate.occupancy_rate == 80
    assert len(snapshot.properties) == 1
    assert snapshot.payments[0].is_paid


def test_fetch_portfolio_without_envelope_is_decoding_error(make_client):
    client = make_client(lambda request: httpx.Response(200, json={'properties': []}))
    with pytest.raises(DecodingError):
        client.fetch_portfolio()


@pytest.mark.parametrize('payload', [
    {'properties': [{'id': 'p1', 'market_value': '350000.00'}]},
    {'expenses': [{'id': 'e1', 'amount': '12.5'}]},
    {'dashboard': {'occupancy_rate': '80%'}},
])
def test_fetch_portfolio_string_amount_is_decoding_error(make_client, payload):
    client = make_client(lambda request: _ok(payload))
    with pytest.raises(DecodingError):
        client.fetch_portfolio()


def test_fetch_all_string_price_is_decoding_error(make_client):
    client = make_client(lambda request: _ok([{'id': '1', 'asking_price': '250000'}]))
    with pytest.raises(DecodingError):
        client.fetch_all(EntityKind.LEAD)
