"""Blocked dates API tests."""

from datetime import date

from app.models import BlockedDate
from extensions import db


def test_requires_token(client):
    response = client.get('/api/blocked-dates/')
    assert response.status_code == 401


def test_block_and_list(client, auth_headers, pusher):
    response = client.post(
        '/api/blocked-dates/',
        json={'start_date': '2024-06-10', 'end_date': '2024-06-15', 'reason': 'Maintenance'},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['days'] == 6
    assert data['created_by'] == 'staff@coconutroads.test'

    client.post(
        '/api/blocked-dates/',
        json={'start_date': '2024-05-01', 'end_date': '2024-05-01'},
        headers=auth_headers,
    )

    listing = client.get('/api/blocked-dates/', headers=auth_headers).get_json()
    assert listing['total'] == 2
    assert [b['start_date'] for b in listing['blocked_dates']] == ['2024-05-01', '2024-06-10']
    assert listing['blocked_dates'][0]['reason'] is None

    assert [event for _, event, _ in pusher.triggered] == ['blocked_dates.insert', 'blocked_dates.insert']


def test_overlapping_ranges_are_allowed(client, auth_headers, make_blocked):
    make_blocked(date(2024, 6, 10), date(2024, 6, 15), 'Maintenance')

    response = client.post(
        '/api/blocked-dates/',
        json={'start_date': '2024-06-12', 'end_date': '2024-06-20', 'reason': 'Holiday'},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert BlockedDate.query.count() == 2


def test_rejects_missing_dates(client, auth_headers):
    response = client.post('/api/blocked-dates/', json={'start_date': '2024-06-10'}, headers=auth_headers)
    assert response.status_code == 400


def test_rejects_malformed_date(client, auth_headers):
    response = client.post(
        '/api/blocked-dates/',
        json={'start_date': '2024-02-30', 'end_date': '2024-03-02'},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert 'start_date' in response.get_json()['error']
    assert BlockedDate.query.count() == 0


def test_rejects_inverted_range(client, auth_headers):
    response = client.post(
        '/api/blocked-dates/',
        json={'start_date': '2024-06-15', 'end_date': '2024-06-10'},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_update_blocked_range(client, auth_headers, make_blocked, pusher):
    blocked = make_blocked(date(2024, 6, 10), date(2024, 6, 15), 'Maintenance')

    response = client.put(
        f'/api/blocked-dates/{blocked.id}',
        json={'start_date': '2024-06-11', 'end_date': '2024-06-18', 'reason': ''},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['start_date'] == '2024-06-11'
    assert data['end_date'] == '2024-06-18'
    assert data['reason'] is None
    assert pusher.triggered[-1][1] == 'blocked_dates.update'


def test_update_missing_range(client, auth_headers):
    response = client.put(
        '/api/blocked-dates/404',
        json={'start_date': '2024-06-11', 'end_date': '2024-06-18'},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_delete_blocked_range(client, auth_headers, make_blocked, pusher):
    blocked = make_blocked(date(2024, 6, 10), date(2024, 6, 15))
    blocked_id = blocked.id

    response = client.delete(f'/api/blocked-dates/{blocked_id}', headers=auth_headers)

    assert response.status_code == 200
    db.session.expire_all()
    assert db.session.get(BlockedDate, blocked_id) is None
    _, event, payload = pusher.triggered[-1]
    assert event == 'blocked_dates.delete'
    assert payload['record_id'] == blocked_id

    assert client.delete(f'/api/blocked-dates/{blocked_id}', headers=auth_headers).status_code == 404
