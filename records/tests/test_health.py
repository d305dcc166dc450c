import pytest


@pytest.mark.django_db
def test_healthz_reports_database(client):
    r = client.get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'success': True, 'data': {'db': True}}


@pytest.mark.django_db
def test_metrics_endpoint_is_exposed(client):
    r = client.get('/metrics')
    assert r.status_code == 200
    assert b'django_http_requests' in r.content


def test_unknown_route_is_404(client):
    assert client.get('/api/nothing-here').status_code == 404
