import pytest
from sqlalchemy.exc import OperationalError

from ecohub.core import config
from ecohub.database import get_db
from ecohub.main import app


class _BrokenSession:
    def query(self, *_args, **_kwargs):
        raise OperationalError('SELECT * FROM products', {}, Exception('database is locked'))

    def get(self, *_args, **_kwargs):
        raise OperationalError('SELECT * FROM products', {}, Exception('database is locked'))


def test_root_reports_running(client) -> None:
    assert client.get('/').json() == {'status': 'Eco Hub API Running'}


def test_not_found_errors_use_message_shape(client) -> None:
    response = client.get('/challenges/404')

    assert response.status_code == 404
    assert response.json() == {'message': 'Challenge not found'}


def test_malformed_body_is_a_400_with_details(client) -> None:
    response = client.post('/auth/register', json={'birthMonth': 'March'})

    assert response.status_code == 400
    assert response.json()['message'] == 'Invalid request'
    assert response.json()['error'][0]['loc'] == ['body', 'birthMonth']


def test_unknown_route_uses_message_shape(client) -> None:
    response = client.get('/does-not-exist')

    assert response.status_code == 404
    assert response.json() == {'message': 'Not Found'}


def test_database_failure_is_surfaced_as_server_error(client) -> None:
    def broken_db():
        yield _BrokenSession()

    app.dependency_overrides[get_db] = broken_db

    response = client.get('/products')

    assert response.status_code == 500
    assert response.json()['message'] == 'Server error'
    assert 'database is locked' in response.json()['error']


def test_validate_runtime_config_refuses_default_secret_in_production(monkeypatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', 'change-me')

    with pytest.raises(RuntimeError, match='JWT_SECRET_KEY'):
        config.validate_runtime_config()
