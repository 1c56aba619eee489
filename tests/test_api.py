#!/usr/bin/env python3
"""
Flask route tests for the catalog API, plus the OpenAPI document.

Run with:
    python -m pytest tests/test_api.py
"""
import json
import os
import shutil
import sys
import tempfile
import unittest
import uuid
from unittest.mock import MagicMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import catalog_api
import database
from catalog.repositories import (
    GameRepository, InMemoryGameRepository, SqlGameRepository, StorageError,
)
from catalog.services import GameService
from openapi_spec import build_spec


ELDEN_RING = {'title': 'Elden Ring', 'platform': 'PC', 'status': 'Playing'}


class ApiTestBase(unittest.TestCase):
    """Runs every route against a fresh in-memory repository."""

    def make_repo(self) -> GameRepository:
        return InMemoryGameRepository()

    def setUp(self):
        catalog_api.app.config['TESTING'] = True
        self.client = catalog_api.app.test_client()
        self.repo = self.make_repo()
        patcher = patch.object(catalog_api, 'game_service', GameService(self.repo))
        patcher.start()
        self.addCleanup(patcher.stop)

    def _post(self, payload):
        return self.client.post('/api/games', json=payload)

    def _create(self, payload=None) -> dict:
        resp = self._post(payload or ELDEN_RING)
        self.assertEqual(resp.status_code, 201)
        return json.loads(resp.data)


class TestGamesRoutes(ApiTestBase):

    def test_list_empty(self):
        resp = self.client.get('/api/games')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(json.loads(resp.data), [])

    def test_create_returns_201_with_location(self):
        resp = self._post(ELDEN_RING)
        self.assertEqual(resp.status_code, 201)
        body = json.loads(resp.data)
        self.assertTrue(resp.headers['Location'].endswith(f"/api/games/{body['id']}"))
        self.assertEqual(body['title'], 'Elden Ring')
        self.assertEqual(body['platform'], 'PC')
        self.assertEqual(body['status'], 'Playing')
        self.assertIsNotNone(body['created_at'])

    def test_create_then_get_via_location(self):
        resp = self._post(ELDEN_RING)
        created = json.loads(resp.data)
        get_resp = self.client.get(resp.headers['Location'])
        self.assertEqual(get_resp.status_code, 200)
        self.assertEqual(json.loads(get_resp.data), created)

    def test_create_title_too_long_is_400_and_store_unchanged(self):
        resp = self._post({**ELDEN_RING, 'title': 'x' * 101})
        self.assertEqual(resp.status_code, 400)
        body = json.loads(resp.data)
        self.assertEqual(body['error'], 'Validation failed')
        self.assertIn('title', body['errors'])
        self.assertEqual(self.repo.count(), 0)

    def test_create_padded_title_over_limit_is_400(self):
        resp = self._post({**ELDEN_RING, 'title': 'x' * 100 + ' '})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('title', json.loads(resp.data)['errors'])
        self.assertEqual(self.repo.count(), 0)

    def test_padded_title_round_trips_unchanged(self):
        resp = self._post({**ELDEN_RING, 'title': ' Elden Ring '})
        self.assertEqual(resp.status_code, 201)
        fetched = json.loads(self.client.get(resp.headers['Location']).data)
        self.assertEqual(fetched['title'], ' Elden Ring ')

    def test_update_padded_title_over_limit_is_400(self):
        created = self._create()
        resp = self.client.put(f"/api/games/{created['id']}",
                               json={**ELDEN_RING, 'title': ' ' + 'x' * 100})
        self.assertEqual(resp.status_code, 400)
        fetched = json.loads(self.client.get(f"/api/games/{created['id']}").data)
        self.assertEqual(fetched['title'], 'Elden Ring')

    def test_create_with_non_json_body_is_400(self):
        resp = self.client.post('/api/games', data='not json',
                                content_type='text/plain')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('body', json.loads(resp.data)['errors'])

    def test_create_ignores_client_id(self):
        body = self._create({**ELDEN_RING, 'id': 'client-chosen'})
        self.assertNotEqual(body['id'], 'client-chosen')

    def test_get_missing_is_404(self):
        resp = self.client.get(f'/api/games/{uuid.uuid4()}')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(json.loads(resp.data), {'error': 'Game not found'})

    def test_list_after_creates(self):
        self._create()
        self._create({'title': 'Hades', 'platform': 'Switch', 'status': 'Completed'})
        resp = self.client.get('/api/games')
        titles = {g['title'] for g in json.loads(resp.data)}
        self.assertEqual(titles, {'Elden Ring', 'Hades'})

    def test_update_returns_200_with_updated_game(self):
        created = self._create()
        resp = self.client.put(f"/api/games/{created['id']}",
                               json={'title': 'Elden Ring', 'platform': 'PS5',
                                     'status': 'Completed'})
        self.assertEqual(resp.status_code, 200)
        body = json.loads(resp.data)
        self.assertEqual(body['id'], created['id'])
        self.assertEqual(body['platform'], 'PS5')
        self.assertEqual(body['created_at'], created['created_at'])

        fetched = json.loads(self.client.get(f"/api/games/{created['id']}").data)
        self.assertEqual(fetched['status'], 'Completed')

    def test_update_missing_is_404(self):
        self._create()
        resp = self.client.put(f'/api/games/{uuid.uuid4()}', json=ELDEN_RING)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.repo.count(), 1)

    def test_update_id_mismatch_is_400(self):
        created = self._create()
        resp = self.client.put(f"/api/games/{created['id']}",
                               json={**ELDEN_RING, 'id': str(uuid.uuid4())})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('mismatch', json.loads(resp.data)['error'])

    def test_update_invalid_payload_is_400(self):
        created = self._create()
        resp = self.client.put(f"/api/games/{created['id']}",
                               json={'title': '', 'platform': 'PC', 'status': 'Playing'})
        self.assertEqual(resp.status_code, 400)

    def test_delete_returns_204_then_404(self):
        created = self._create()
        resp = self.client.delete(f"/api/games/{created['id']}")
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(resp.data, b'')
        self.assertEqual(self.client.get(f"/api/games/{created['id']}").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/games/{created['id']}").status_code, 404)

    def test_status_reports_count(self):
        self._create()
        resp = self.client.get('/api/status')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(json.loads(resp.data)['total_games'], 1)


class TestGamesRoutesSqlBackend(TestGamesRoutes):
    """Same routes, same expectations, SQL storage."""

    def make_repo(self):
        return SqlGameRepository(database.make_session_factory('sqlite:///:memory:'))


class TestStorageFailure(unittest.TestCase):

    def setUp(self):
        catalog_api.app.config['TESTING'] = True
        self.client = catalog_api.app.test_client()

    def test_storage_error_is_503(self):
        repo = MagicMock(spec=GameRepository)
        repo.list_all.side_effect = StorageError('list_all failed: db down')
        with patch.object(catalog_api, 'game_service', GameService(repo)):
            resp = self.client.get('/api/games')
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(json.loads(resp.data), {'error': 'Storage unavailable'})

    def test_storage_error_on_create_is_503(self):
        repo = MagicMock(spec=GameRepository)
        repo.create.side_effect = StorageError('create failed')
        with patch.object(catalog_api, 'game_service', GameService(repo)):
            resp = self.client.post('/api/games', json=ELDEN_RING)
        self.assertEqual(resp.status_code, 503)


class TestBuildRepository(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_memory_backend(self):
        repo = catalog_api.build_repository({'backend': 'memory'})
        self.assertIsInstance(repo, InMemoryGameRepository)
        self.assertEqual(repo.count(), 0)

    def test_memory_backend_with_demo_seed(self):
        repo = catalog_api.build_repository({'backend': 'memory', 'seed_demo': True})
        self.assertEqual(repo.count(), len(catalog_api.DEMO_GAMES))

    def test_sql_backend_seeds_only_empty_table(self):
        url = 'sqlite:///' + os.path.join(self.tmp, 'catalog.db')
        config = {'backend': 'sql', 'database_url': url, 'seed_demo': True}
        repo = catalog_api.build_repository(config)
        self.assertIsInstance(repo, SqlGameRepository)
        self.assertEqual(repo.count(), 3)
        again = catalog_api.build_repository(config)
        self.assertEqual(again.count(), 3)

    def test_unknown_backend_raises(self):
        with self.assertRaises(ValueError):
            catalog_api.build_repository({'backend': 'redis'})

    def test_init_service_replaces_global(self):
        with patch.object(catalog_api, 'game_service', None), \
                patch.object(catalog_api, 'app_config', {}):
            svc = catalog_api.init_service({'backend': 'memory', 'seed_demo': False})
            self.assertIs(catalog_api.get_service(), svc)
            self.assertEqual(catalog_api.app_config['backend'], 'memory')


class TestOpenApi(unittest.TestCase):

    def test_spec_lists_game_routes(self):
        spec = build_spec()
        self.assertEqual(spec['openapi'], '3.0.3')
        self.assertIn('/api/games', spec['paths'])
        item = spec['paths']['/api/games/{game_id}']
        for verb in ('get', 'put', 'delete'):
            self.assertIn(verb, item)
        self.assertIn('201', spec['paths']['/api/games']['post']['responses'])

    def test_spec_is_json_serialisable(self):
        json.dumps(build_spec(server_url='http://localhost:5000'))

    def test_openapi_route(self):
        client = catalog_api.app.test_client()
        resp = client.get('/api/openapi.json')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('/api/games', json.loads(resp.data)['paths'])

    def test_docs_route_serves_html(self):
        client = catalog_api.app.test_client()
        resp = client.get('/api/docs')
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'swagger-ui', resp.data)


if __name__ == '__main__':
    unittest.main()
