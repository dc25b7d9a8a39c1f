"""Tests for the FastAPI storage dependencies."""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from flysystem.Dependencies import (
    DefaultStorage,
    FileMetadata,
    StorageDisk,
    file_metadata,
    get_manager,
    stream_file,
)
from flysystem.FilesystemManager import FilesystemManager


def create_test_app() -> FastAPI:
    app = FastAPI()
    
    @app.get('/files/{path:path}')
    def download(path: str, disk: StorageDisk):  # type: ignore[no-untyped-def]
        return stream_file(disk, path)
    
    @app.get('/metadata/{path:path}', response_model=FileMetadata)
    def metadata(path: str, disk: StorageDisk) -> FileMetadata:
        return file_metadata(disk, path)
    
    @app.get('/default')
    def default_disk(disk: DefaultStorage) -> dict:
        return {'files': [entry.path for entry in disk.list_contents('', True)]}
    
    return app


app = create_test_app()


class TestStorageDependencies:
    """Test suite for the storage dependencies."""
    
    @pytest.fixture
    def manager(self) -> FilesystemManager:
        """Create a manager with two memory disks."""
        manager = FilesystemManager({
            'default': 'local',
            'disks': {
                'local': {'driver': 'memory'},
                'archive': {'driver': 'memory', 'visibility': 'private'},
            },
        })
        manager.write('docs/readme.txt', 'hello world')
        manager.disk('archive').write('old.txt', b'archived')
        return manager
    
    @pytest.fixture
    def client(self, manager: FilesystemManager) -> Iterator[TestClient]:
        """Create test client using the test manager."""
        app.dependency_overrides[get_manager] = lambda: manager
        yield TestClient(app)
        app.dependency_overrides.clear()
    
    def test_streaming_a_file(self, client: TestClient) -> None:
        """Test that stored files are streamed with a content type."""
        response = client.get('/files/docs/readme.txt')
        
        assert response.status_code == 200
        assert response.content == b'hello world'
        assert response.headers['content-type'].startswith('text/plain')
        assert 'readme.txt' in response.headers['content-disposition']
    
    def test_streaming_from_another_disk(self, client: TestClient) -> None:
        """Test selecting a disk with the query string."""
        response = client.get('/files/old.txt', params={'disk': 'archive'})
        
        assert response.status_code == 200
        assert response.content == b'archived'
    
    def test_missing_file(self, client: TestClient) -> None:
        """Test that missing files answer 404."""
        response = client.get('/files/missing.txt')
        
        assert response.status_code == 404
    
    def test_unknown_disk(self, client: TestClient) -> None:
        """Test that unknown disks answer 400."""
        response = client.get('/files/docs/readme.txt', params={'disk': 'nope'})
        
        assert response.status_code == 400
    
    def test_metadata(self, client: TestClient) -> None:
        """Test the metadata helper."""
        response = client.get('/metadata/old.txt', params={'disk': 'archive'})
        
        assert response.status_code == 200
        body = response.json()
        assert body['path'] == 'old.txt'
        assert body['file_size'] == 8
        assert body['visibility'] == 'private'
        
        assert client.get('/metadata/missing.txt').status_code == 404
    
    def test_default_storage(self, client: TestClient) -> None:
        """Test the default disk dependency."""
        response = client.get('/default')
        
        assert response.json() == {'files': ['docs', 'docs/readme.txt']}
