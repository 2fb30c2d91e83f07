"""测试配置：临时 SQLite 数据库 + 会话级 TestClient"""
import os
import shutil
import tempfile
import uuid

# 必须在导入 weblauncher 之前设置
_TEST_DIR = tempfile.mkdtemp(prefix="weblauncher_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["LOG_FILE"] = os.path.join(_TEST_DIR, "test.log")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from weblauncher.main import app


class ApiUser:
    """已登录用户的请求封装"""

    def __init__(self, client: TestClient, email: str, password: str, tokens: dict):
        self.client = client
        self.email = email
        self.password = password
        self.tokens = tokens
        self.headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    def get(self, path, **kwargs):
        return self.client.get(path, headers=self.headers, **kwargs)

    def post(self, path, **kwargs):
        return self.client.post(path, headers=self.headers, **kwargs)

    def put(self, path, **kwargs):
        return self.client.put(path, headers=self.headers, **kwargs)

    def patch(self, path, **kwargs):
        return self.client.patch(path, headers=self.headers, **kwargs)

    def delete(self, path, **kwargs):
        return self.client.delete(path, headers=self.headers, **kwargs)

    def create_category(self, name: str) -> dict:
        response = self.post("/api/categories", json={"name": name})
        assert response.status_code == 201, response.text
        return response.json()

    def create_bookmark(self, description: str, url: str, categories=(), pinned: bool = False) -> dict:
        response = self.post(
            "/api/bookmarks",
            json={"description": description, "url": url, "categories": list(categories)},
        )
        assert response.status_code == 201, response.text
        bookmark = response.json()
        if pinned:
            response = self.put(f"/api/bookmarks/{bookmark['id']}/pin")
            assert response.status_code == 200, response.text
            bookmark = response.json()
        return bookmark


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client
    shutil.rmtree(_TEST_DIR, ignore_errors=True)


@pytest.fixture
def make_user(client):
    """注册并登录一个新用户"""
    def _make_user(name: str = "Test User", password: str = "secret123") -> ApiUser:
        email = f"user-{uuid.uuid4().hex[:12]}@example.com"
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text

        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return ApiUser(client, email, password, response.json())

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()
