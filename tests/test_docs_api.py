import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import src.server.api as server_api
from src.errors import NotFoundError
from src.ingest.ordering import OrderTable
from src.server.documents import get_docs_service
from src.server.documents.service import DocsService
from src.server.settings import Settings


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _service(root: Path) -> DocsService:
    _write(root, "README.md", "# Home\n\nLanding page.\n")
    _write(root, "a.md", "# Alpha\n\nFirst para.\n")
    _write(root, "guide/README.md", "---\ntitle: The Guide\n---\nGuide overview.\n")
    _write(root, "guide/b.md", "---\ntitle: Beta\norder: 1\n---\nSecond para.\n\n## Details\n")
    _write(root, "guide/c.md", "---\ntitle: Gamma\norder: 2\n---\nThird para.\n")
    return DocsService(Settings(docs_root=root), order_table=OrderTable())


@pytest.fixture()
def client(tmp_path):
    service = _service(tmp_path)
    server_api.app.dependency_overrides[get_docs_service] = lambda: service
    try:
        yield TestClient(server_api.app)
    finally:
        server_api.app.dependency_overrides.clear()


def test_tree_endpoint(client):
    response = client.get("/api/docs")

    assert response.status_code == 200
    tree = response.json()["tree"]
    assert [node["path"] for node in tree] == ["a", "guide"]
    assert "children" not in tree[0]
    assert tree[1]["name"] == "The Guide"
    assert [child["path"] for child in tree[1]["children"]] == ["guide/b", "guide/c"]
    assert tree[1]["children"][0]["meta"]["order"] == 1


def test_search_endpoint(client):
    response = client.get("/api/docs/search", params={"q": "beta"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["query"] == "beta"
    assert [result["ref"] for result in payload["results"]] == ["guide/b"]
    assert payload["results"][0]["highlights"]["title"] == "<mark>Beta</mark>"


def test_search_requires_query(client):
    assert client.get("/api/docs/search").status_code == 400
    assert client.get("/api/docs/search", params={"q": "   "}).status_code == 400


def test_invalid_search_syntax_returns_no_results(client):
    response = client.get("/api/docs/search", params={"q": "unknown:beta"})

    assert response.status_code == 200
    assert response.json() == {"results": [], "query": "unknown:beta"}


def test_document_endpoint(client):
    response = client.get("/api/docs/guide/b")

    assert response.status_code == 200
    payload = response.json()
    assert payload["meta"]["title"] == "Beta"
    assert payload["headings"] == [{"text": "Details", "level": 2, "id": "details"}]
    assert '<h2 id="details">Details</h2>' in payload["html"]
    assert payload["excerpt"] == "Second para."


def test_category_path_resolves_to_index_document(client):
    response = client.get("/api/docs/guide")

    assert response.status_code == 200
    assert response.json()["meta"]["title"] == "The Guide"


def test_unknown_document_is_404(client):
    assert client.get("/api/docs/guide/missing").status_code == 404
    assert client.get("/api/docs/nowhere").status_code == 404


def test_healthz_reports_index_state(client):
    client.get("/api/docs/search", params={"q": "alpha"})

    payload = client.get("/api/healthz").json()

    assert payload["status"] == "ok"
    assert payload["documents"] == 5


def test_service_document_lookup_without_index(tmp_path):
    service = _service(tmp_path)

    assert not service.holder.ready
    assert service.get_document("a").meta.title == "Alpha"
    assert service.get_document("/guide/").meta.title == "The Guide"
    with pytest.raises(NotFoundError):
        service.get_document("../outside")
    with pytest.raises(NotFoundError):
        service.get_document("")


def test_service_prefers_published_side_table(tmp_path):
    service = _service(tmp_path)
    service.holder.rebuild()

    cached = service.holder.current().get("guide/b")

    assert service.get_document("guide/b") is cached


def test_service_clamps_search_limit(tmp_path):
    service = _service(tmp_path)
    service.settings = Settings(docs_root=tmp_path, max_search_limit=1)

    assert len(service.search("para")) == 1


def test_service_stop_closes_published_index(tmp_path):
    service = _service(tmp_path)
    service.holder.rebuild()

    asyncio.run(service.stop())

    assert not service.holder.ready
