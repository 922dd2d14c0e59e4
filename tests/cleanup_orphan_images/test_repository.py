import pytest
from unittest.mock import patch, MagicMock

from repository import CleanupOrphanImagesRepository
from shared.cloudinary_client import AssetEnumerationError


def _snapshot(doc_id: str, data, exists: bool = True) -> MagicMock:
    snap = MagicMock()
    snap.id = doc_id
    snap.exists = exists
    snap.to_dict.return_value = data
    return snap


def _page(public_ids, next_cursor=None) -> dict:
    page = {"resources": [{"public_id": p, "format": "jpg"} for p in public_ids]}
    if next_cursor:
        page["next_cursor"] = next_cursor
    return page


@pytest.fixture
def mock_firestore():
    with patch("repository.get_firestore_client") as mock_get_client:
        mock_db = MagicMock()
        mock_get_client.return_value = mock_db
        yield mock_db


@pytest.fixture
def mock_cloudinary():
    with patch("repository.CloudinaryClient") as mock_cls:
        instance = MagicMock()
        mock_cls.return_value = instance
        yield instance


@pytest.fixture
def repo(config, mock_firestore, mock_cloudinary) -> CleanupOrphanImagesRepository:
    return CleanupOrphanImagesRepository(config)


class TestIterProducts:
    """Leitura da coleção products."""

    def test_yields_id_and_data_for_each_document(self, repo, mock_firestore) -> None:
        mock_firestore.collection.return_value.stream.return_value = [
            _snapshot("p1", {"imageUrls": ["a"]}),
            _snapshot("p2", None),
        ]

        result = list(repo.iter_products())

        mock_firestore.collection.assert_called_once_with("products")
        assert result == [("p1", {"imageUrls": ["a"]}), ("p2", {})]


class TestGetSettings:
    """Leitura de settings/{key}."""

    def test_returns_data_when_document_exists(self, repo, mock_firestore) -> None:
        doc = mock_firestore.collection.return_value.document.return_value
        doc.get.return_value = _snapshot("store_details", {"logoUrl": "x"})

        assert repo.get_settings("store_details") == {"logoUrl": "x"}
        mock_firestore.collection.assert_called_once_with("settings")
        mock_firestore.collection.return_value.document.assert_called_once_with("store_details")

    def test_returns_none_when_document_missing(self, repo, mock_firestore) -> None:
        doc = mock_firestore.collection.return_value.document.return_value
        doc.get.return_value = _snapshot("hero_slider", None, exists=False)

        assert repo.get_settings("hero_slider") is None


class TestListStoredPublicIds:
    """Paginação da Search API pelo next_cursor."""

    def test_single_page_without_cursor(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.return_value = _page(["sundorica/a", "sundorica/b"])

        assert repo.list_stored_public_ids() == ["sundorica/a", "sundorica/b"]
        mock_cloudinary.search_page.assert_called_once_with(
            "resource_type:image AND folder=sundorica", 500, None
        )

    def test_chains_cursors_and_unions_all_pages(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.side_effect = [
            _page(["a", "b", "c"], next_cursor="cur-1"),
            _page(["d", "e"], next_cursor="cur-2"),
            _page(["f"]),
        ]

        result = repo.list_stored_public_ids()

        assert result == ["a", "b", "c", "d", "e", "f"]
        cursors = [c.args[2] for c in mock_cloudinary.search_page.call_args_list]
        assert cursors == [None, "cur-1", "cur-2"]

    def test_stops_on_first_page_without_cursor(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.side_effect = [
            _page(["a"], next_cursor="cur-1"),
            _page(["b"]),
            _page(["never"]),
        ]

        assert repo.list_stored_public_ids() == ["a", "b"]
        assert mock_cloudinary.search_page.call_count == 2

    def test_duplicates_across_pages_collapse(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.side_effect = [
            _page(["a", "b"], next_cursor="cur-1"),
            _page(["b", "c"]),
        ]

        assert repo.list_stored_public_ids() == ["a", "b", "c"]

    def test_empty_folder_returns_empty_list(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.return_value = {"resources": []}

        assert repo.list_stored_public_ids() == []

    def test_page_failure_propagates(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.side_effect = [
            _page(["a"], next_cursor="cur-1"),
            AssetEnumerationError("timeout"),
        ]

        with pytest.raises(AssetEnumerationError):
            repo.list_stored_public_ids()

    def test_malformed_resources_raise(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.return_value = {"resources": "oops"}

        with pytest.raises(AssetEnumerationError):
            repo.list_stored_public_ids()

    def test_resource_without_public_id_is_skipped(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.search_page.return_value = {"resources": [{"format": "jpg"}, {"public_id": "a"}]}

        assert repo.list_stored_public_ids() == ["a"]


class TestDeleteResources:
    """Repasse da deleção ao cliente do Cloudinary."""

    def test_delegates_to_cloudinary_client(self, repo, mock_cloudinary) -> None:
        mock_cloudinary.delete_resources.return_value = {"deleted": {"a": "deleted"}}

        assert repo.delete_resources(["a"]) == {"deleted": {"a": "deleted"}}
        mock_cloudinary.delete_resources.assert_called_once_with(["a"])
