"""Tests for snapshot models."""

import pytest
from pydantic import ValidationError

from request_accessor.models.core import FileUpload, RequestContext, UploadError


class TestRequestContext:
    """Tests for RequestContext."""

    def test_defaults(self) -> None:
        context = RequestContext()
        assert context.method == "GET"
        assert context.uri == ""
        assert context.headers == {}
        assert context.query_params == {}
        assert context.body_data == {}
        assert context.files == {}
        assert context.client_ip == ""

    @pytest.mark.parametrize("method", [None, ""])
    def test_missing_method_defaults_to_get(self, method) -> None:
        assert RequestContext(method=method).method == "GET"

    def test_missing_uri_defaults_to_empty(self) -> None:
        assert RequestContext(uri=None).uri == ""

    def test_none_mappings_become_empty(self) -> None:
        context = RequestContext(headers=None, query_params=None, body_data=None, files=None)
        assert context.headers == {}
        assert context.files == {}

    def test_method_uppercased(self) -> None:
        assert RequestContext(method="delete").method == "DELETE"

    def test_frozen(self) -> None:
        context = RequestContext()
        with pytest.raises(ValidationError):
            context.method = "POST"  # type: ignore[misc]

    def test_nested_values_keep_types(self) -> None:
        context = RequestContext(body_data={"n": 1, "f": 1.5, "b": True, "s": "1", "l": [1, "a"], "m": {"k": None}})
        assert context.body_data == {"n": 1, "f": 1.5, "b": True, "s": "1", "l": [1, "a"], "m": {"k": None}}
        assert type(context.body_data["b"]) is bool
        assert type(context.body_data["s"]) is str

    def test_files_from_mappings(self) -> None:
        context = RequestContext(files={"doc": {"name": "a.txt", "size": 3, "error": 4}})
        assert context.files["doc"].error is UploadError.NO_FILE


class TestFileUpload:
    """Tests for FileUpload."""

    def test_defaults(self) -> None:
        upload = FileUpload(name="a.bin")
        assert upload.type == "application/octet-stream"
        assert upload.tmp_name is None
        assert upload.size == 0
        assert upload.ok

    def test_error_not_ok(self) -> None:
        assert not FileUpload(name="a.bin", error=UploadError.PARTIAL).ok

    def test_unknown_error_code_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FileUpload(name="a.bin", error=5)

    def test_content_hidden_from_repr(self) -> None:
        assert "secret" not in repr(FileUpload(name="a.txt", content=b"secret"))
