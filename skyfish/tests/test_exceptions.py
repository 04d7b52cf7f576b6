from skyfish.exceptions import (
    APIError,
    AuthenticationError,
    DecodeError,
    FolderCycleError,
    FolderTreeError,
    InvalidCredentialsError,
    NotFoundError,
    ServerError,
    SkyfishError,
)


def test_str_includes_context() -> None:
    error = NotFoundError("Missing", endpoint="/media/1")

    assert str(error) == "Missing (code=404, endpoint='/media/1')"
    assert error.code == 404


def test_str_without_context() -> None:
    assert str(SkyfishError("Plain")) == "Plain"


def test_server_error_records_request_id() -> None:
    error = ServerError("Boom", endpoint="/search", request_id="req-1")

    assert error.context["request_id"] == "req-1"
    assert ServerError("Boom").context == {"code": 500, "endpoint": None}


def test_hierarchy() -> None:
    assert issubclass(InvalidCredentialsError, AuthenticationError)
    assert issubclass(NotFoundError, APIError)
    assert issubclass(FolderCycleError, FolderTreeError)
    for error in (APIError, DecodeError, FolderTreeError, AuthenticationError):
        assert issubclass(error, SkyfishError)


def test_folder_cycle_error_keeps_ids() -> None:
    error = FolderCycleError("Cycle", folder_ids=(1, 2))

    assert error.folder_ids == (1, 2)
    assert "folder_ids=(1, 2)" in str(error)
