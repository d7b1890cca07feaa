import pytest

from composecli.errors import (
    AlreadyExistsError,
    CanceledError,
    ForbiddenError,
    NotFoundError,
    NotImplementedByBackendError,
    ParsingFailedError,
    StatusError,
    UnknownError,
    UnsupportedFlagError,
    is_already_exists_error,
    is_canceled_error,
    is_forbidden_error,
    is_not_found_error,
    is_not_implemented_error,
    is_parsing_failed_error,
    is_unknown_error,
    is_unsupported_flag_error,
)


def test_is_not_found():
    err = NotFoundError('object "name"')
    assert is_not_found_error(err)
    assert not is_not_found_error(Exception("another error"))


def test_is_already_exists():
    err = AlreadyExistsError('object "name"')
    assert is_already_exists_error(err)
    assert not is_already_exists_error(Exception("another error"))


def test_is_forbidden():
    err = ForbiddenError('object "name"')
    assert is_forbidden_error(err)
    assert not is_forbidden_error(Exception("another error"))


def test_is_unknown():
    err = UnknownError('object "name"')
    assert is_unknown_error(err)
    assert not is_unknown_error(Exception("another error"))


def test_wrapped_message():
    assert str(NotFoundError('object "name"')) == 'object "name": not found'
    assert str(NotFoundError()) == "not found"


def test_cause_chain_is_followed():
    try:
        try:
            raise CanceledError()
        except CanceledError as inner:
            raise RuntimeError("outer") from inner
    except RuntimeError as outer:
        assert is_canceled_error(outer)
        assert not is_not_found_error(outer)


@pytest.mark.parametrize(
    "error, check",
    [
        (UnsupportedFlagError(), is_unsupported_flag_error),
        (NotImplementedByBackendError(), is_not_implemented_error),
        (ParsingFailedError(), is_parsing_failed_error),
        (CanceledError(), is_canceled_error),
    ],
)
def test_checks_match_their_kind(error, check):
    assert check(error)
    assert not check(ValueError("other"))
    assert not check(None)


def test_not_implemented_is_builtin_kind():
    with pytest.raises(NotImplementedError) as info:
        raise NotImplementedByBackendError("build")
    assert str(info.value) == "build: not implemented"
    assert is_not_implemented_error(info.value)


def test_status_error():
    err = StatusError(130, "canceled")
    assert err.status_code == 130
    assert str(err) == "canceled"