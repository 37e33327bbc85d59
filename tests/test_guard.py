import pytest

from socialhub import guard
from socialhub.errors import ForbiddenError, NotAuthenticatedError


class Stopped(Exception):
    pass


class FakeStreamlit:
    """Records redirects instead of performing them."""

    def __init__(self):
        self.session_state = {}
        self.switched_to = None

    def markdown(self, *args, **kwargs):
        pass

    def switch_page(self, page):
        self.switched_to = page
        raise Stopped(page)

    def stop(self):
        raise Stopped("stop")


@pytest.fixture
def fake_st(monkeypatch, backend):
    fake = FakeStreamlit()
    monkeypatch.setattr(guard, "st", fake)
    monkeypatch.setattr(guard, "get_client", lambda: backend)
    return fake


def test_current_user_without_session(backend):
    assert guard.current_user(backend) is None


def test_current_user_with_session(backend, alice):
    backend.sign_in_as(alice)
    assert guard.current_user(backend).id == alice.id


def test_check_admin_without_session(backend):
    with pytest.raises(NotAuthenticatedError):
        guard.check_admin(backend)


def test_check_admin_non_admin_is_signed_out(backend, alice):
    backend.sign_in_as(alice)

    with pytest.raises(ForbiddenError):
        guard.check_admin(backend)
    assert backend.auth.get_session() is None


def test_check_admin_missing_profile_is_signed_out(backend):
    ghost = backend.add_user("ghost", with_profile=False)
    backend.sign_in_as(ghost)

    with pytest.raises(ForbiddenError):
        guard.check_admin(backend)
    assert backend.auth.get_session() is None


def test_check_admin_ok(backend):
    admin = backend.add_user("root", is_admin=True)
    backend.sign_in_as(admin)

    assert guard.check_admin(backend).id == admin.id
    assert backend.auth.get_session() is not None


def test_require_login_redirects_anonymous(fake_st):
    with pytest.raises(Stopped):
        guard.require_login()

    assert fake_st.switched_to == guard.LOGIN_PAGE
    assert fake_st.session_state["home_view"] == guard.VIEW_LOGIN


def test_require_login_returns_viewer(fake_st, backend, alice):
    backend.sign_in_as(alice)

    viewer = guard.require_login()

    assert viewer.user_id == alice.id
    assert fake_st.switched_to is None


def test_require_admin_redirects_non_admin_to_admin_login(fake_st, backend, alice):
    backend.sign_in_as(alice)

    with pytest.raises(Stopped):
        guard.require_admin()

    assert backend.auth.get_session() is None
    assert fake_st.switched_to == guard.LOGIN_PAGE
    assert fake_st.session_state["home_view"] == guard.VIEW_ADMIN_LOGIN
    assert "Admin privileges required" in fake_st.session_state["login_flash"]


def test_require_admin_returns_admin_viewer(fake_st, backend):
    admin = backend.add_user("root", is_admin=True)
    backend.sign_in_as(admin)

    viewer = guard.require_admin()

    assert viewer.is_admin
    assert viewer.user_id == admin.id


def test_is_admin_user_treats_read_error_as_not_admin(backend):
    admin = backend.add_user("root", is_admin=True)
    backend.fail("profiles", "select", "upstream timeout")

    assert guard.is_admin_user(backend, admin.id) is False


def test_check_admin_profile_read_error_signs_out(backend):
    admin = backend.add_user("root", is_admin=True)
    backend.sign_in_as(admin)
    backend.fail("profiles", "select", "upstream timeout")

    with pytest.raises(ForbiddenError):
        guard.check_admin(backend)
    assert backend.auth.get_session() is None


def test_require_admin_profile_read_error_redirects(fake_st, backend):
    admin = backend.add_user("root", is_admin=True)
    backend.sign_in_as(admin)
    backend.fail("profiles", "select", "upstream timeout")

    with pytest.raises(Stopped):
        guard.require_admin()

    assert backend.auth.get_session() is None
    assert fake_st.switched_to == guard.LOGIN_PAGE
    assert fake_st.session_state["home_view"] == guard.VIEW_ADMIN_LOGIN
    assert "Admin privileges required" in fake_st.session_state["login_flash"]
