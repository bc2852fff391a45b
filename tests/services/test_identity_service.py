import pytest

from campus_repair.core.errors import DuplicateEmail, InvalidCredentials, ValidationError

ADMIN_EMAIL = 'admin@campus.com'
ADMIN_PASSWORD = 'Admin@123456'


def _register(identity, **overrides):
    values = {
        'name': 'Ana Student',
        'email': 'ana@campus.edu',
        'password': 'secret123',
        'confirm_password': 'secret123',
    }
    values.update(overrides)
    return identity.register(**values)


def test_register_creates_student_and_returns_token(container) -> None:
    token, user = _register(container.identity_service, student_id='S-1', department='Physics')

    claims = container.credentials.verify_token(token)
    assert user.role == 'student'
    assert user.student_id == 'S-1'
    assert user.department == 'Physics'
    assert user.hashed_password != 'secret123'
    assert (claims.user_id, claims.email, claims.role) == (user.id, 'ana@campus.edu', 'student')


@pytest.mark.parametrize(
    'overrides',
    [
        {'name': ''},
        {'name': '   '},
        {'email': None},
        {'password': ''},
        {'confirm_password': None},
        {'password': 'abc12', 'confirm_password': 'abc12'},
        {'confirm_password': 'secret124'},
    ],
)
def test_register_rejects_invalid_input(container, overrides: dict) -> None:
    with pytest.raises(ValidationError):
        _register(container.identity_service, **overrides)

    assert container.users.find_by_email('ana@campus.edu') is None


def test_register_rejects_duplicate_email(container) -> None:
    _register(container.identity_service)

    with pytest.raises(DuplicateEmail):
        _register(container.identity_service, name='Someone Else')


def test_register_rejects_email_held_by_admin(container) -> None:
    with pytest.raises(DuplicateEmail):
        _register(container.identity_service, email=ADMIN_EMAIL)


def test_login_issues_token_for_matching_role(container) -> None:
    _, registered = _register(container.identity_service)

    token, user = container.identity_service.login('ana@campus.edu', 'secret123', role='student')

    assert user.id == registered.id
    assert container.credentials.verify_token(token).role == 'student'


def test_login_does_not_cross_roles(container) -> None:
    _register(container.identity_service)

    with pytest.raises(InvalidCredentials):
        container.identity_service.login('ana@campus.edu', 'secret123', role='admin')
    with pytest.raises(InvalidCredentials):
        container.identity_service.login(ADMIN_EMAIL, ADMIN_PASSWORD, role='student')


def test_login_failures_are_indistinguishable(container) -> None:
    _register(container.identity_service)

    with pytest.raises(InvalidCredentials) as unknown_email:
        container.identity_service.login('nobody@campus.edu', 'secret123')
    with pytest.raises(InvalidCredentials) as wrong_password:
        container.identity_service.login('ana@campus.edu', 'wrong-password')
    with pytest.raises(InvalidCredentials) as missing_password:
        container.identity_service.login('ana@campus.edu', '')

    assert unknown_email.value.message == wrong_password.value.message == missing_password.value.message
    assert unknown_email.value.status_code == wrong_password.value.status_code == 401


def test_admin_login_uses_bootstrapped_account(container) -> None:
    token, user = container.identity_service.login(ADMIN_EMAIL, ADMIN_PASSWORD, role='admin')

    assert user.role == 'admin'
    assert container.credentials.verify_token(token).role == 'admin'


def test_bootstrap_admin_is_idempotent(container) -> None:
    user, created = container.identity_service.bootstrap_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    other, other_created = container.identity_service.bootstrap_admin('second@campus.com', 'Admin@999')

    assert not created
    assert not other_created
    assert other.id == user.id
    assert container.users.find_by_email('second@campus.com') is None


def test_bootstrap_admin_skips_without_credentials(container) -> None:
    assert container.identity_service.bootstrap_admin(None, None) == (None, False)
