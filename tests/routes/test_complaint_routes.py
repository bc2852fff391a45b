import pytest

ADMIN_EMAIL = 'admin@campus.com'
ADMIN_PASSWORD = 'Admin@123456'

COMPLAINT_FORM = {
    'title': 'Broken Projector',
    'description': 'Projector in Room 101 is flickering.',
    'location': 'Room 101',
    'category': 'Classroom',
}


def _auth(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


def _register(client, email: str = 'ana@campus.edu', name: str = 'Ana Student') -> str:
    response = client.post(
        '/auth/register',
        json={'name': name, 'email': email, 'password': 'secret123', 'confirmPassword': 'secret123'},
    )
    assert response.status_code == 201
    return response.json()['token']


@pytest.fixture
def admin_token(client) -> str:
    response = client.post('/auth/admin-login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.json()['token']


@pytest.fixture
def student_token(client) -> str:
    return _register(client)


def _submit(client, token: str, **overrides) -> dict:
    response = client.post('/complaints', data={**COMPLAINT_FORM, **overrides}, headers=_auth(token))
    assert response.status_code == 201, response.text
    return response.json()['complaint']


def test_submit_returns_complaint_with_defaults(client, student_token: str) -> None:
    complaint = _submit(client, student_token)

    assert complaint['status'] == 'Pending'
    assert complaint['priority'] == 'Medium'
    assert complaint['remarks'] == ''
    assert complaint['photo'] is None
    assert complaint['studentName'] == 'Ana Student'
    assert complaint['studentEmail'] == 'ana@campus.edu'
    assert {'reportedBy', 'createdAt', 'updatedAt'} <= complaint.keys()


def test_submit_with_photo_serves_upload(client, student_token: str) -> None:
    response = client.post(
        '/complaints',
        data=COMPLAINT_FORM,
        files={'photo': ('leak.png', b'png-bytes', 'image/png')},
        headers=_auth(student_token),
    )

    photo = response.json()['complaint']['photo']
    assert response.status_code == 201
    assert client.get(f'/uploads/{photo}').content == b'png-bytes'


def test_submit_rejects_non_image_upload(client, student_token: str) -> None:
    response = client.post(
        '/complaints',
        data=COMPLAINT_FORM,
        files={'photo': ('notes.txt', b'hello', 'text/plain')},
        headers=_auth(student_token),
    )

    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Only image files are allowed'}


def test_submit_missing_fields_is_400(client, student_token: str) -> None:
    response = client.post('/complaints', data={'title': 'Only a title'}, headers=_auth(student_token))

    assert response.status_code == 400
    assert response.json()['success'] is False


def test_protected_routes_require_token(client) -> None:
    assert client.get('/complaints/my').status_code == 401
    assert client.get('/complaints').status_code == 401
    assert client.post('/complaints', data=COMPLAINT_FORM).status_code == 401
    assert client.put('/complaints/1', json={'status': 'Completed'}).status_code == 401
    assert client.delete('/complaints/1').status_code == 401
    assert client.get('/complaints/stats/dashboard', headers=_auth('expired.or.bad')).status_code == 401


def test_student_listing_all_complaints_is_forbidden(client, student_token: str) -> None:
    _submit(client, student_token)

    response = client.get('/complaints', headers=_auth(student_token))

    assert response.status_code == 403
    assert response.json()['success'] is False


@pytest.mark.parametrize(
    ('method', 'path'),
    [
        ('put', '/complaints/1'),
        ('delete', '/complaints/1'),
        ('get', '/complaints/stats/dashboard'),
    ],
)
def test_student_cannot_use_admin_routes(client, student_token: str, method: str, path: str) -> None:
    _submit(client, student_token)

    response = client.request(method.upper(), path, headers=_auth(student_token))

    assert response.status_code == 403


def test_admin_cannot_submit(client, admin_token: str) -> None:
    response = client.post('/complaints', data=COMPLAINT_FORM, headers=_auth(admin_token))

    assert response.status_code == 403


def test_my_complaints_are_isolated_per_student(client) -> None:
    ana = _register(client)
    ben = _register(client, email='ben@campus.edu', name='Ben Student')
    _submit(client, ana, title='Ana issue')
    _submit(client, ben, title='Ben issue')

    response = client.get('/complaints/my', headers=_auth(ana))

    body = response.json()
    assert response.status_code == 200
    assert body['count'] == 1
    assert [c['title'] for c in body['complaints']] == ['Ana issue']


def test_get_single_complaint_checks_ownership(client, admin_token: str) -> None:
    ana = _register(client)
    ben = _register(client, email='ben@campus.edu', name='Ben Student')
    complaint = _submit(client, ana)

    assert client.get(f"/complaints/{complaint['id']}", headers=_auth(ana)).status_code == 200
    assert client.get(f"/complaints/{complaint['id']}", headers=_auth(admin_token)).status_code == 200
    foreign = client.get(f"/complaints/{complaint['id']}", headers=_auth(ben))
    missing = client.get('/complaints/9999', headers=_auth(ben))
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()
    assert client.get('/complaints/9999', headers=_auth(admin_token)).status_code == 404


def test_end_to_end_admin_resolves_complaint(client) -> None:
    student = _register(client)
    original = _submit(client, student)
    admin = client.post('/auth/admin-login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD}).json()['token']

    update = client.put(
        f"/complaints/{original['id']}",
        json={'status': 'Completed', 'priority': 'High', 'remarks': 'Fixed'},
        headers=_auth(admin),
    )
    listing = client.get('/complaints', headers=_auth(admin))

    assert update.status_code == 200
    assert listing.status_code == 200
    [listed] = listing.json()['complaints']
    changed = {'status', 'priority', 'remarks', 'updatedAt'}
    assert (listed['status'], listed['priority'], listed['remarks']) == ('Completed', 'High', 'Fixed')
    assert {k: v for k, v in listed.items() if k not in changed} == {
        k: v for k, v in original.items() if k not in changed
    }


def test_update_with_only_remarks_leaves_other_fields(client, student_token: str, admin_token: str) -> None:
    complaint = _submit(client, student_token)
    client.put(f"/complaints/{complaint['id']}", json={'status': 'In-Progress', 'priority': 'Low'}, headers=_auth(admin_token))

    response = client.put(
        f"/complaints/{complaint['id']}",
        json={'remarks': 'x', 'status': None},
        headers=_auth(admin_token),
    )

    updated = response.json()['complaint']
    assert (updated['status'], updated['priority'], updated['remarks']) == ('In-Progress', 'Low', 'x')


def test_update_with_invalid_status_is_400_and_unchanged(client, student_token: str, admin_token: str) -> None:
    complaint = _submit(client, student_token)

    response = client.put(
        f"/complaints/{complaint['id']}",
        json={'status': 'Closed', 'remarks': 'ignored'},
        headers=_auth(admin_token),
    )
    [stored] = client.get('/complaints', headers=_auth(admin_token)).json()['complaints']

    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Invalid status'}
    assert stored == complaint


def test_update_with_empty_select_values_keeps_status_and_priority(client, student_token: str, admin_token: str) -> None:
    complaint = _submit(client, student_token)

    response = client.put(
        f"/complaints/{complaint['id']}",
        json={'status': '', 'priority': '', 'remarks': 'Looking into it'},
        headers=_auth(admin_token),
    )

    updated = response.json()['complaint']
    assert response.status_code == 200
    assert (updated['status'], updated['priority'], updated['remarks']) == ('Pending', 'Medium', 'Looking into it')


def test_update_unknown_complaint_is_404(client, admin_token: str) -> None:
    for complaint_id in ('9999', 'not-an-id'):
        response = client.put(f'/complaints/{complaint_id}', json={'status': 'Completed'}, headers=_auth(admin_token))
        assert response.status_code == 404


def test_delete_twice_returns_404(client, student_token: str, admin_token: str) -> None:
    complaint = _submit(client, student_token)

    first = client.delete(f"/complaints/{complaint['id']}", headers=_auth(admin_token))
    second = client.delete(f"/complaints/{complaint['id']}", headers=_auth(admin_token))

    assert first.status_code == 200
    assert first.json() == {'success': True, 'message': 'Complaint deleted successfully'}
    assert second.status_code == 404
    assert second.json() == {'success': False, 'message': 'Complaint not found'}


def test_dashboard_stats(client, student_token: str, admin_token: str) -> None:
    first = _submit(client, student_token)
    _submit(client, student_token, title='Second')
    client.put(f"/complaints/{first['id']}", json={'status': 'Completed'}, headers=_auth(admin_token))

    response = client.get('/complaints/stats/dashboard', headers=_auth(admin_token))

    assert response.status_code == 200
    assert response.json()['stats'] == {'total': 2, 'pending': 1, 'inProgress': 0, 'completed': 1}
