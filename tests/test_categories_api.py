"""
Tests for /api/categories, /api/auth and the health check.
"""

from faker import Faker

fake = Faker()


class TestCategories:

    def test_create_tree_and_list(self, client, auth_headers):
        root = client.post('/api/categories', json={'name': 'Lectures'}, headers=auth_headers)
        child = client.post('/api/categories', json={
            'name': 'Science', 'parent_id': root.json['data']['id']
        }, headers=auth_headers)

        assert root.status_code == 201
        assert child.status_code == 201

        tree = client.get('/api/categories').json['data']
        assert len(tree) == 1
        assert tree[0]['children'][0]['name'] == 'Science'

    def test_unknown_parent(self, client, auth_headers):
        response = client.post('/api/categories', json={'name': 'Orphan', 'parent_id': 99999}, headers=auth_headers)

        assert response.status_code == 404

    def test_missing_name(self, client, auth_headers):
        response = client.post('/api/categories', json={}, headers=auth_headers)

        assert response.status_code == 400

    def test_delete_refused_with_children(self, client, auth_headers, category_tree):
        response = client.delete(f"/api/categories/{category_tree['root']}", headers=auth_headers)

        assert response.status_code == 400

    def test_delete_leaf_unlinks_posts(self, client, auth_headers, category_tree, make_post):
        post = make_post(category_ids=[category_tree['grandchild'], category_tree['other']])

        response = client.delete(f"/api/categories/{category_tree['grandchild']}", headers=auth_headers)
        fetched = client.get(f'/api/posts/{post.id}', headers=auth_headers)

        assert response.status_code == 200
        assert [c['id'] for c in fetched.json['data']['categories']] == [category_tree['other']]

    def test_get_unknown(self, client, db_session):
        assert client.get('/api/categories/99999').status_code == 404


class TestAuth:

    def test_register_and_login(self, client, db_session):
        email = fake.unique.email()
        registered = client.post('/api/auth/register', json={
            'username': fake.user_name() + 'x1',
            'email': email,
            'password': 'securePassword123',
        })
        login = client.post('/api/auth/login', json={'email': email, 'password': 'securePassword123'})

        assert registered.status_code == 201
        assert login.status_code == 200
        assert login.json['token']

    def test_duplicate_email(self, client, test_user):
        response = client.post('/api/auth/register', json={
            'username': 'someone_else',
            'email': test_user['email'],
            'password': 'pw123456',
        })

        assert response.status_code == 409

    def test_wrong_password(self, client, test_user):
        response = client.post('/api/auth/login', json={'email': test_user['email'], 'password': 'wrong'})

        assert response.status_code == 401

    def test_profile(self, client, auth_headers, test_user):
        response = client.get('/api/auth/profile', headers=auth_headers)

        assert response.json['data']['email'] == test_user['email']


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.json['status'] == 'ok'
